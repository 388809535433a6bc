## rotation matrix operations for scad-dots poses

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2024 scad-dots contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from __future__ import annotations

from math import acos, atan2, cos, degrees, radians, sin, sqrt
from typing import Tuple

from scaddots import geom

## a rotation is represented as a tuple of three row tuples.  Vectors
## are treated as column vectors, so ``mul_vec(R, v)`` computes Rv.
## Rotations are immutable; every operation returns a new tuple.

Row = Tuple[float, float, float]
Rot3 = Tuple[Row, Row, Row]

IDENTITY: Rot3 = ((1.0, 0.0, 0.0),
                  (0.0, 1.0, 0.0),
                  (0.0, 0.0, 1.0))


def identity() -> Rot3:
    return IDENTITY


def rot3(rows) -> Rot3:
    """coerce a 3x3 nested sequence into a rotation tuple"""
    if len(rows) != 3:
        raise ValueError('bad thing used in attempt to initialize rotation: {}'.format(rows))
    return (geom.vec3(rows[0]), geom.vec3(rows[1]), geom.vec3(rows[2]))


def getcol(m: Rot3, j: int) -> Row:
    if j < 0 or j > 2:
        raise ValueError('bad column passed to getcol: {}'.format(j))
    return (m[0][j], m[1][j], m[2][j])


def transpose(m: Rot3) -> Rot3:
    return (getcol(m, 0), getcol(m, 1), getcol(m, 2))


# matrix multiply, returns AB
def matmul(a: Rot3, b: Rot3) -> Rot3:
    cols = (getcol(b, 0), getcol(b, 1), getcol(b, 2))
    return tuple(tuple(geom.dot(row, col) for col in cols) for row in a)


# matrix-vector multiply, returns Mv
def mul_vec(m: Rot3, v) -> Row:
    return (geom.dot(m[0], v), geom.dot(m[1], v), geom.dot(m[2], v))


def is_orthonormal(m, tol=1e-6) -> bool:
    """true if ``m`` is a proper rotation: R R^T = I and det R = +1"""
    try:
        m = rot3(m)
    except (TypeError, ValueError):
        return False
    prod = matmul(m, transpose(m))
    for i in range(3):
        for j in range(3):
            want = 1.0 if i == j else 0.0
            if abs(prod[i][j] - want) > tol:
                return False
    return abs(determinant(m) - 1.0) <= tol


def determinant(m: Rot3) -> float:
    return geom.dot(m[0], geom.cross(m[1], m[2]))


def rotation(axis, angle, inverse=False) -> Rot3:
    """return the arbitrary axis rotation matrix for ``angle`` degrees
    about ``axis``"""
    m = geom.mag(axis)
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    u = geom.scale3(axis, 1.0 / m)

    if inverse:
        angle *= -1.0
    rad = radians(angle % 360.0)

    ux, uy, uz = u

    cang = cos(rad)
    cmin = 1.0 - cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    return ((cang + ux * ux * cmin, ux * uy * cmin - uz * sang, ux * uz * cmin + uy * sang),
            (uy * ux * cmin + uz * sang, cang + uy * uy * cmin, uy * uz * cmin - ux * sang),
            (uz * ux * cmin - uy * sang, uz * uy * cmin + ux * sang, cang + uz * uz * cmin))


def rotation_between(a, b) -> Rot3:
    """smallest rotation taking direction ``a`` onto direction ``b``"""
    ua = geom.unit(a)
    ub = geom.unit(b)
    c = max(-1.0, min(1.0, geom.dot(ua, ub)))
    axis = geom.cross(ua, ub)
    if geom.mag(axis) < geom.epsilon:
        if c > 0:
            return IDENTITY
        # antiparallel: any axis perpendicular to a will do
        helper = geom.X_AXIS if abs(ua[0]) < 0.9 else geom.Y_AXIS
        return rotation(geom.cross(ua, helper), 180.0)
    return rotation(axis, degrees(acos(c)))


## quaternion conversions, (w, x, y, z) with w the scalar part

def from_quaternion(w, x, y, z) -> Rot3:
    n = sqrt(w * w + x * x + y * y + z * z)
    if n < geom.epsilon:
        raise ValueError('zero-length quaternion')
    w, x, y, z = w / n, x / n, y / n, z / n
    return ((1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)),
            (2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)),
            (2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)))


def to_quaternion(m: Rot3) -> Tuple[float, float, float, float]:
    """convert a rotation to a unit quaternion with w >= 0"""
    trace = m[0][0] + m[1][1] + m[2][2]
    if trace > 0:
        s = sqrt(trace + 1.0) * 2
        w = 0.25 * s
        x = (m[2][1] - m[1][2]) / s
        y = (m[0][2] - m[2][0]) / s
        z = (m[1][0] - m[0][1]) / s
    elif m[0][0] > m[1][1] and m[0][0] > m[2][2]:
        s = sqrt(1.0 + m[0][0] - m[1][1] - m[2][2]) * 2
        w = (m[2][1] - m[1][2]) / s
        x = 0.25 * s
        y = (m[0][1] + m[1][0]) / s
        z = (m[0][2] + m[2][0]) / s
    elif m[1][1] > m[2][2]:
        s = sqrt(1.0 + m[1][1] - m[0][0] - m[2][2]) * 2
        w = (m[0][2] - m[2][0]) / s
        x = (m[0][1] + m[1][0]) / s
        y = 0.25 * s
        z = (m[1][2] + m[2][1]) / s
    else:
        s = sqrt(1.0 + m[2][2] - m[0][0] - m[1][1]) * 2
        w = (m[1][0] - m[0][1]) / s
        x = (m[0][2] + m[2][0]) / s
        y = (m[1][2] + m[2][1]) / s
        z = 0.25 * s
    if w < 0:
        w, x, y, z = -w, -x, -y, -z
    return (w, x, y, z)


def to_axis_angle(m: Rot3):
    """return ``(axis, degrees)`` for a rotation.  The identity maps to
    a zero angle about +Z, which is what OpenSCAD's rotate() expects"""
    w, x, y, z = to_quaternion(m)
    s = sqrt(x * x + y * y + z * z)
    if s < 1e-12:
        return geom.Z_AXIS, 0.0
    angle = degrees(2.0 * atan2(s, w))
    return (x / s, y / s, z / s), angle


__all__ = [
    'Rot3',
    'IDENTITY',
    'identity',
    'rot3',
    'getcol',
    'transpose',
    'matmul',
    'mul_vec',
    'is_orthonormal',
    'determinant',
    'rotation',
    'rotation_between',
    'from_quaternion',
    'to_quaternion',
    'to_axis_angle',
]
