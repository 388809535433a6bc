## basic 3-vector operations for scad-dots

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

from math import sqrt
from typing import Iterable, Sequence, Tuple

## Vectors and points are plain 3-tuples of floats with no homogeneous
## w component.  Rotation and translation live together in a Pose.

Vec3 = Tuple[float, float, float]

## constants
epsilon = 0.000005

ORIGIN: Vec3 = (0.0, 0.0, 0.0)
X_AXIS: Vec3 = (1.0, 0.0, 0.0)
Y_AXIS: Vec3 = (0.0, 1.0, 0.0)
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


## operations on scalars
## -----------------------

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


def close(a, b, tol=epsilon):
    """ are two scalars the same within ``tol``
    """
    return abs(a - b) < tol


## operations on vectors
## ------------------------

def vec3(value: Sequence[float]) -> Vec3:
    """Coerce an XYZ-like sequence into a float 3-tuple."""

    if len(value) != 3:
        raise ValueError('expected three components, got {}'.format(value))
    for x in value:
        if not isgoodnum(x):
            raise ValueError('bad component in vector: {}'.format(x))
    return (float(value[0]), float(value[1]), float(value[2]))


def isvec3(x):
    """ check to see if argument is a proper 3-vector for our purposes
    """
    return isinstance(x, tuple) and len(x) == 3 and all(isgoodnum(c) for c in x)


def add(a, b):
    """ 3 vector, `a + b`"""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a, b):
    """ 3 vector, `a - b`"""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale3(a, c):
    """ 3 vector ``a`` times scalar ``c``"""
    return (a[0] * c, a[1] * c, a[2] * c)


def neg(a):
    return (-a[0], -a[1], -a[2])


def cross(a, b):
    """ 3 vector ``a`` cross ``b``"""
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def dot(a, b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def dist(a, b):
    """ euclidean distance between two points ``a`` and ``b``"""
    return mag(sub(a, b))


def unit(a):
    """ return ``a`` scaled to unit length"""
    m = mag(a)
    if m < epsilon:
        raise ValueError('cannot normalize zero-length vector')
    return scale3(a, 1.0 / m)


def vclose(a, b, tol=epsilon):
    """ are two vectors the same to within ``tol``"""
    return dist(a, b) < tol


def midpoint(a, b):
    return scale3(add(a, b), 0.5)


## R^3 -> R^3 aggregate functions
## ------------------------------

def centroid(points: Iterable[Sequence[float]]) -> Vec3:
    """ arithmetic mean of a non-empty collection of points"""
    xs = ys = zs = 0.0
    n = 0
    for p in points:
        xs += p[0]
        ys += p[1]
        zs += p[2]
        n += 1
    if n == 0:
        raise ValueError('centroid of an empty point set')
    inv = 1.0 / n
    return (xs * inv, ys * inv, zs * inv)


## Newell's method: sums edge contributions around the loop, which
## gives a well-defined normal for non-triangular and slightly
## non-planar polygons where a single cross product would not.
def newell(points: Sequence[Sequence[float]]) -> Vec3:
    """ unnormalized polygon normal of a closed loop of points, with
    magnitude equal to twice the polygon area"""
    nx = ny = nz = 0.0
    count = len(points)
    for i in range(count):
        cur = points[i]
        nxt = points[(i + 1) % count]
        nx += (cur[1] - nxt[1]) * (cur[2] + nxt[2])
        ny += (cur[2] - nxt[2]) * (cur[0] + nxt[0])
        nz += (cur[0] - nxt[0]) * (cur[1] + nxt[1])
    return (nx, ny, nz)


def polygon_normal(points):
    """ unit normal of a polygon, or ``None`` if it has no area"""
    n = newell(points)
    m = mag(n)
    if m <= epsilon:
        return None
    return scale3(n, 1.0 / m)


def orient3d(a, b, c, d):
    """ six times the signed volume of tetrahedron ``abcd``; positive
    when ``d`` lies on the side of plane ``abc`` its normal points to"""
    return dot(cross(sub(b, a), sub(c, a)), sub(d, a))


def axis_index(axis):
    """ map 'x', 'y', 'z' (any case) or 0, 1, 2 to a component index"""
    if isinstance(axis, str):
        try:
            return 'xyz'.index(axis.lower())
        except ValueError:
            raise ValueError('bad axis: {}'.format(axis)) from None
    if axis in (0, 1, 2) and not isinstance(axis, bool):
        return axis
    raise ValueError('bad axis: {}'.format(axis))


__all__ = [
    'Vec3',
    'epsilon',
    'ORIGIN',
    'X_AXIS',
    'Y_AXIS',
    'Z_AXIS',
    'isgoodnum',
    'close',
    'vec3',
    'isvec3',
    'add',
    'sub',
    'scale3',
    'neg',
    'cross',
    'dot',
    'mag',
    'dist',
    'unit',
    'vclose',
    'midpoint',
    'centroid',
    'newell',
    'polygon_normal',
    'orient3d',
    'axis_index',
]
