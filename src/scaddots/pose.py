"""Oriented points in space.

A :class:`Pose` couples a position with an orthonormal rotation frame.
Poses are immutable values; every operation returns a new pose.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from scaddots import geom, xform
from scaddots.geom import Vec3
from scaddots.xform import Rot3


@dataclass(frozen=True)
class Pose:
    """Position plus rotation frame.

    ``rotation`` is a row-major 3x3 matrix whose columns are the pose's
    local X, Y and Z axes expressed in world coordinates.
    """

    position: Vec3 = geom.ORIGIN
    rotation: Rot3 = field(default=xform.IDENTITY)

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", geom.vec3(self.position))
        rot = xform.rot3(self.rotation)
        if not xform.is_orthonormal(rot):
            raise ValueError(f"pose rotation is not orthonormal: {rot}")
        object.__setattr__(self, "rotation", rot)

    # ---------------------------------------------------------------
    # constructors
    # ---------------------------------------------------------------

    @classmethod
    def identity(cls) -> "Pose":
        return cls()

    @classmethod
    def at(cls, x: float, y: float, z: float) -> "Pose":
        return cls((x, y, z))

    @classmethod
    def from_axis_angle(cls, axis: Sequence[float], degrees: float,
                        position: Sequence[float] = geom.ORIGIN) -> "Pose":
        return cls(tuple(position), xform.rotation(tuple(axis), degrees))

    @classmethod
    def from_quaternion(cls, w: float, x: float, y: float, z: float,
                        position: Sequence[float] = geom.ORIGIN) -> "Pose":
        return cls(tuple(position), xform.from_quaternion(w, x, y, z))

    # ---------------------------------------------------------------
    # algebra
    # ---------------------------------------------------------------

    def compose(self, other: "Pose") -> "Pose":
        """Apply ``other`` in the local frame of this pose."""
        return Pose(
            geom.add(self.position, xform.mul_vec(self.rotation, other.position)),
            xform.matmul(self.rotation, other.rotation),
        )

    def inverse(self) -> "Pose":
        rot_t = xform.transpose(self.rotation)
        return Pose(geom.neg(xform.mul_vec(rot_t, self.position)), rot_t)

    def apply(self, point: Sequence[float]) -> Vec3:
        """Map a point from this pose's local frame to world coordinates."""
        return geom.add(self.position, xform.mul_vec(self.rotation, point))

    def apply_vector(self, vector: Sequence[float]) -> Vec3:
        """Rotate a direction into world coordinates (no translation)."""
        return xform.mul_vec(self.rotation, vector)

    def axis(self, which) -> Vec3:
        """The pose's local ``'x'``, ``'y'`` or ``'z'`` axis in world space."""
        return xform.getcol(self.rotation, geom.axis_index(which))

    def translate(self, offset: Sequence[float]) -> "Pose":
        return Pose(geom.add(self.position, offset), self.rotation)

    def rotate(self, rotation: Rot3) -> "Pose":
        """Rotate the pose about the world origin."""
        return Pose(xform.mul_vec(rotation, self.position),
                    xform.matmul(rotation, self.rotation))

    def with_position(self, position: Sequence[float]) -> "Pose":
        return Pose(tuple(position), self.rotation)

    def with_rotation(self, rotation: Rot3) -> "Pose":
        return Pose(self.position, rotation)

    # ---------------------------------------------------------------
    # inspection
    # ---------------------------------------------------------------

    def quaternion(self):
        return xform.to_quaternion(self.rotation)

    def axis_angle(self):
        """``(axis, degrees)`` of the rotation, as OpenSCAD's rotate() takes it."""
        return xform.to_axis_angle(self.rotation)

    def close(self, other: "Pose", tol: float = 1e-6) -> bool:
        if not geom.vclose(self.position, other.position, tol):
            return False
        for row_a, row_b in zip(self.rotation, other.rotation):
            if not geom.vclose(row_a, row_b, tol):
                return False
        return True


def compose(a: Pose, b: Pose) -> Pose:
    """Apply pose ``b`` in the local frame of pose ``a``."""
    return a.compose(b)


def inverse(pose: Pose) -> Pose:
    return pose.inverse()


__all__ = ["Pose", "compose", "inverse"]
