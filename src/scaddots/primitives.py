"""Standalone solids that are not built from a ring of dots.

These sit in a :class:`~scaddots.graph.Graph` next to shapes, take part
in the same union, difference and intersection, but are never bridged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from scaddots import geom
from scaddots.dot import Dot, DotShape
from scaddots.geom import Vec3
from scaddots.pose import Pose


class CylinderAlign(Enum):
    """Reference points of a cylinder."""
    BOTTOM = "bottom"       # centre of the bottom circle
    TOP = "top"             # centre of the top circle
    CENTROID = "centroid"   # halfway along the axis


@dataclass(frozen=True)
class Cylinder:
    """A cylinder standing on ``pose``: the pose position is the centre of
    the bottom circle and the pose's local Z is the axis."""

    pose: Pose
    diameter: float
    height: float

    def __post_init__(self) -> None:
        for name in ("diameter", "height"):
            value = getattr(self, name)
            if not geom.isgoodnum(value) or value <= 0:
                raise ValueError(f"cylinder {name} must be a positive number, got {value!r}")
            object.__setattr__(self, name, float(value))

    @classmethod
    def aligned(cls, position: Sequence[float], diameter: float, height: float,
                align: CylinderAlign = CylinderAlign.BOTTOM,
                rotation=None) -> "Cylinder":
        """Cylinder whose ``align`` point lands on ``position``."""
        pose = Pose(tuple(position)) if rotation is None else Pose(tuple(position), rotation)
        offset = _align_offset(CylinderAlign(align), height)
        bottom = geom.sub(pose.position, pose.apply_vector(offset))
        return cls(pose.with_position(bottom), diameter, height)

    def unit_axis(self) -> Vec3:
        return self.pose.axis('z')

    def axis(self) -> Vec3:
        return geom.scale3(self.unit_axis(), self.height)

    def pos(self, align: CylinderAlign) -> Vec3:
        return self.pose.apply(_align_offset(CylinderAlign(align), self.height))


def _align_offset(align: CylinderAlign, height: float) -> Vec3:
    if align is CylinderAlign.TOP:
        return (0.0, 0.0, height)
    if align is CylinderAlign.CENTROID:
        return (0.0, 0.0, height / 2.0)
    return geom.ORIGIN


@dataclass(frozen=True)
class Extrusion:
    """A polygon in the XY plane extruded upward.

    The bottom face lies on ``z = bottom_z`` and the solid is
    ``thickness`` tall.
    """

    perimeter: Tuple[Tuple[float, float], ...]
    bottom_z: float
    thickness: float

    def __post_init__(self) -> None:
        perimeter = tuple((float(x), float(y)) for x, y in self.perimeter)
        if len(perimeter) < 3:
            raise ValueError(f"an extrusion needs at least 3 perimeter points, got {len(perimeter)}")
        if not geom.isgoodnum(self.thickness) or self.thickness <= 0:
            raise ValueError(f"extrusion thickness must be positive, got {self.thickness!r}")
        object.__setattr__(self, "perimeter", perimeter)
        object.__setattr__(self, "bottom_z", float(self.bottom_z))
        object.__setattr__(self, "thickness", float(self.thickness))

    @classmethod
    def from_dots(cls, perimeter: Sequence[Dot], thickness: float,
                  bottom_z: float = 0.0) -> "Extrusion":
        """Extrude the polygon through the dots' centres, ignoring their z."""
        return cls(tuple((d.position[0], d.position[1]) for d in perimeter),
                   bottom_z, thickness)


def extrude_z(height: float, polygon: Sequence[Dot], bottom_z: float = 0.0) -> Extrusion:
    return Extrusion.from_dots(polygon, height, bottom_z)


def mark(position: Sequence[float], size: float = 1.0) -> Dot:
    """A small sphere at ``position``, for seeing where a point is."""
    return Dot(Pose(tuple(position)), size, None, DotShape.SPHERE)


Primitive = (Dot, Cylinder, Extrusion)

__all__ = ["Cylinder", "CylinderAlign", "Extrusion", "extrude_z", "mark", "Primitive"]
