"""Dots: the labelled, oriented anchor points a model is built from."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from scaddots import geom, xform
from scaddots.geom import Vec3
from scaddots.pose import Pose


# direction components below this count as zero when picking a support point
_TIE = 1e-9


def _sign(x: float) -> float:
    if x > _TIE:
        return 1.0
    if x < -_TIE:
        return -1.0
    return 0.0


class DotShape(Enum):
    """Primitive used when a dot is rendered on its own."""
    CUBE = "cube"
    SPHERE = "sphere"
    CYLINDER = "cylinder"


class Corner(Enum):
    """Corners of a unit cube, bottom ring then top ring."""
    P000 = (0, 0, 0)
    P010 = (0, 1, 0)
    P110 = (1, 1, 0)
    P100 = (1, 0, 0)
    P001 = (0, 0, 1)
    P011 = (0, 1, 1)
    P111 = (1, 1, 1)
    P101 = (1, 0, 1)

    def is_high(self, axis) -> bool:
        return self.value[geom.axis_index(axis)] == 1

    def invert(self) -> "Corner":
        x, y, z = self.value
        return Corner((1 - x, 1 - y, 1 - z))


@dataclass(frozen=True)
class Dot:
    """A pose with a size, an optional label and a primitive shape.

    The dot's primitive (cube side, sphere or cylinder diameter) has edge
    length ``size`` and is centred on ``pose.position``.  Shapes and
    connectors take their vertices from the surface of that primitive,
    see :meth:`support`.
    """

    pose: Pose = Pose()
    size: float = 1.0
    label: Optional[str] = None
    shape: DotShape = DotShape.CUBE

    def __post_init__(self) -> None:
        if not geom.isgoodnum(self.size) or self.size <= 0:
            raise ValueError(f"dot size must be a positive number, got {self.size!r}")
        if self.label is not None and not isinstance(self.label, str):
            raise ValueError(f"dot label must be a string, got {self.label!r}")
        object.__setattr__(self, "size", float(self.size))

    @classmethod
    def at(cls, x: float, y: float, z: float, label: Optional[str] = None,
           size: float = 1.0, shape: DotShape = DotShape.CUBE) -> "Dot":
        return cls(Pose((x, y, z)), size, label, shape)

    @property
    def position(self) -> Vec3:
        return self.pose.position

    # ---------------------------------------------------------------
    # geometry of the dot's own primitive
    # ---------------------------------------------------------------

    def corner(self, corner: Corner) -> Vec3:
        """World position of one corner of the dot's bounding cube."""
        local = tuple((c - 0.5) * self.size for c in corner.value)
        return self.pose.apply(local)

    def corners(self) -> List[Vec3]:
        return [self.corner(c) for c in Corner]

    def centroid(self) -> Vec3:
        return self.position

    def min_coord(self, axis) -> float:
        i = geom.axis_index(axis)
        return min(p[i] for p in self.corners())

    def max_coord(self, axis) -> float:
        i = geom.axis_index(axis)
        return max(p[i] for p in self.corners())

    def support(self, direction: Sequence[float]) -> Vec3:
        """Point of the dot's primitive furthest along ``direction``.

        Cubes answer with a corner (or an edge or face centre when the
        direction is parallel to a face), spheres with a point on the
        surface, cylinders with a point on a rim circle.  A zero direction
        gives the dot's own position.
        """
        length = geom.mag(direction)
        if length < geom.epsilon:
            return self.position
        local = self.pose.inverse().apply_vector(geom.scale3(direction, 1.0 / length))
        half = self.size / 2.0
        if self.shape is DotShape.SPHERE:
            offset = geom.scale3(local, half)
        elif self.shape is DotShape.CYLINDER:
            radial = (local[0], local[1], 0.0)
            if geom.mag(radial) < _TIE:
                offset = (0.0, 0.0, _sign(local[2]) * half)
            else:
                r = geom.scale3(geom.unit(radial), half)
                offset = (r[0], r[1], _sign(local[2]) * half)
        else:
            offset = tuple(_sign(c) * half for c in local)
        return self.pose.apply(offset)

    def dist(self, other: "Dot") -> float:
        """Distance between dot origins, not between their surfaces."""
        return geom.dist(self.position, other.position)

    # ---------------------------------------------------------------
    # derived dots
    # ---------------------------------------------------------------

    def with_pose(self, pose: Pose) -> "Dot":
        return replace(self, pose=pose)

    def with_label(self, label: Optional[str]) -> "Dot":
        return replace(self, label=label)

    def with_size(self, size: float) -> "Dot":
        return replace(self, size=size)

    def with_shape(self, shape: DotShape) -> "Dot":
        return replace(self, shape=shape)

    def translate(self, offset: Sequence[float]) -> "Dot":
        return self.with_pose(self.pose.translate(offset))

    def translate_to(self, position: Sequence[float]) -> "Dot":
        return self.with_pose(self.pose.with_position(position))

    def rotate(self, rotation) -> "Dot":
        """Rotate the dot about the world origin."""
        return self.with_pose(self.pose.rotate(rotation))

    def transform(self, pose: Pose) -> "Dot":
        """Place this dot in the local frame of ``pose``."""
        return self.with_pose(pose.compose(self.pose))

    def with_coord(self, value: float, axis) -> "Dot":
        pos = list(self.position)
        pos[geom.axis_index(axis)] = value
        return self.translate_to(pos)

    def drop(self, bottom_z: float, shape: Optional[DotShape] = None) -> "Dot":
        """A dot straight below this one, sitting flat with its bottom
        face at ``bottom_z``.  The rotation is reset."""
        return self.drop_along(geom.Z_AXIS, bottom_z, shape)

    def drop_along(self, direction: Sequence[float], bottom_z: float,
                   shape: Optional[DotShape] = None) -> "Dot":
        """Like :meth:`drop` but travel along ``direction`` until the new
        dot's bottom face reaches ``bottom_z``."""
        if geom.close(direction[2], 0.0):
            raise ValueError("drop direction must have a z component")
        target_z = bottom_z + self.size / 2.0
        m = (target_z - self.position[2]) / direction[2]
        pos = geom.add(self.position, geom.scale3(direction, m))
        return Dot(Pose(pos), self.size, self.label, shape or self.shape)

    def explode_radially(self, radius: float, count: int,
                         axis: Optional[Sequence[float]] = None,
                         adjust_rotations: bool = False) -> List["Dot"]:
        """``count`` copies spaced evenly on a circle around this dot.

        The circle lies in the plane normal to ``axis`` (default: the
        dot's local Z).  Labels get the copy index appended.
        """
        if count < 1:
            raise ValueError("count must be at least 1")
        axis = tuple(axis) if axis is not None else self.pose.axis('z')
        to_axis = xform.rotation_between(geom.Z_AXIS, axis)
        dots = []
        for i in range(count):
            degrees = 360.0 * i / count
            spin = xform.rotation(geom.Z_AXIS, degrees)
            offset = xform.mul_vec(to_axis, xform.mul_vec(spin, (radius, 0.0, 0.0)))
            rot = self.pose.rotation
            if adjust_rotations:
                rot = xform.matmul(xform.rotation(axis, degrees), rot)
            label = f"{self.label}{i}" if self.label is not None else None
            dots.append(Dot(Pose(geom.add(self.position, offset), rot),
                            self.size, label, self.shape))
        return dots

    def snake(self, other: "Dot", order: Sequence[str] = ("x", "y", "z")) -> Tuple["Dot", ...]:
        """Taxicab path to ``other``: four dots, moving one axis at a time
        in the given order."""
        indices = [geom.axis_index(a) for a in order]
        if len(indices) != 3 or len(set(indices)) != 3:
            raise ValueError(f"invalid snake axis order: {order}")
        dots = [self]
        for i in indices:
            dots.append(dots[-1].with_coord(other.position[i], i))
        return tuple(dots)


__all__ = ["Dot", "DotShape", "Corner"]
