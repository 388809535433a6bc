"""Fixed-topology groups of dots and their derived faces.

A :class:`Shape` pairs a :class:`ShapeKind` with an ordered tuple of dots.
Each kind owns a face-index template; :meth:`Shape.faces` applies the
template to the dot positions and winds every face so that its normal
points away from the shape centroid.  Rotating or mirroring the authored
dot order therefore never produces inward-facing facets.

Dot order conventions:

* ``TETRA``: four dots, any order.
* ``TRI`` / ``PRISM``: the bottom ring, then the top ring, with top dot
  ``i`` above bottom dot ``i``.
* ``CUBE``: corners in :class:`scaddots.dot.Corner` order (P000, P010,
  P110, P100, P001, P011, P111, P101), i.e. a 4-sided prism.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from scaddots import geom
from scaddots.config import RenderConfig
from scaddots.dot import Corner, Dot, DotShape
from scaddots.errors import ArityMismatch
from scaddots.geom import Vec3
from scaddots.pose import Pose

logger = logging.getLogger(__name__)

Template = Tuple[Tuple[int, ...], ...]


class ShapeKind(Enum):
    TETRA = "tetra"
    TRI = "tri"
    CUBE = "cube"
    PRISM = "prism"


def _prism_template(sides: int) -> Template:
    bottom = tuple(range(sides))
    top = tuple(range(sides, 2 * sides))
    walls = tuple(
        (i, (i + 1) % sides, sides + (i + 1) % sides, sides + i)
        for i in range(sides)
    )
    return (bottom, top) + walls


_TEMPLATES: Dict[ShapeKind, Template] = {
    ShapeKind.TETRA: ((0, 1, 2), (0, 1, 3), (1, 2, 3), (2, 0, 3)),
    ShapeKind.TRI: _prism_template(3),
    ShapeKind.CUBE: (
        (0, 1, 2, 3),   # z0
        (4, 5, 6, 7),   # z1
        (0, 1, 5, 4),   # x0
        (1, 2, 6, 5),   # y1
        (2, 3, 7, 6),   # x1
        (3, 0, 4, 7),   # y0
    ),
}

_FIXED_ARITY = {
    ShapeKind.TETRA: 4,
    ShapeKind.TRI: 6,
    ShapeKind.CUBE: 8,
}


def arity_ok(kind: ShapeKind, count: int) -> bool:
    if kind is ShapeKind.PRISM:
        return count >= 6 and count % 2 == 0
    return _FIXED_ARITY[kind] == count


def expected_arity(kind: ShapeKind) -> str:
    if kind is ShapeKind.PRISM:
        return "an even number (at least 6) of"
    return str(_FIXED_ARITY[kind])


def face_template(kind: ShapeKind, count: int) -> Template:
    """Face-index template for a ``kind`` shape of ``count`` dots."""
    if not arity_ok(kind, count):
        raise ArityMismatch(kind, expected_arity(kind), count)
    if kind is ShapeKind.PRISM:
        return _prism_template(count // 2)
    return _TEMPLATES[kind]


@dataclass(frozen=True)
class Face:
    """A planar facet: indices into a vertex list and its outward normal.

    Indices run counter-clockwise seen from outside, so ``normal`` follows
    the right-hand rule.
    """

    indices: Tuple[int, ...]
    normal: Vec3

    def __len__(self) -> int:
        return len(self.indices)

    def flipped(self) -> "Face":
        return Face(_reverse_loop(self.indices), geom.neg(self.normal))

    def offset(self, delta: int) -> "Face":
        return Face(tuple(i + delta for i in self.indices), self.normal)


def _reverse_loop(indices: Sequence[int]) -> Tuple[int, ...]:
    # keep the first index in place so reversed faces stay recognisable
    return (indices[0],) + tuple(reversed(indices[1:]))


# largest distance of a vertex from its polygon's plane, relative to the
# polygon's radius, for the polygon to be emitted as one face
PLANAR_TOL = 1e-7


def _is_planar(verts: Sequence[Vec3], normal: Vec3) -> bool:
    c = geom.centroid(verts)
    radius = max(geom.dist(v, c) for v in verts)
    tol = PLANAR_TOL * max(1.0, radius)
    return all(abs(geom.dot(normal, geom.sub(v, c))) <= tol for v in verts)


def _fan(loop: Sequence[int]) -> List[Tuple[int, ...]]:
    return [(loop[0], loop[i], loop[i + 1]) for i in range(1, len(loop) - 1)]


def orient_faces(points: Sequence[Vec3], template: Sequence[Sequence[int]],
                 center: Optional[Vec3] = None) -> List[Face]:
    """Wind every template face so its normal points away from ``center``.

    ``center`` defaults to the centroid of ``points``.  Faces with no
    area are dropped; a face whose plane passes through the centre keeps
    its template order.  A polygon whose vertices are not on one plane is
    split into a fan of triangles from its first index, so a bent quad
    ``(a, b, c, d)`` always breaks along the ``a``-``c`` diagonal.
    """
    if center is None:
        center = geom.centroid(points)
    faces: List[Face] = []
    for loop in template:
        loop = tuple(loop)
        if len(loop) < 3:
            raise ValueError(f"face needs at least 3 indices, got {loop}")
        for i in loop:
            if i < 0 or i >= len(points):
                raise ValueError(f"face index {i} out of range for {len(points)} points")
        verts = [points[i] for i in loop]
        normal = geom.polygon_normal(verts)
        if normal is None:
            logger.debug("dropping zero-area face %s", loop)
            continue
        outward = geom.sub(geom.centroid(verts), center)
        if geom.dot(normal, outward) < 0:
            loop, normal = _reverse_loop(loop), geom.neg(normal)
        if len(loop) > 3 and not _is_planar(verts, normal):
            logger.debug("splitting non-planar face %s", loop)
            for tri in _fan(loop):
                tri_normal = geom.polygon_normal([points[i] for i in tri])
                if tri_normal is not None:
                    faces.append(Face(tri, tri_normal))
            continue
        faces.append(Face(loop, normal))
    return faces


@dataclass(frozen=True)
class Shape:
    """An ordered, fixed-arity group of dots of one :class:`ShapeKind`."""

    kind: ShapeKind
    dots: Tuple[Dot, ...]

    def __post_init__(self) -> None:
        dots = tuple(self.dots)
        for d in dots:
            if not isinstance(d, Dot):
                raise ValueError(f"shape members must be Dots, got {d!r}")
        if not arity_ok(self.kind, len(dots)):
            raise ArityMismatch(self.kind, expected_arity(self.kind), len(dots))
        seen = set()
        for d in dots:
            if d.label is None:
                continue
            if d.label in seen:
                raise ValueError(f"duplicate dot label {d.label!r} in {self.kind.name} shape")
            seen.add(d.label)
        object.__setattr__(self, "dots", dots)

    def __len__(self) -> int:
        return len(self.dots)

    # ---------------------------------------------------------------
    # geometry
    # ---------------------------------------------------------------

    def points(self) -> List[Vec3]:
        return [d.position for d in self.dots]

    def solid_points(self) -> List[Vec3]:
        """Vertices of the rendered solid, one per dot.

        Each dot contributes the point of its primitive furthest from the
        shape's centroid, so a dot's ``size`` pushes the faces meeting at
        it outward by up to half that size.
        """
        center = self.centroid()
        return [d.support(geom.sub(d.position, center)) for d in self.dots]

    def centroid(self) -> Vec3:
        return geom.centroid(self.points())

    def template(self) -> Template:
        return face_template(self.kind, len(self.dots))

    def faces(self) -> List[Face]:
        return orient_faces(self.points(), self.template())

    @property
    def sides(self) -> int:
        """Number of sides of the ring for prism-like kinds."""
        if self.kind is ShapeKind.TETRA:
            return 3
        return len(self.dots) // 2

    def min_coord(self, axis) -> float:
        return min(d.min_coord(axis) for d in self.dots)

    def max_coord(self, axis) -> float:
        return max(d.max_coord(axis) for d in self.dots)

    # ---------------------------------------------------------------
    # labels
    # ---------------------------------------------------------------

    @property
    def labels(self) -> Tuple[Optional[str], ...]:
        return tuple(d.label for d in self.dots)

    def index_of(self, label: str) -> int:
        for i, d in enumerate(self.dots):
            if d.label == label:
                return i
        raise KeyError(label)

    def dot(self, label: str) -> Dot:
        return self.dots[self.index_of(label)]

    def rims(self) -> List[Tuple[str, ...]]:
        """Label loops of every template face whose dots are all labelled."""
        rims = []
        for loop in self.template():
            labels = tuple(self.dots[i].label for i in loop)
            if all(lab is not None for lab in labels):
                rims.append(labels)
        return rims

    def relabel(self, labels: Union[Mapping[str, str], Sequence[Optional[str]], str]) -> "Shape":
        """Return a copy with new labels.

        ``labels`` may be a mapping from old to new label, a sequence with
        one label per dot, or a string prefix prepended to existing labels.
        """
        if isinstance(labels, str):
            new = [labels + d.label if d.label is not None else None for d in self.dots]
        elif isinstance(labels, Mapping):
            new = [labels.get(d.label, d.label) for d in self.dots]
        else:
            new = list(labels)
            if len(new) != len(self.dots):
                raise ValueError(f"expected {len(self.dots)} labels, got {len(new)}")
        return Shape(self.kind, [d.with_label(lab) for d, lab in zip(self.dots, new)])

    # ---------------------------------------------------------------
    # moving the whole shape
    # ---------------------------------------------------------------

    def map(self, fn: Callable[[Dot], Dot]) -> "Shape":
        return Shape(self.kind, [fn(d) for d in self.dots])

    def transform(self, pose: Pose) -> "Shape":
        return self.map(lambda d: d.transform(pose))

    def translate(self, offset: Sequence[float]) -> "Shape":
        return self.map(lambda d: d.translate(offset))

    def rotate(self, rotation) -> "Shape":
        return self.map(lambda d: d.rotate(rotation))


# -------------------------------------------------------------------
# builders
# -------------------------------------------------------------------

def _dot_size(size, config):
    if size is not None:
        return size
    return (config or RenderConfig()).default_dot_size


def _labels_or_none(labels, count):
    if labels is None:
        return [None] * count
    labels = list(labels)
    if len(labels) != count:
        raise ValueError(f"expected {count} labels, got {len(labels)}")
    return labels


def prism(bottom: Sequence[Dot], top: Sequence[Dot],
          kind: ShapeKind = ShapeKind.PRISM) -> Shape:
    """Shape from a bottom ring of dots and the matching top ring."""
    if len(bottom) != len(top):
        raise ArityMismatch(kind, f"matching rings ({len(bottom)} bottom) of", len(bottom) + len(top))
    return Shape(kind, list(bottom) + list(top))


def ring_prism(bottom: Sequence[Dot], top: Sequence[Dot]) -> Shape:
    """Like :func:`prism`, picking ``TRI`` for three-dot rings."""
    kind = ShapeKind.TRI if len(bottom) == 3 else ShapeKind.PRISM
    return prism(bottom, top, kind)


def cuboid(dims: Sequence[float] = (1.0, 1.0, 1.0), pose: Pose = Pose(),
           dot_size: Optional[float] = None, labels: Optional[Sequence[str]] = None,
           shape: DotShape = DotShape.CUBE,
           config: Optional[RenderConfig] = None,
           outside: bool = False) -> Shape:
    """A ``CUBE`` shape whose dots sit on the corners of a box.

    The box spans ``[0, dims]`` in the local frame of ``pose``; every dot
    shares the pose's rotation.  Without ``dot_size`` the dots take
    ``config.default_dot_size``.

    By default ``dims`` measures between dot centres, so the rendered
    solid is one dot size larger along each axis.  With ``outside`` the
    dots are pulled inward by half their size so that, for cube dots,
    the solid's outer faces land exactly on ``[0, dims]``.
    """
    dot_size = _dot_size(dot_size, config)
    dims = geom.vec3(tuple(dims))
    labels = _labels_or_none(labels, 8)
    if outside:
        if any(d <= dot_size for d in dims):
            raise ValueError(f"outside-aligned cuboid {dims} must be larger than its dots ({dot_size})")
        inset = dot_size / 2.0
        span = tuple(d - dot_size for d in dims)
    else:
        inset = 0.0
        span = dims
    dots = []
    for corner, label in zip(Corner, labels):
        local = tuple(inset + c * d for c, d in zip(corner.value, span))
        dots.append(Dot(Pose(pose.apply(local), pose.rotation), dot_size, label, shape))
    return Shape(ShapeKind.CUBE, dots)


def regular_prism(sides: int, radius: float, height: float, pose: Pose = Pose(),
                  dot_size: Optional[float] = None,
                  bottom_labels: Optional[Sequence[str]] = None,
                  top_labels: Optional[Sequence[str]] = None,
                  shape: DotShape = DotShape.CYLINDER,
                  config: Optional[RenderConfig] = None) -> Shape:
    """An n-sided prism with its rings on circles around the local Z axis."""
    dot_size = _dot_size(dot_size, config)
    if sides < 3:
        raise ValueError("a prism needs at least 3 sides")
    centre = Dot(pose, dot_size, None, shape)
    ring = centre.explode_radially(radius, sides)
    bottom_labels = _labels_or_none(bottom_labels, sides)
    top_labels = _labels_or_none(top_labels, sides)
    up = geom.scale3(pose.axis('z'), height)
    bottom = [d.with_label(lab) for d, lab in zip(ring, bottom_labels)]
    top = [d.translate(up).with_label(lab) for d, lab in zip(ring, top_labels)]
    return ring_prism(bottom, top)


def tetra(dots: Sequence[Dot]) -> Shape:
    return Shape(ShapeKind.TETRA, dots)


__all__ = [
    "ShapeKind",
    "Face",
    "Shape",
    "arity_ok",
    "face_template",
    "orient_faces",
    "prism",
    "ring_prism",
    "cuboid",
    "regular_prism",
    "tetra",
]
