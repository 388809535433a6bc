"""Bridging surfaces between the rims of two shapes.

Two shapes are bridged through labels they share.  On each shape the
shared labels must make up exactly one template face (the rim), and the
two rims must list the labels in the same cyclic order, read in either
direction.  The connector is then the band of side faces joining rim
edge ``(l[i], l[i+1])`` on the left shape to the same edge on the right
shape, capped at both ends by the rims themselves.

Connector vertices are the shapes' own solid points
(:meth:`scaddots.shape.Shape.solid_points`), so each cap lies exactly on
the matching face of the rendered shape.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from scaddots import geom
from scaddots.errors import LabelMismatch
from scaddots.geom import Vec3
from scaddots.hull import Hull
from scaddots.shape import Face, Shape, orient_faces

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connector:
    """Resolved bridge between two shapes.

    ``points`` holds the rim vertices (left rim first, coincident
    vertices merged); ``faces`` holds the side surface of every rim edge,
    a bent side quad appearing as two triangles; ``caps`` holds the two
    rim polygons.  ``sides`` counts rim edges bridged.  A connector whose
    rims coincide is empty: it has no points and no faces.
    """

    left: Optional[int]
    right: Optional[int]
    labels: Tuple[str, ...]
    points: Tuple[Vec3, ...]
    faces: Tuple[Face, ...]
    caps: Tuple[Face, ...]
    sides: int = 0

    def __len__(self) -> int:
        return self.sides

    @property
    def empty(self) -> bool:
        return not self.faces

    def polyhedron_faces(self) -> List[Face]:
        return list(self.faces) + list(self.caps)

    def hull(self) -> Hull:
        """The closed connector solid."""
        return Hull(self.points, tuple(self.polyhedron_faces()))


def shared_labels(a: Shape, b: Shape) -> List[str]:
    """Labels present on both shapes, in ``a``'s dot order."""
    other = set(lab for lab in b.labels if lab is not None)
    return [lab for lab in a.labels if lab is not None and lab in other]


def find_rim(shape: Shape, labels: Sequence[str]) -> Optional[Tuple[str, ...]]:
    """Label loop of the first template face made of exactly ``labels``."""
    wanted = set(labels)
    for rim in shape.rims():
        if len(rim) == len(wanted) and set(rim) == wanted:
            return rim
    return None


def cyclic_match(a: Sequence[str], b: Sequence[str]) -> bool:
    """True if ``b`` is ``a`` rotated, possibly read backwards."""
    if len(a) != len(b):
        return False
    if not a:
        return True
    doubled = list(a) + list(a)
    for cand in (list(b), list(reversed(b))):
        for start in range(len(a)):
            if doubled[start:start + len(a)] == cand:
                return True
    return False


def _rims(a: Shape, b: Shape, labels: Optional[Sequence[str]]):
    if labels is None:
        labels = shared_labels(a, b)
    else:
        labels = list(labels)
        missing = [lab for lab in labels if lab not in a.labels or lab not in b.labels]
        if missing:
            raise LabelMismatch([lab for lab in labels if lab in a.labels],
                                [lab for lab in labels if lab in b.labels],
                                f"labels {missing} are not on both shapes")
    if len(labels) < 3:
        raise LabelMismatch(labels, labels,
                            f"need at least 3 shared labels to bridge, got {len(labels)}")

    rim_a = find_rim(a, labels)
    rim_b = find_rim(b, labels)
    if rim_a is None or rim_b is None:
        raise LabelMismatch(rim_a or tuple(labels), rim_b or tuple(labels),
                            "shared labels do not form a face on "
                            + ("both shapes" if rim_a is None and rim_b is None
                               else "the left shape" if rim_a is None
                               else "the right shape"))
    if not cyclic_match(rim_a, rim_b):
        raise LabelMismatch(rim_a, rim_b, "rim labels are not in compatible cyclic order")
    return rim_a, rim_b


def _merge(points: List[Vec3], p: Vec3) -> int:
    for i, q in enumerate(points):
        if geom.vclose(p, q):
            return i
    points.append(p)
    return len(points) - 1


def _collapse(loop: Sequence[int]) -> Tuple[int, ...]:
    """Remove cyclically repeated indices from a face loop."""
    out: List[int] = []
    for i in loop:
        if not out or out[-1] != i:
            out.append(i)
    while len(out) > 1 and out[0] == out[-1]:
        out.pop()
    return tuple(out)


def bridge(a: Shape, b: Shape, labels: Optional[Sequence[str]] = None,
           left: Optional[int] = None, right: Optional[int] = None) -> Connector:
    """Connector joining the shared rim of ``a`` to that of ``b``.

    ``labels`` restricts the rim to an explicit label set.  Raises
    :class:`LabelMismatch` when the shapes have no compatible rim.  A rim
    edge that has collapsed to one point on either side yields a triangle
    instead of a quad.  When the two rims sit on the same points there is
    no gap to close and the connector comes back empty; when only some
    rim edges close up, :class:`LabelMismatch` is raised.
    """
    rim_a, rim_b = _rims(a, b, labels)
    rim = rim_a
    n = len(rim)

    if all(geom.vclose(a.dot(lab).position, b.dot(lab).position) for lab in rim):
        logger.debug("bridge %s -> %s over %s: rims touch", left, right, rim)
        return Connector(left, right, tuple(rim), (), (), ())

    solid_a = a.solid_points()
    solid_b = b.solid_points()
    points: List[Vec3] = []
    ia = [_merge(points, solid_a[a.index_of(lab)]) for lab in rim]
    ib = [_merge(points, solid_b[b.index_of(lab)]) for lab in rim]
    center = geom.centroid(points)

    faces: List[Face] = []
    closed = []
    for i in range(n):
        j = (i + 1) % n
        loop = _collapse((ia[i], ia[j], ib[j], ib[i]))
        side = orient_faces(points, [loop], center) if len(loop) >= 3 else []
        if not side:
            closed.append((rim[i], rim[j]))
        faces.extend(side)

    if len(closed) == n:
        logger.debug("bridge %s -> %s over %s: solids touch", left, right, rim)
        return Connector(left, right, tuple(rim), (), (), ())
    if closed:
        raise LabelMismatch(rim_a, rim_b,
                            f"rims meet along {closed} but are apart elsewhere")

    caps = orient_faces(points, [c for c in (_collapse(ia), _collapse(ib)) if len(c) >= 3],
                        center)
    logger.debug("bridge %s -> %s over %s: %d side faces", left, right, rim, len(faces))
    return Connector(left, right, tuple(rim), tuple(points), tuple(faces), tuple(caps), n)


__all__ = ["Connector", "bridge", "shared_labels", "find_rim", "cyclic_match"]
