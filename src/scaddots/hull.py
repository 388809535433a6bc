"""Hull engine: convex and templated face sets over a point list.

``convex_hull`` builds the 3D convex hull incrementally with outside
(conflict) sets: start from a maximal tetrahedron, repeatedly take the
point farthest outside some face, remove every face it can see and stitch
the horizon to it.  Point selection never uses randomness, so the same
input always produces the same triangles in the same order.

``templated_hull`` keeps a caller-supplied face structure and only fixes
the winding, for solids that are deliberately not convex.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from scaddots import geom
from scaddots.errors import DegenerateHull
from scaddots.geom import Vec3
from scaddots.shape import Face, orient_faces

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]

# relative to the extent of the point cloud
REL_TOL = 1e-9


@dataclass(frozen=True)
class Hull:
    """Vertex list plus outward-wound faces indexing into it."""

    points: Tuple[Vec3, ...]
    faces: Tuple[Face, ...]

    def used_indices(self) -> List[int]:
        return sorted({i for f in self.faces for i in f.indices})

    def compact(self) -> "Hull":
        """Drop points no face refers to, keeping the original order."""
        used = self.used_indices()
        if len(used) == len(self.points):
            return self
        remap = {old: new for new, old in enumerate(used)}
        faces = tuple(Face(tuple(remap[i] for i in f.indices), f.normal) for f in self.faces)
        return Hull(tuple(self.points[i] for i in used), faces)


@dataclass
class _HullFace:
    v: Tuple[int, int, int]
    normal: Vec3              # unit, outward
    offset: float             # plane: dot(normal, x) == offset
    alive: bool = True
    outside: List[int] = field(default_factory=list)

    def edges(self) -> Tuple[Edge, Edge, Edge]:
        a, b, c = self.v
        return ((a, b), (b, c), (c, a))


class ConvexHull3D:
    """Incremental 3D convex hull with outside sets.

    Input: at least 4 points that are not all coplanar.
    ``faces()`` returns outward-wound triangles as index triples into the
    input point list.
    """

    def __init__(self, points: Sequence[Sequence[float]], rel_tol: float = REL_TOL):
        self.P: List[Vec3] = [geom.vec3(tuple(p)) for p in points]
        if len(self.P) < 4:
            raise DegenerateHull(len(self.P), "need at least 4 points")
        extent = max(
            max(p[i] for p in self.P) - min(p[i] for p in self.P) for i in range(3)
        )
        self.tol = rel_tol * max(extent, 1.0)
        self.faces_list: List[_HullFace] = []

        self._build_initial_tetra()
        self._expand_until_done()
        logger.debug("convex hull of %d points: %d faces",
                     len(self.P), len(self.faces()))

    # ---------------- public API ----------------

    def faces(self) -> List[Tuple[int, int, int]]:
        return [f.v for f in self.faces_list if f.alive]

    def hull(self) -> Hull:
        faces = tuple(Face(f.v, f.normal) for f in self.faces_list if f.alive)
        return Hull(tuple(self.P), faces)

    # ---------------- internals ----------------

    def _distance(self, face: _HullFace, p: Vec3) -> float:
        return geom.dot(face.normal, p) - face.offset

    def _make_face(self, a: int, b: int, c: int) -> _HullFace:
        pa, pb, pc = self.P[a], self.P[b], self.P[c]
        n = geom.cross(geom.sub(pb, pa), geom.sub(pc, pa))
        n = geom.scale3(n, 1.0 / geom.mag(n))
        return _HullFace((a, b, c), n, geom.dot(n, pa))

    def _farthest(self, candidates, measure) -> Tuple[Optional[int], float]:
        best, best_d = None, -1.0
        for i in candidates:
            d = measure(self.P[i])
            if d > best_d:
                best, best_d = i, d
        return best, best_d

    def _build_initial_tetra(self) -> None:
        """Pick four extreme, non-coplanar points and build an outward tetra."""
        idx = range(len(self.P))
        p0 = min(idx, key=lambda i: self.P[i])

        p1, d = self._farthest(idx, lambda p: geom.dist(p, self.P[p0]))
        if d <= self.tol:
            raise DegenerateHull(len(self.P), "all points coincide")

        line = geom.unit(geom.sub(self.P[p1], self.P[p0]))

        def line_dist(p):
            return geom.mag(geom.cross(geom.sub(p, self.P[p0]), line))

        p2, d = self._farthest(idx, line_dist)
        if d <= self.tol:
            raise DegenerateHull(len(self.P), "all points are collinear")

        normal = geom.unit(geom.cross(geom.sub(self.P[p1], self.P[p0]),
                                      geom.sub(self.P[p2], self.P[p0])))

        def plane_dist(p):
            return abs(geom.dot(normal, geom.sub(p, self.P[p0])))

        p3, d = self._farthest(idx, plane_dist)
        if d <= self.tol:
            raise DegenerateHull(len(self.P), "all points are coplanar")

        inner = geom.centroid([self.P[p0], self.P[p1], self.P[p2], self.P[p3]])
        for a, b, c in ((p0, p1, p2), (p0, p2, p3), (p0, p3, p1), (p1, p3, p2)):
            face = self._make_face(a, b, c)
            if self._distance(face, inner) > 0:
                face = self._make_face(a, c, b)
            self.faces_list.append(face)

        base = {p0, p1, p2, p3}
        self._assign([i for i in idx if i not in base], range(4))

    def _assign(self, point_ids, face_ids) -> None:
        """Put each point in the outside set of the first face it sees."""
        face_ids = list(face_ids)
        for pi in point_ids:
            p = self.P[pi]
            for fid in face_ids:
                face = self.faces_list[fid]
                if self._distance(face, p) > self.tol:
                    face.outside.append(pi)
                    break

    def _expand_until_done(self) -> None:
        while True:
            fid = next((i for i, f in enumerate(self.faces_list)
                        if f.alive and f.outside), None)
            if fid is None:
                return
            face = self.faces_list[fid]
            eye, _ = self._farthest(face.outside, lambda p: self._distance(face, p))
            self._add_point(eye)

    def _add_point(self, eye: int) -> None:
        p = self.P[eye]
        visible = [i for i, f in enumerate(self.faces_list)
                   if f.alive and self._distance(f, p) > self.tol]

        visible_edges: Set[Edge] = set()
        for fid in visible:
            visible_edges.update(self.faces_list[fid].edges())

        # directed edges of the visible region whose twin is not visible
        horizon: List[Edge] = []
        orphans: List[int] = []
        for fid in visible:
            f = self.faces_list[fid]
            for a, b in f.edges():
                if (b, a) not in visible_edges:
                    horizon.append((a, b))
            orphans.extend(i for i in f.outside if i != eye)
            f.alive = False
            f.outside = []

        new_ids = []
        for a, b in horizon:
            self.faces_list.append(self._make_face(a, b, eye))
            new_ids.append(len(self.faces_list) - 1)

        self._assign(sorted(orphans), new_ids)


def convex_hull(points: Sequence[Sequence[float]]) -> Hull:
    """Convex hull of ``points`` as outward-wound triangles.

    Raises :class:`DegenerateHull` for fewer than 4 points or for points
    that are collinear or coplanar.
    """
    return ConvexHull3D(points).hull()


def templated_hull(points: Sequence[Sequence[float]],
                   faces: Sequence[Sequence[int]]) -> Hull:
    """Hull with a caller-supplied face structure, re-wound outward."""
    pts = tuple(geom.vec3(tuple(p)) for p in points)
    if not pts:
        raise ValueError("templated hull needs points")
    return Hull(pts, tuple(orient_faces(pts, faces)))


__all__ = ["Hull", "ConvexHull3D", "convex_hull", "templated_hull"]
