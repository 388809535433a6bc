"""Validation helpers for resolved solids.

Faces may be given as :class:`scaddots.shape.Face` values or as plain
index sequences wound counter-clockwise from outside.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from scaddots import geom


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


def _indices(face) -> Tuple[int, ...]:
    return tuple(getattr(face, 'indices', face))


def _edge_key(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a < b else (b, a)


def _loop_edges(loop: Sequence[int]):
    return zip(loop, loop[1:] + loop[:1])


def faces_outward(points: Sequence[Sequence[float]], faces: Sequence) -> CheckResult:
    """Every face normal points away from the centroid of ``points``."""
    if not points:
        raise ValueError('faces_outward expects points')
    center = geom.centroid(points)
    inward = []
    degenerate = []
    for idx, face in enumerate(faces):
        verts = [points[i] for i in _indices(face)]
        normal = geom.polygon_normal(verts)
        if normal is None:
            degenerate.append(idx)
            continue
        if geom.dot(normal, geom.sub(geom.centroid(verts), center)) <= 0:
            inward.append(idx)

    warnings: List[str] = []
    if degenerate:
        warnings.append(f'zero-area faces: {degenerate}')
    if inward:
        return CheckResult(False, warnings + [f'faces not pointing outward: {inward}'])
    return CheckResult(True, warnings)


def faces_oriented(faces: Sequence) -> CheckResult:
    """No directed edge is used twice, i.e. neighbouring faces agree on winding."""
    directed = Counter()
    for face in faces:
        loop = list(_indices(face))
        for a, b in _loop_edges(loop):
            directed[(a, b)] += 1
    repeated = sorted(edge for edge, count in directed.items() if count > 1)
    if repeated:
        return CheckResult(False, [f'inconsistent face orientation on edges: {repeated}'])
    return CheckResult(True, [])


def surface_watertight(faces: Sequence) -> CheckResult:
    """Every undirected edge is shared by exactly two faces."""
    edges = Counter()
    for face in faces:
        loop = list(_indices(face))
        for a, b in _loop_edges(loop):
            edges[_edge_key(a, b)] += 1

    boundary = [edge for edge, count in edges.items() if count == 1]
    invalid = [edge for edge, count in edges.items() if count > 2]

    warnings: List[str] = []
    ok = True
    if boundary:
        ok = False
        warnings.append(f'{len(boundary)} boundary edges detected')
    if invalid:
        ok = False
        warnings.append(f'edges with multiplicity >2: {invalid}')

    return CheckResult(ok, warnings)


def faces_planar(points: Sequence[Sequence[float]], faces: Sequence,
                 tol: float = 1e-6) -> CheckResult:
    """Each polygon's vertices lie on one plane.

    Uses the smallest singular value of the centred vertex matrix, which
    is the RMS distance of the vertices from their best-fit plane times
    the square root of the vertex count.
    """
    bent = []
    for idx, face in enumerate(faces):
        loop = _indices(face)
        if len(loop) <= 3:
            continue
        verts = np.array([points[i] for i in loop], dtype=float)
        verts -= verts.mean(axis=0)
        sigma = np.linalg.svd(verts, compute_uv=False)
        if sigma[-1] > tol * max(1.0, sigma[0]):
            bent.append(idx)
    if bent:
        return CheckResult(False, [f'non-planar faces: {bent}'])
    return CheckResult(True, [])


def check_solid(points: Sequence[Sequence[float]], faces: Sequence,
                tol: float = 1e-6) -> CheckResult:
    """All of the checks above, warnings concatenated."""
    results = [
        faces_outward(points, faces),
        faces_oriented(faces),
        surface_watertight(faces),
        faces_planar(points, faces, tol),
    ]
    warnings: List[str] = []
    for r in results:
        warnings.extend(r.warnings)
    return CheckResult(all(r.ok for r in results), warnings)


__all__ = [
    'CheckResult',
    'faces_outward',
    'faces_oriented',
    'surface_watertight',
    'faces_planar',
    'check_solid',
]
