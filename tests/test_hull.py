import itertools
import math

import pytest

from scaddots.checks import check_solid, faces_outward, surface_watertight
from scaddots.errors import DegenerateHull, ScadDotsError
from scaddots.hull import ConvexHull3D, Hull, convex_hull, templated_hull

TETRA = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)]
CUBE = [(x, y, z) for x, y, z in itertools.product((0, 1), repeat=3)]


def test_tetra_hull_has_four_triangles():
    hull = convex_hull(TETRA)
    assert len(hull.faces) == 4
    assert all(len(f) == 3 for f in hull.faces)
    assert check_solid(hull.points, hull.faces)


def test_cube_hull():
    hull = convex_hull(CUBE)
    assert hull.used_indices() == list(range(8))
    # a closed triangulation of 8 hull vertices
    assert len(hull.faces) == 12
    assert surface_watertight(hull.faces)
    assert faces_outward(hull.points, hull.faces)


def test_interior_points_are_dropped():
    pts = TETRA + [(0.1, 0.1, 0.1), (0.2, 0.2, 0.05)]
    hull = convex_hull(pts)
    assert len(hull.faces) == 4
    compact = hull.compact()
    assert len(compact.points) == 4
    assert compact.points == tuple((float(x), float(y), float(z)) for x, y, z in TETRA)
    assert check_solid(compact.points, compact.faces)


def test_compact_is_noop_when_all_points_used():
    hull = convex_hull(TETRA)
    assert hull.compact() is hull


def test_hull_is_deterministic():
    pts = CUBE + [(0.5, 0.5, 1.5), (0.5, -0.4, 0.5), (0.3, 0.3, 0.3)]
    first = convex_hull(pts)
    second = convex_hull(list(pts))
    assert first == second
    assert ConvexHull3D(pts).faces() == [f.indices for f in first.faces]


def test_sphere_like_point_cloud():
    pts = []
    for i in range(8):
        angle = math.radians(i * 45.0)
        for z in (-0.8, 0.8):
            pts.append((math.cos(angle), math.sin(angle), z))
    pts += [(0, 0, 2), (0, 0, -2)]
    hull = convex_hull(pts)
    assert surface_watertight(hull.faces)
    assert faces_outward(hull.points, hull.faces)


@pytest.mark.parametrize("points,reason", [
    ([(0, 0, 0), (1, 0, 0), (0, 1, 0)], "need at least 4 points"),
    ([(1, 1, 1)] * 5, "all points coincide"),
    ([(0, 0, 0), (1, 1, 1), (2, 2, 2), (3, 3, 3)], "all points are collinear"),
    ([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0), (0.5, 0.5, 0)], "all points are coplanar"),
])
def test_degenerate_input(points, reason):
    with pytest.raises(DegenerateHull) as err:
        convex_hull(points)
    assert err.value.count == len(points)
    assert err.value.reason == reason
    assert isinstance(err.value, ScadDotsError)


def test_templated_hull_rewinds_faces():
    # every face listed inward
    faces = [(0, 2, 6, 4), (1, 5, 7, 3), (0, 1, 3, 2), (4, 6, 7, 5), (0, 4, 5, 1), (2, 3, 7, 6)]
    inward = [tuple(reversed(f)) for f in faces]
    hull = templated_hull(CUBE, inward)
    assert isinstance(hull, Hull)
    assert len(hull.faces) == 6
    assert check_solid(hull.points, hull.faces)


def test_templated_hull_rejects_bad_faces():
    with pytest.raises(ValueError):
        templated_hull(TETRA, [(0, 1, 7)])
    with pytest.raises(ValueError):
        templated_hull(TETRA, [(0, 1)])
    with pytest.raises(ValueError):
        templated_hull([], [])
