import pytest

from scaddots.checks import check_solid
from scaddots.connector import bridge, cyclic_match, find_rim, shared_labels
from scaddots.dot import Dot
from scaddots.errors import LabelMismatch
from scaddots.graph import Graph
from scaddots.pose import Pose
from scaddots.render import render
from scaddots.shape import Shape, ShapeKind, cuboid, regular_prism

RIM = ['a', 'b', 'c', 'd']


def _make_stack(upper_labels=RIM, gap=2.0):
    lower = cuboid(labels=[None] * 4 + RIM)
    upper = cuboid(pose=Pose.at(0, 0, 1 + gap), labels=list(upper_labels) + [None] * 4)
    return lower, upper


def test_shared_labels_and_rims():
    lower, upper = _make_stack()
    assert shared_labels(lower, upper) == RIM
    assert find_rim(lower, RIM) == ('a', 'b', 'c', 'd')
    assert find_rim(upper, ['d', 'c', 'b', 'a']) == ('a', 'b', 'c', 'd')
    assert find_rim(lower, ['a', 'b', 'c']) is None


def test_cyclic_match():
    assert cyclic_match('abcd', 'cdab')
    assert cyclic_match('abcd', 'dcba')
    assert cyclic_match('abcd', 'badc')
    assert not cyclic_match('abcd', 'acbd')
    assert not cyclic_match('abc', 'abcd')


def test_bridge_closes_gap():
    lower, upper = _make_stack()
    conn = bridge(lower, upper, left=0, right=1)
    assert conn.labels == ('a', 'b', 'c', 'd')
    assert (conn.left, conn.right) == (0, 1)
    assert len(conn) == 4
    assert all(len(f) == 4 for f in conn.faces)
    assert len(conn.caps) == 2
    assert len(conn.points) == 8
    assert set(conn.points) == set(lower.solid_points()[4:]) | set(upper.solid_points()[:4])
    assert check_solid(conn.points, conn.polyhedron_faces())
    solid = conn.hull()
    assert check_solid(solid.points, solid.faces)


def test_bridge_between_different_sizes():
    lower = cuboid((4, 4, 1), labels=[None] * 4 + RIM)
    upper = cuboid(pose=Pose.at(1, 1, 3), labels=RIM + [None] * 4)
    conn = bridge(lower, upper)
    assert len(conn.faces) == 4
    assert check_solid(conn.points, conn.polyhedron_faces())


def test_bridge_accepts_reversed_rim():
    lower, upper = _make_stack(upper_labels=['d', 'c', 'b', 'a'])
    conn = bridge(lower, upper)
    assert len(conn.faces) == 4


def test_rim_count_mismatch():
    lower = cuboid(labels=[None] * 4 + RIM)
    tri = regular_prism(3, 0.5, 1.0, pose=Pose.at(0.5, 0.5, 3),
                        bottom_labels=['a', 'b', 'c'])
    with pytest.raises(LabelMismatch) as err:
        bridge(lower, tri)
    assert set(err.value.right) == {'a', 'b', 'c'}
    assert 'left shape' in err.value.detail


def test_rim_order_mismatch():
    lower, upper = _make_stack(upper_labels=['a', 'c', 'b', 'd'])
    with pytest.raises(LabelMismatch) as err:
        bridge(lower, upper)
    assert err.value.left == ('a', 'b', 'c', 'd')
    assert err.value.right == ('a', 'c', 'b', 'd')
    assert err.value.edge is None


def test_too_few_shared_labels():
    lower = cuboid(labels=[None] * 4 + RIM)
    upper = cuboid(pose=Pose.at(0, 0, 2), labels=['a', 'b', 'x', 'y'] + [None] * 4)
    with pytest.raises(LabelMismatch):
        bridge(lower, upper)


def test_explicit_labels():
    lower = regular_prism(3, 1.0, 1.0, top_labels=['p', 'q', 'r'])
    upper = regular_prism(3, 1.0, 1.0, pose=Pose.at(0, 0, 3), bottom_labels=['p', 'q', 'r'])
    conn = bridge(lower, upper, labels=['r', 'q', 'p'])
    assert len(conn.faces) == 3
    assert check_solid(conn.points, conn.polyhedron_faces())
    with pytest.raises(LabelMismatch) as err:
        bridge(lower, upper, labels=['p', 'q', 'zz'])
    assert 'zz' in err.value.detail


def test_collapsed_edge_becomes_triangle():
    lower = cuboid(labels=[None] * 4 + RIM)
    bottom = [Dot.at(0, 0, 5, 'a'), Dot.at(0, 0, 5, 'b'), Dot.at(1, 1, 5, 'c'), Dot.at(1, 0, 5, 'd')]
    top = [d.translate((0, 0, 1)).with_label(None) for d in bottom]
    upper = Shape(ShapeKind.CUBE, bottom + top)
    conn = bridge(lower, upper)
    assert len(conn.points) == 7
    assert len(conn) == 4
    # the side from b to c is skewed and comes out as two triangles
    assert sorted(len(f) for f in conn.faces) == [3, 3, 3, 4, 4]
    assert sorted(len(c) for c in conn.caps) == [3, 4]
    assert check_solid(conn.points, conn.polyhedron_faces())


def test_touching_rims_give_empty_connector():
    lower, upper = _make_stack(gap=0.0)
    conn = bridge(lower, upper)
    assert conn.empty
    assert len(conn) == 0
    assert conn.faces == () and conn.points == ()
    text = render(Graph([lower, upper], [(0, 1)]))
    assert text.count("polyhedron(") == 2


def test_touching_solids_give_empty_connector():
    # rims one dot size apart: the cube dots meet face to face
    lower, upper = _make_stack(gap=1.0)
    conn = bridge(lower, upper)
    assert conn.empty
    assert render(Graph([lower, upper], [(0, 1)])).count("polyhedron(") == 2


def test_rims_meeting_along_one_edge():
    lower = cuboid(labels=[None] * 4 + RIM)
    # a wedge whose a-b edge sits on the lower block and whose c-d edge is raised
    bottom = [Dot.at(0, 0, 2, 'a'), Dot.at(0, 1, 2, 'b'), Dot.at(1, 1, 4, 'c'), Dot.at(1, 0, 4, 'd')]
    top = [Dot.at(x, y, 5) for x, y in [(0, 0), (0, 1), (1, 1), (1, 0)]]
    upper = Shape(ShapeKind.CUBE, bottom + top)
    assert upper.solid_points()[0] == lower.solid_points()[4]
    with pytest.raises(LabelMismatch) as err:
        bridge(lower, upper)
    assert "meet along" in err.value.detail
    assert "('a', 'b')" in err.value.detail


def test_twisted_bridge_splits_sides():
    lower = cuboid(labels=[None] * 4 + RIM)
    upper = cuboid(pose=Pose.from_axis_angle((0, 0, 1), 30, (0, 0, 3)),
                   labels=RIM + [None] * 4)
    conn = bridge(lower, upper)
    assert len(conn) == 4
    assert len(conn.faces) == 8
    assert all(len(f) == 3 for f in conn.faces)
    assert sorted(len(c) for c in conn.caps) == [4, 4]
    result = check_solid(conn.points, conn.polyhedron_faces())
    assert result, result.warnings
