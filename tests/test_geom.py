import pytest

from scaddots import geom
from scaddots.geom import X_AXIS, Y_AXIS, Z_AXIS
## unit tests for scad-dots geom.py


class TestGeom:
    """unit tests for 3-vector operations"""

    def test_vec3(self):
        assert geom.vec3([1, 2, 3]) == (1.0, 2.0, 3.0)
        assert geom.isvec3(geom.vec3((0, 0, 0)))
        assert not geom.isvec3([1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            geom.vec3([1, 2])
        with pytest.raises(ValueError):
            geom.vec3([1, 2, True])

    def test_arithmetic(self):
        a = (1.0, 2.0, 3.0)
        b = (4.0, 5.0, 6.0)
        assert geom.add(a, b) == (5.0, 7.0, 9.0)
        assert geom.sub(b, a) == (3.0, 3.0, 3.0)
        assert geom.scale3(a, 2) == (2.0, 4.0, 6.0)
        assert geom.neg(a) == (-1.0, -2.0, -3.0)
        assert geom.dot(a, b) == 32.0
        assert geom.cross(X_AXIS, Y_AXIS) == Z_AXIS
        assert geom.midpoint(a, b) == (2.5, 3.5, 4.5)

    def test_lengths(self):
        assert geom.mag((3.0, 4.0, 0.0)) == pytest.approx(5.0)
        assert geom.dist((1.0, 1.0, 1.0), (1.0, 1.0, 3.0)) == pytest.approx(2.0)
        assert geom.vclose(geom.unit((0.0, 0.0, 7.0)), Z_AXIS)
        with pytest.raises(ValueError):
            geom.unit((0.0, 0.0, 0.0))

    def test_close(self):
        assert geom.close(1.0, 1.0 + geom.epsilon / 2)
        assert not geom.close(1.0, 1.001)
        assert not geom.isgoodnum(True)
        assert geom.isgoodnum(3)


def test_centroid():
    pts = [(0, 0, 0), (2, 0, 0), (2, 2, 0), (0, 2, 0)]
    assert geom.centroid(pts) == pytest.approx((1.0, 1.0, 0.0))
    with pytest.raises(ValueError):
        geom.centroid([])


def test_newell_normal_of_square():
    square = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    # magnitude is twice the area
    assert geom.newell(square) == pytest.approx((0.0, 0.0, 2.0))
    assert geom.polygon_normal(square) == pytest.approx(Z_AXIS)
    assert geom.polygon_normal(list(reversed(square))) == pytest.approx((0.0, 0.0, -1.0))


def test_polygon_normal_degenerate():
    collinear = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
    assert geom.polygon_normal(collinear) is None


def test_orient3d_sign():
    o = (0.0, 0.0, 0.0)
    assert geom.orient3d(o, X_AXIS, Y_AXIS, Z_AXIS) > 0
    assert geom.orient3d(o, Y_AXIS, X_AXIS, Z_AXIS) < 0
    assert geom.orient3d(o, X_AXIS, Y_AXIS, (0.5, 0.5, 0.0)) == 0


def test_axis_index():
    assert geom.axis_index('x') == 0
    assert geom.axis_index('Z') == 2
    assert geom.axis_index(1) == 1
    with pytest.raises(ValueError):
        geom.axis_index('w')
    with pytest.raises(ValueError):
        geom.axis_index(True)
