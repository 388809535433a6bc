import dataclasses

import pytest

from scaddots import xform
from scaddots.geom import X_AXIS, Y_AXIS, Z_AXIS
from scaddots.pose import Pose, compose, inverse


def _make_poses():
    a = Pose.from_axis_angle((1, 2, 3), 40, (1.0, -2.0, 0.5))
    b = Pose.from_axis_angle(Z_AXIS, 90, (0.0, 3.0, 1.0))
    c = Pose.from_quaternion(0.9, 0.1, -0.3, 0.2, (5.0, 0.0, -1.0))
    return a, b, c


def test_default_pose_is_identity():
    p = Pose()
    assert p.position == (0.0, 0.0, 0.0)
    assert p.rotation == xform.IDENTITY
    assert Pose.identity() == p
    assert Pose.at(1, 2, 3).position == (1.0, 2.0, 3.0)


def test_rejects_non_orthonormal_rotation():
    with pytest.raises(ValueError):
        Pose(rotation=((2, 0, 0), (0, 1, 0), (0, 0, 1)))
    with pytest.raises(ValueError):
        Pose(position=(1, 2))


def test_pose_is_immutable():
    p = Pose.at(1, 2, 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.position = (0.0, 0.0, 0.0)


def test_compose_applies_in_local_frame():
    a = Pose.from_axis_angle(Z_AXIS, 90, (1.0, 0.0, 0.0))
    b = Pose.at(1, 0, 0)
    ab = compose(a, b)
    assert ab.position == pytest.approx((1.0, 1.0, 0.0))
    assert ab.axis('x') == pytest.approx(Y_AXIS)


def test_compose_is_associative():
    a, b, c = _make_poses()
    left = compose(compose(a, b), c)
    right = compose(a, compose(b, c))
    assert left.close(right)


def test_inverse():
    for p in _make_poses():
        assert p.compose(p.inverse()).close(Pose())
        assert inverse(p).compose(p).close(Pose())
        point = (0.3, -4.0, 2.0)
        assert p.inverse().apply(p.apply(point)) == pytest.approx(point)


def test_apply_and_axes():
    p = Pose.from_axis_angle(Z_AXIS, 90, (1.0, 0.0, 0.0))
    assert p.apply((1.0, 0.0, 0.0)) == pytest.approx((1.0, 1.0, 0.0))
    assert p.apply_vector(X_AXIS) == pytest.approx(Y_AXIS)
    assert p.axis('z') == pytest.approx(Z_AXIS)
    assert p.axis(1) == pytest.approx((-1.0, 0.0, 0.0))


def test_translate_and_rotate_about_origin():
    p = Pose.at(1, 0, 0)
    assert p.translate((0, 0, 2)).position == (1.0, 0.0, 2.0)
    turned = p.rotate(xform.rotation(Z_AXIS, 90))
    assert turned.position == pytest.approx((0.0, 1.0, 0.0))
    assert turned.axis('x') == pytest.approx(Y_AXIS)
    assert p.with_position((4, 5, 6)).position == (4.0, 5.0, 6.0)


def test_quaternion_and_axis_angle():
    assert Pose().quaternion() == (1.0, 0.0, 0.0, 0.0)
    axis, angle = Pose.from_axis_angle(X_AXIS, 45).axis_angle()
    assert axis == pytest.approx(X_AXIS)
    assert angle == pytest.approx(45.0)
    q = Pose.from_axis_angle((1, 1, 0), 70).quaternion()
    assert Pose.from_quaternion(*q).close(Pose.from_axis_angle((1, 1, 0), 70))


def test_close_tolerance():
    p = Pose.at(1, 1, 1)
    assert p.close(Pose.at(1, 1, 1 + 1e-9))
    assert not p.close(Pose.at(1, 1, 1.1))
    assert not p.close(Pose.from_axis_angle(Z_AXIS, 1, (1, 1, 1)))
