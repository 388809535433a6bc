import pytest

from scaddots.dot import Dot, DotShape
from scaddots.pose import Pose
from scaddots.primitives import Cylinder, CylinderAlign, Extrusion, extrude_z, mark


def test_cylinder_validation():
    with pytest.raises(ValueError):
        Cylinder(Pose(), 0, 1)
    with pytest.raises(ValueError):
        Cylinder(Pose(), 1, -2)
    with pytest.raises(ValueError):
        Cylinder(Pose(), float('nan'), 1)
    assert Cylinder(Pose(), 2, 3).diameter == 2.0


def test_cylinder_reference_points():
    cyl = Cylinder(Pose.at(1, 2, 3), 1, 4)
    assert cyl.unit_axis() == (0.0, 0.0, 1.0)
    assert cyl.axis() == (0.0, 0.0, 4.0)
    assert cyl.pos(CylinderAlign.BOTTOM) == (1.0, 2.0, 3.0)
    assert cyl.pos(CylinderAlign.CENTROID) == (1.0, 2.0, 5.0)
    assert cyl.pos("top") == (1.0, 2.0, 7.0)


@pytest.mark.parametrize("align, bottom_z", [
    (CylinderAlign.BOTTOM, 0.0),
    (CylinderAlign.CENTROID, -1.0),
    (CylinderAlign.TOP, -2.0),
])
def test_cylinder_aligned(align, bottom_z):
    cyl = Cylinder.aligned((0, 0, 0), 1, 2, align)
    assert cyl.pose.position == pytest.approx((0.0, 0.0, bottom_z))
    assert cyl.pos(align) == pytest.approx((0.0, 0.0, 0.0))


def test_cylinder_aligned_on_tilted_axis():
    turned = Pose.from_axis_angle((0, 1, 0), 90)
    cyl = Cylinder.aligned((0, 0, 0), 1, 2, CylinderAlign.TOP, turned.rotation)
    assert cyl.unit_axis() == pytest.approx((1.0, 0.0, 0.0), abs=1e-9)
    assert cyl.pose.position == pytest.approx((-2.0, 0.0, 0.0), abs=1e-9)


def test_extrusion():
    ext = Extrusion([(0, 0), (1, 0), (0, 1)], 0, 2)
    assert ext.perimeter == ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0))
    assert ext.thickness == 2.0
    with pytest.raises(ValueError):
        Extrusion([(0, 0), (1, 0)], 0, 1)
    with pytest.raises(ValueError):
        Extrusion([(0, 0), (1, 0), (0, 1)], 0, 0)


def test_extrude_z_uses_dot_xy():
    dots = [Dot.at(0, 0, 5), Dot.at(2, 0, 7), Dot.at(2, 2, -1)]
    ext = extrude_z(3, dots, bottom_z=1)
    assert ext.perimeter == ((0.0, 0.0), (2.0, 0.0), (2.0, 2.0))
    assert (ext.bottom_z, ext.thickness) == (1.0, 3.0)


def test_mark():
    m = mark((1, 2, 3), 0.5)
    assert m.position == (1.0, 2.0, 3.0)
    assert m.shape is DotShape.SPHERE
    assert m.size == 0.5
