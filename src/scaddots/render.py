"""OpenSCAD emission.

Rendering is one pass: every node's shape is turned into a solid, then
every edge's connector, both in declaration order, and the solids are
written out as CSG text.  The text depends only on the graph and the
:class:`RenderConfig`, so equal input always yields byte-identical
output.

Positive solids are unioned; negative solids are subtracted from that
union and clip solids intersected with the result.

OpenSCAD lists polyhedron face points clockwise when seen from outside,
the opposite of the counter-clockwise winding used everywhere else in
scaddots; faces are reversed on the way out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from scaddots.config import RenderConfig
from scaddots.dot import Dot, DotShape
from scaddots.geom import Vec3
from scaddots.graph import Color, Graph, Style
from scaddots.hull import Hull, convex_hull, templated_hull
from scaddots.pose import Pose
from scaddots.primitives import Cylinder, Extrusion

logger = logging.getLogger(__name__)

HEADER = "// generated by scad-dots"


@dataclass(frozen=True)
class Solid:
    """One renderable item: a hull polyhedron, a hull() of dots or a
    standalone primitive."""

    source: str                             # "shape", "connector" or "primitive"
    ref: Union[int, Tuple[int, int]]
    negative: bool
    hull: Optional[Hull] = None
    dots: Optional[Tuple[Dot, ...]] = None
    primitive: Optional[Union[Dot, Cylinder, Extrusion]] = None
    clip: bool = False
    color: Optional[Color] = None
    mirror: Optional[Vec3] = None


def resolve(graph: Graph) -> List[Solid]:
    """Shapes then connectors as solids, in declaration order.

    A connector is negative (or a clip) only when both of its shapes are;
    it takes their colour when they agree and always their mirror plane.
    Connectors between touching rims are skipped.
    """
    solids: List[Solid] = []
    for ref, node in enumerate(graph.nodes):
        extra = dict(clip=node.clip, color=node.color, mirror=node.mirror)
        shape = node.shape
        if not node.is_shape:
            solids.append(Solid("primitive", ref, node.negative, primitive=shape, **extra))
        elif node.style is Style.DOTS:
            solids.append(Solid("shape", ref, node.negative, dots=shape.dots, **extra))
        elif node.style is Style.CONVEX:
            solids.append(Solid("shape", ref, node.negative,
                                hull=convex_hull(shape.solid_points()).compact(), **extra))
        else:
            solids.append(Solid("shape", ref, node.negative,
                                hull=templated_hull(shape.solid_points(), shape.template()),
                                **extra))

    for conn in graph.connectors():
        if conn.empty:
            logger.debug("skipping empty connector %s -> %s", conn.left, conn.right)
            continue
        left, right = graph.node(conn.left), graph.node(conn.right)
        solids.append(Solid("connector", (conn.left, conn.right),
                            left.negative and right.negative, hull=conn.hull(),
                            clip=left.clip and right.clip,
                            color=left.color if left.color == right.color else None,
                            mirror=left.mirror))

    logger.debug("resolved %d shapes and %d connectors",
                 len(graph.nodes), len(solids) - len(graph.nodes))
    return solids


# -------------------------------------------------------------------
# number and vector formatting
# -------------------------------------------------------------------

def fmt_num(x: float, precision: int) -> str:
    """Fixed-point text with trailing zeros stripped and no ``-0``."""
    s = f"{x:.{precision}f}"
    if '.' in s:
        s = s.rstrip('0').rstrip('.')
    if s in ('-0', ''):
        s = '0'
    return s


def fmt_vec(v: Sequence[float], precision: int) -> str:
    return "[" + ",".join(fmt_num(c, precision) for c in v) + "]"


# -------------------------------------------------------------------
# statements
# -------------------------------------------------------------------

def polyhedron(hull: Hull, config: RenderConfig) -> str:
    points = ",".join(fmt_vec(p, config.precision) for p in hull.points)
    faces = ",".join(
        "[" + ",".join(str(i) for i in f.flipped().indices) + "]" for f in hull.faces
    )
    return f"polyhedron(points=[{points}], faces=[{faces}]);"


def _placement(pose: Pose, config: RenderConfig) -> List[str]:
    p = config.precision
    parts = [f"translate({fmt_vec(pose.position, p)})"]
    axis, angle = pose.axis_angle()
    if fmt_num(angle, p) != '0':
        parts.append(f"rotate(a={fmt_num(angle, p)}, v={fmt_vec(axis, p)})")
    return parts


def dot_primitive(dot: Dot, config: RenderConfig) -> str:
    """The dot's own primitive, centred on its position.

    Cubes are drawn with ``center=true`` like spheres and cylinders,
    rather than hung from one corner, so a dot's position is always the
    middle of what is drawn and the vertices of :meth:`Dot.support` lie
    on its surface.
    """
    size = fmt_num(dot.size, config.precision)
    parts = _placement(dot.pose, config)
    if dot.shape is DotShape.SPHERE:
        parts.append(f"sphere(d={size}, $fn={config.detail});")
    elif dot.shape is DotShape.CYLINDER:
        parts.append(f"cylinder(h={size}, d={size}, center=true, $fn={config.detail});")
    else:
        parts.append(f"cube(size={size}, center=true);")
    return " ".join(parts)


def cylinder(cyl: Cylinder, config: RenderConfig) -> str:
    p = config.precision
    parts = _placement(cyl.pose, config)
    parts.append(f"cylinder(h={fmt_num(cyl.height, p)}, d={fmt_num(cyl.diameter, p)}, "
                 f"$fn={config.detail});")
    return " ".join(parts)


def extrusion(ext: Extrusion, config: RenderConfig) -> str:
    p = config.precision
    points = ",".join(fmt_vec(xy, p) for xy in ext.perimeter)
    return (f"translate({fmt_vec((0.0, 0.0, ext.bottom_z), p)}) "
            f"linear_extrude(height={fmt_num(ext.thickness, p)}) "
            f"polygon(points=[{points}]);")


def fmt_color(color: Color, config: RenderConfig) -> str:
    if isinstance(color, str):
        return f'color("{color}")'
    return f"color({fmt_vec(color, config.precision)})"


def _modifiers(solid: Solid, config: RenderConfig) -> str:
    parts = []
    if solid.color is not None:
        parts.append(fmt_color(solid.color, config))
    if solid.mirror is not None:
        parts.append(f"mirror({fmt_vec(solid.mirror, config.precision)})")
    return "".join(part + " " for part in parts)


def _solid_lines(solid: Solid, config: RenderConfig, depth: int) -> List[str]:
    pad = config.indent * depth
    prefix = _modifiers(solid, config)
    if solid.dots is not None:
        lines = [pad + prefix + "hull() {"]
        lines.extend(pad + config.indent + dot_primitive(d, config) for d in solid.dots)
        lines.append(pad + "}")
        return lines
    prim = solid.primitive
    if isinstance(prim, Dot):
        text = dot_primitive(prim, config)
    elif isinstance(prim, Cylinder):
        text = cylinder(prim, config)
    elif isinstance(prim, Extrusion):
        text = extrusion(prim, config)
    else:
        text = polyhedron(solid.hull, config)
    return [pad + prefix + text]


def _block(name: str, solids: Sequence[Solid], config: RenderConfig, depth: int) -> List[str]:
    pad = config.indent * depth
    lines = [pad + name + "() {"]
    for solid in solids:
        lines.extend(_solid_lines(solid, config, depth + 1))
    lines.append(pad + "}")
    return lines


def render_solids(solids: Sequence[Solid], config: Optional[RenderConfig] = None) -> str:
    config = config or RenderConfig()
    positive = [s for s in solids if not (s.negative or s.clip)]
    negative = [s for s in solids if s.negative]
    clip = [s for s in solids if s.clip]

    lines = [HEADER] if config.header else []
    depth = 0
    if clip:
        lines.append("intersection() {")
        depth = 1
    if negative:
        lines.append(config.indent * depth + "difference() {")
        lines.extend(_block("union", positive, config, depth + 1))
        lines.extend(_block("union", negative, config, depth + 1))
        lines.append(config.indent * depth + "}")
    else:
        lines.extend(_block("union", positive, config, depth))
    if clip:
        lines.extend(_block("union", clip, config, 1))
        lines.append("}")
    return "\n".join(lines) + "\n"


def render(graph: Graph, config: Optional[RenderConfig] = None) -> str:
    """OpenSCAD text for ``graph``.

    Any :class:`~scaddots.errors.ScadDotsError` raised while resolving
    aborts the render; no partial text is produced.
    """
    text = render_solids(resolve(graph), config)
    logger.debug("rendered %d bytes of OpenSCAD", len(text))
    return text


def write_scad(graph: Graph, path_or_file, config: Optional[RenderConfig] = None) -> None:
    """Render ``graph`` and write it out.

    ``path_or_file`` can be a filesystem path or an open text stream.
    """
    text = render(graph, config)

    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='utf-8')
        close_when_done = True

    try:
        stream.write(text)
    finally:
        if close_when_done:
            stream.close()


__all__ = ["Solid", "resolve", "render", "render_solids", "write_scad",
           "fmt_num", "fmt_vec", "fmt_color", "polyhedron", "dot_primitive",
           "cylinder", "extrusion"]
