"""Graphs of shapes joined by connectors.

A :class:`Graph` is a flat arena: shapes live in a tuple and are
addressed by their integer index (a *ref*); edges hold pairs of refs.
Every edge is checked when the graph is built, so an unknown ref or a
pair of shapes without a compatible rim fails before any rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from scaddots import geom
from scaddots.connector import Connector, bridge
from scaddots.dot import Dot
from scaddots.errors import ChainError, LabelMismatch, UnknownShape
from scaddots.geom import Vec3
from scaddots.primitives import Cylinder, Extrusion, Primitive
from scaddots.shape import Shape

logger = logging.getLogger(__name__)

ShapeRef = int


class Style(Enum):
    """How a node's shape is turned into CSG."""
    POLYHEDRON = "polyhedron"   # templated faces
    CONVEX = "convex"           # convex hull of the solid points
    DOTS = "dots"               # hull() of each dot's own primitive


Color = Union[str, Tuple[float, ...]]


def _color(value) -> Optional[Color]:
    """Validate a colour: an OpenSCAD colour name or 3-4 channels in [0, 1]."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value:
            raise ValueError("colour name must not be empty")
        return value
    channels = tuple(value)
    if len(channels) not in (3, 4) or not all(
            geom.isgoodnum(c) and 0.0 <= c <= 1.0 for c in channels):
        raise ValueError(f"colour must be a name or 3-4 numbers in [0, 1], got {value!r}")
    return tuple(float(c) for c in channels)


@dataclass(frozen=True)
class Node:
    """One solid of a graph and how it takes part in the result.

    ``shape`` is a :class:`Shape` or one of the standalone primitives
    (a :class:`~scaddots.dot.Dot`, :class:`~scaddots.primitives.Cylinder`
    or :class:`~scaddots.primitives.Extrusion`); ``style`` only applies to
    shapes.  A ``negative`` node is subtracted from the rest, a ``clip``
    node is intersected with it.  ``color`` and ``mirror`` (the normal of
    a mirror plane through the origin) wrap the node's solid.
    """

    shape: Union[Shape, Dot, Cylinder, Extrusion]
    style: Style = Style.POLYHEDRON
    negative: bool = False
    name: Optional[str] = None
    clip: bool = False
    color: Optional[Color] = None
    mirror: Optional[Vec3] = None

    def __post_init__(self) -> None:
        if not isinstance(self.shape, (Shape,) + Primitive):
            raise ValueError(f"graph nodes hold Shapes or primitives, got {self.shape!r}")
        if self.negative and self.clip:
            raise ValueError("a node cannot be both negative and a clip")
        object.__setattr__(self, "style", Style(self.style))
        object.__setattr__(self, "color", _color(self.color))
        if self.mirror is not None:
            normal = geom.vec3(tuple(self.mirror))
            if geom.mag(normal) < geom.epsilon:
                raise ValueError("mirror normal must not be zero")
            object.__setattr__(self, "mirror", normal)

    @property
    def is_shape(self) -> bool:
        return isinstance(self.shape, Shape)


@dataclass(frozen=True)
class Edge:
    a: ShapeRef
    b: ShapeRef
    labels: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if self.labels is not None:
            object.__setattr__(self, "labels", tuple(self.labels))

    @property
    def refs(self) -> Tuple[ShapeRef, ShapeRef]:
        return (self.a, self.b)


def _as_node(item) -> Node:
    return item if isinstance(item, Node) else Node(item)


def _as_edge(item) -> Edge:
    if isinstance(item, Edge):
        return item
    return Edge(*item)


@dataclass(frozen=True)
class Graph:
    """Shapes plus the edges that must be bridged between them.

    ``nodes`` accepts :class:`Node` values, bare shapes or primitives;
    ``edges`` accepts :class:`Edge` values or ``(a, b)`` /
    ``(a, b, labels)`` tuples.  Connectors are resolved once, here, in edge order.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    _connectors: Tuple[Connector, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        nodes = tuple(_as_node(n) for n in self.nodes)
        edges = tuple(_as_edge(e) for e in self.edges)
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "edges", edges)

        connectors = []
        for edge in edges:
            for ref in edge.refs:
                if not self._has(ref):
                    raise UnknownShape(ref)
            if edge.a == edge.b:
                raise ValueError(f"edge {edge.a} -> {edge.b} joins a shape to itself")
            left, right = nodes[edge.a], nodes[edge.b]
            if not (left.is_shape and right.is_shape):
                raise ValueError(f"edge {edge.a} -> {edge.b}: only shapes can be bridged")
            if left.mirror != right.mirror:
                raise ValueError(f"edge {edge.a} -> {edge.b} joins nodes with different mirror planes")
            try:
                connectors.append(bridge(left.shape, right.shape,
                                         edge.labels, edge.a, edge.b))
            except LabelMismatch as err:
                raise err.at_edge(edge.refs) from err
        object.__setattr__(self, "_connectors", tuple(connectors))
        logger.debug("graph: %d shapes, %d edges", len(nodes), len(edges))

    def _has(self, ref) -> bool:
        return isinstance(ref, int) and not isinstance(ref, bool) and 0 <= ref < len(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return tuple(n.shape for n in self.nodes)

    def node(self, ref: ShapeRef) -> Node:
        if not self._has(ref):
            raise UnknownShape(ref)
        return self.nodes[ref]

    def shape(self, ref: ShapeRef) -> Shape:
        return self.node(ref).shape

    def connectors(self) -> List[Connector]:
        return list(self._connectors)

    def neighbors(self, ref: ShapeRef) -> List[ShapeRef]:
        self.node(ref)
        out = []
        for e in self.edges:
            if e.a == ref:
                out.append(e.b)
            elif e.b == ref:
                out.append(e.a)
        return out


class GraphBuilder:
    """Incremental graph construction.

    ``add`` returns the new shape's ref; ``connect`` and ``chain`` take
    refs.  Refs are checked as soon as they are used, rims when
    :meth:`build` is called.
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []

    def add(self, shape: Union[Shape, Dot, Cylinder, Extrusion],
            style: Style = Style.POLYHEDRON, negative: bool = False,
            name: Optional[str] = None, clip: bool = False,
            color: Optional[Color] = None,
            mirror: Optional[Sequence[float]] = None) -> ShapeRef:
        self._nodes.append(Node(shape, style, negative, name, clip, color, mirror))
        return len(self._nodes) - 1

    def _check(self, ref) -> None:
        if not (isinstance(ref, int) and not isinstance(ref, bool)
                and 0 <= ref < len(self._nodes)):
            raise UnknownShape(ref)

    def connect(self, a: ShapeRef, b: ShapeRef,
                labels: Optional[Sequence[str]] = None) -> "GraphBuilder":
        self._check(a)
        self._check(b)
        self._edges.append(Edge(a, b, labels))
        return self

    def chain(self, refs: Sequence[ShapeRef], loop: bool = False,
              labels: Optional[Sequence[str]] = None) -> "GraphBuilder":
        """Connect consecutive refs; with ``loop`` also the last to the first."""
        refs = list(refs)
        if len(refs) < 2:
            raise ChainError(len(refs))
        for a, b in _pairs(refs, loop):
            self.connect(a, b, labels)
        return self

    def build(self) -> Graph:
        return Graph(tuple(self._nodes), tuple(self._edges))


def _pairs(refs: Sequence[ShapeRef], loop: bool) -> Iterable[Tuple[ShapeRef, ShapeRef]]:
    pairs = list(zip(refs, refs[1:]))
    # a two-shape loop would only repeat the single bridge
    if loop and len(refs) > 2:
        pairs.append((refs[-1], refs[0]))
    return pairs


def chain(shapes: Sequence[Shape], labels: Optional[Sequence[str]] = None,
          style: Union[Style, str] = Style.POLYHEDRON) -> Graph:
    """Graph bridging each shape to the next one."""
    return _chain(shapes, labels, style, loop=False)


def chain_loop(shapes: Sequence[Shape], labels: Optional[Sequence[str]] = None,
               style: Union[Style, str] = Style.POLYHEDRON) -> Graph:
    """Like :func:`chain`, also bridging the last shape back to the first."""
    return _chain(shapes, labels, style, loop=True)


def _chain(shapes, labels, style, loop) -> Graph:
    shapes = list(shapes)
    if len(shapes) < 2:
        raise ChainError(len(shapes))
    builder = GraphBuilder()
    refs = [builder.add(s, Style(style)) for s in shapes]
    builder.chain(refs, loop=loop, labels=labels)
    return builder.build()


__all__ = ["Style", "Node", "Edge", "Graph", "GraphBuilder", "ShapeRef", "Color",
           "chain", "chain_loop"]
