# -*- coding: utf-8 -*-
"""Describe solids as networks of oriented dots and emit OpenSCAD."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("scad-dots")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from scaddots.config import RenderConfig, load_config
from scaddots.connector import Connector, bridge
from scaddots.dot import Corner, Dot, DotShape
from scaddots.errors import (
    ArityMismatch,
    ChainError,
    DegenerateHull,
    LabelMismatch,
    ParseError,
    ScadDotsError,
    UnknownShape,
)
from scaddots.graph import Edge, Graph, GraphBuilder, Node, Style, chain, chain_loop
from scaddots.hull import Hull, convex_hull, templated_hull
from scaddots.pose import Pose, compose, inverse
from scaddots.primitives import Cylinder, CylinderAlign, Extrusion, extrude_z, mark
from scaddots.render import render, resolve, write_scad
from scaddots.shape import (
    Face,
    Shape,
    ShapeKind,
    cuboid,
    prism,
    regular_prism,
    ring_prism,
    tetra,
)

__all__ = [
    "__version__",
    "RenderConfig", "load_config",
    "Connector", "bridge",
    "Corner", "Dot", "DotShape",
    "ArityMismatch", "ChainError", "DegenerateHull", "LabelMismatch",
    "ParseError", "ScadDotsError", "UnknownShape",
    "Edge", "Graph", "GraphBuilder", "Node", "Style", "chain", "chain_loop",
    "Hull", "convex_hull", "templated_hull",
    "Pose", "compose", "inverse",
    "Cylinder", "CylinderAlign", "Extrusion", "extrude_z", "mark",
    "render", "resolve", "write_scad",
    "Face", "Shape", "ShapeKind", "cuboid", "prism", "regular_prism",
    "ring_prism", "tetra",
]
