"""
Model-authoring exceptions.

Every error raised by scad-dots for a malformed model derives from
``ScadDotsError``. The subclasses carry the offending values as attributes
so a caller can tell which shape or edge needs fixing. None of these are
transient: rendering stops at the first one.
"""

from typing import Optional, Sequence, Tuple


class ScadDotsError(Exception):
    """Base exception for scad-dots model errors."""
    pass


class ArityMismatch(ScadDotsError):
    """A shape was built with the wrong number of dots for its kind."""

    def __init__(self, kind, expected: str, actual: int):
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{kind.name} shape needs {expected} dots, got {actual}"
        )


class DegenerateHull(ScadDotsError):
    """A convex hull was requested for points that do not span 3D."""

    def __init__(self, count: int, reason: str):
        self.count = count
        self.reason = reason
        super().__init__(f"cannot build a convex hull of {count} points: {reason}")


class LabelMismatch(ScadDotsError):
    """Two shapes do not share a bridgeable rim."""

    def __init__(self, left: Sequence[str], right: Sequence[str], detail: str,
                 edge: Optional[Tuple[int, int]] = None):
        self.left = tuple(left)
        self.right = tuple(right)
        self.detail = detail
        self.edge = edge
        super().__init__(self._message())

    def _message(self) -> str:
        where = f"edge {self.edge[0]} -> {self.edge[1]}: " if self.edge else ""
        return (f"{where}{self.detail} "
                f"(left rim {list(self.left)}, right rim {list(self.right)})")

    def at_edge(self, edge: Tuple[int, int]) -> "LabelMismatch":
        """Return a copy of this error tagged with the graph edge."""
        return LabelMismatch(self.left, self.right, self.detail, edge=edge)


class ChainError(ScadDotsError):
    """Need at least 2 shapes to chain."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"need at least 2 shapes to chain, got {count}")


class UnknownShape(ScadDotsError, KeyError):
    """An edge refers to a shape that is not in the graph."""

    def __init__(self, ref):
        self.ref = ref
        super().__init__(f"no shape with ref {ref!r} in graph")

    def __str__(self) -> str:
        return self.args[0]


class ParseError(ScadDotsError):
    """OpenSCAD text could not be parsed."""

    def __init__(self, message: str, offset: int):
        self.offset = offset
        super().__init__(f"{message} at offset {offset}")


__all__ = [
    "ScadDotsError",
    "ArityMismatch",
    "DegenerateHull",
    "LabelMismatch",
    "ChainError",
    "UnknownShape",
    "ParseError",
]
