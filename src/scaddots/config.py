"""
Render configuration.

``RenderConfig`` is passed explicitly to :func:`scaddots.render.render`;
nothing here is module-level mutable state.  Settings can also be read
from a YAML file::

    quality: high        # optional preset, applied first
    precision: 3
    header: false
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml

__all__ = ["RenderConfig", "QUALITY_DETAIL", "from_mapping", "load_config"]

# $fn for sphere and cylinder dots
QUALITY_DETAIL = {
    "low": 5,
    "medium": 20,
    "high": 60,
}


@dataclass(frozen=True)
class RenderConfig:
    precision: int = 4
    default_dot_size: float = 1.0
    detail: int = 20
    header: bool = True
    indent: str = "  "

    def __post_init__(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int) \
                or not 0 <= self.precision <= 12:
            raise ValueError(f"precision must be an integer in 0..12, got {self.precision!r}")
        if isinstance(self.default_dot_size, bool) \
                or not isinstance(self.default_dot_size, (int, float)) \
                or self.default_dot_size <= 0:
            raise ValueError(f"default_dot_size must be positive, got {self.default_dot_size!r}")
        if isinstance(self.detail, bool) or not isinstance(self.detail, int) or self.detail < 3:
            raise ValueError(f"detail must be an integer >= 3, got {self.detail!r}")
        if not isinstance(self.header, bool):
            raise ValueError(f"header must be true or false, got {self.header!r}")
        if not isinstance(self.indent, str) or self.indent.strip():
            raise ValueError(f"indent must be whitespace, got {self.indent!r}")

    @classmethod
    def quality(cls, name: str, **changes) -> "RenderConfig":
        """Preset with the curve detail of ``low``, ``medium`` or ``high``."""
        try:
            detail = QUALITY_DETAIL[name.lower()]
        except (KeyError, AttributeError):
            raise ValueError(
                f"unknown quality {name!r}, expected one of {sorted(QUALITY_DETAIL)}"
            ) from None
        return cls(detail=detail, **changes)

    def replace(self, **changes) -> "RenderConfig":
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def _field_names():
    return {f.name for f in dataclasses.fields(RenderConfig)}


def from_mapping(data: Dict[str, Any]) -> RenderConfig:
    if not isinstance(data, dict):
        raise ValueError(f"render config must be a mapping, got {type(data).__name__}")
    data = dict(data)
    unknown = set(data) - _field_names() - {"quality"}
    if unknown:
        raise ValueError(f"unknown render config keys: {sorted(unknown)}")
    quality = data.pop("quality", None)
    if quality is not None:
        return RenderConfig.quality(quality, **data)
    return RenderConfig(**data)


def load_config(path: Union[str, Path]) -> RenderConfig:
    """Read a :class:`RenderConfig` from a YAML file.

    An empty file gives the defaults.  Unknown keys and bad values raise
    ``ValueError``.
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is None:
        return RenderConfig()
    try:
        return from_mapping(data)
    except ValueError as err:
        raise ValueError(f"{path}: {err}") from None
