from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import tomllib
from typing import Any, Mapping

from chartkit.errors import ChartDataError


@dataclass(frozen=True)
class LayoutConfig:
    tick_count: int = 5
    padding_ratio: float = 0.1
    preview_stride: int = 5
    initial_fraction: int = 5
    min_fraction: int = 10
    x_label_count: int = 5
    date_format: str = "%b %d"

    def __post_init__(self) -> None:
        for name in ("tick_count", "preview_stride", "initial_fraction", "min_fraction", "x_label_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ChartDataError(f"LayoutConfig.{name} must be a positive integer")
        if isinstance(self.padding_ratio, bool) or not isinstance(self.padding_ratio, (int, float)):
            raise ChartDataError("LayoutConfig.padding_ratio must be a number")
        if not 0.0 <= float(self.padding_ratio) < 1.0:
            raise ChartDataError("LayoutConfig.padding_ratio must be in [0, 1)")
        if not self.date_format:
            raise ChartDataError("LayoutConfig.date_format must be non-empty")


def layout_config_from_dict(raw: Mapping[str, Any]) -> LayoutConfig:
    known = {f.name for f in fields(LayoutConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ChartDataError(f"unknown layout settings: {', '.join(unknown)}")
    return LayoutConfig(**dict(raw))


def load_layout_config(path: Path) -> LayoutConfig:
    """Read the ``[layout]`` table of a TOML file; a missing table yields defaults."""
    with Path(path).open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartDataError(f"invalid layout config {path}: {exc}") from exc
    table = raw.get("layout", {})
    if not isinstance(table, dict):
        raise ChartDataError("`layout` must be a table")
    return layout_config_from_dict(table)
