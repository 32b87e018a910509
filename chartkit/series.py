from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from chartkit.errors import ChartDataError


LineKind = Literal["line", "bar", "area", "lineArea"]
ChartType = Literal["regular", "y_scaled", "stacked", "percentage"]
Color = tuple[int, int, int, int]

LINE_KINDS: tuple[str, ...] = ("line", "bar", "area", "lineArea")
CHART_TYPES: tuple[str, ...] = ("regular", "y_scaled", "stacked", "percentage")


@dataclass(frozen=True)
class Line:
    values: np.ndarray
    name: str
    color: Color = (62, 149, 255, 255)
    kind: LineKind = "line"

    def __post_init__(self) -> None:
        raw = np.asarray(self.values)
        if raw.dtype.kind == "f":
            if not np.all(np.isfinite(raw)) or not np.all(raw == np.floor(raw)):
                raise ChartDataError(f"line `{self.name}` values must be whole numbers")
        elif raw.dtype.kind not in {"i", "u"}:
            raise ChartDataError(f"line `{self.name}` values must be integers, got {raw.dtype}")
        arr = raw.astype(np.int64)
        if arr.ndim != 1:
            raise ChartDataError(f"line `{self.name}` values must be 1-D")
        if arr.size == 0:
            raise ChartDataError(f"line `{self.name}` values must be non-empty")
        if self.kind not in LINE_KINDS:
            raise ChartDataError(f"unsupported line kind: {self.kind}")
        if len(self.color) != 4 or any(not 0 <= int(c) <= 255 for c in self.color):
            raise ChartDataError(f"line `{self.name}` color must be RGBA in 0..255")
        arr.setflags(write=False)
        object.__setattr__(self, "values", arr)
        object.__setattr__(self, "color", tuple(int(c) for c in self.color))

    def __len__(self) -> int:
        return int(self.values.size)


@dataclass(frozen=True)
class ChartData:
    labels: tuple[str, ...]
    lines: tuple[Line, ...]
    type: ChartType = "regular"

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(str(label) for label in self.labels))
        object.__setattr__(self, "lines", tuple(self.lines))
        if self.type not in CHART_TYPES:
            raise ChartDataError(f"unsupported chart type: {self.type}")
        if not self.lines:
            raise ChartDataError("chart must contain at least one line")
        points = len(self.lines[0])
        for line in self.lines[1:]:
            if len(line) != points:
                raise ChartDataError(
                    f"line length mismatch: `{line.name}` has {len(line)} points, expected {points}"
                )
        if len(self.labels) != points:
            raise ChartDataError(f"label count mismatch: {len(self.labels)} != {points}")
        if self.type == "y_scaled" and len(self.lines) != 2:
            raise ChartDataError("y_scaled charts must contain exactly two lines")

    @property
    def lines_count(self) -> int:
        return len(self.lines)

    @property
    def points_count(self) -> int:
        return len(self.labels)
