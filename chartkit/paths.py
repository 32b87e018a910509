from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from chartkit.scales import PlotTransform, map_to_pixels


@dataclass(frozen=True, eq=False)
class ChartPath:
    """Vector path in data space: a move-to followed by line-to segments."""

    points: np.ndarray
    closed: bool = False

    def __post_init__(self) -> None:
        arr = np.array(self.points, dtype=np.float64).reshape(-1, 2)
        arr.setflags(write=False)
        object.__setattr__(self, "points", arr)

    @classmethod
    def empty(cls) -> "ChartPath":
        return cls(points=np.empty((0, 2), dtype=np.float64))

    @property
    def is_empty(self) -> bool:
        return self.points.shape[0] == 0

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChartPath):
            return NotImplemented
        return self.closed == other.closed and np.array_equal(self.points, other.points)

    def __hash__(self) -> int:
        return hash((self.closed, self.points.tobytes()))

    def scaled(self, sx: float = 1.0, sy: float = 1.0) -> "ChartPath":
        return ChartPath(points=self.points * np.asarray([sx, sy], dtype=np.float64), closed=self.closed)

    def collapsed(self) -> "ChartPath":
        return self.scaled(1.0, 0.0)

    def transformed(self, transform: PlotTransform, *, height: int | None = None) -> "ChartPath":
        px, py = map_to_pixels(self.points[:, 0], self.points[:, 1], transform, height)
        return ChartPath(points=np.column_stack([px, py]), closed=self.closed)

    def bounds(self) -> tuple[float, float, float, float]:
        if self.is_empty:
            raise ValueError("empty path has no bounds")
        xmin, ymin = np.min(self.points, axis=0)
        xmax, ymax = np.max(self.points, axis=0)
        return (float(xmin), float(ymin), float(xmax), float(ymax))

    def to_svg_path(self, *, precision: int = 3) -> str:
        if self.is_empty:
            return ""
        parts: list[str] = []
        for i, (x, y) in enumerate(self.points.tolist()):
            cmd = "M" if i == 0 else "L"
            parts.append(f"{cmd}{_fmt(x, precision)} {_fmt(y, precision)}")
        if self.closed:
            parts.append("Z")
        return " ".join(parts)


def _fmt(value: float, precision: int) -> str:
    out = f"{value:.{precision}f}"
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out
