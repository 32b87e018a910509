from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from chartkit.presentation import PresentationState
from chartkit.series import Color
from chartkit.viewport import ViewportController


@dataclass(frozen=True)
class LinePoint:
    line_index: int
    name: str
    color: Color
    value: int
    y: float


@dataclass(frozen=True)
class Inspection:
    x: float
    index: int
    label: str
    points: tuple[LinePoint, ...]


def value_at(values: np.ndarray, x: float, *, bucket: bool = False) -> float:
    """Linear interpolation at fractional index ``x``; ``bucket`` returns the floor sample."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError("cannot interpolate an empty series")
    x = min(max(float(x), 0.0), float(arr.size - 1))
    lo = int(math.floor(x))
    if bucket:
        return float(arr[lo])
    hi = min(lo + 1, arr.size - 1)
    t = x - lo
    return float(arr[lo] + (arr[hi] - arr[lo]) * t)


def inspect(state: PresentationState, x: float) -> Inspection:
    """Crosshair data for every visible line at fractional index ``x``."""
    last = state.points_count - 1
    if not 0.0 <= x <= last:
        raise IndexError(f"x={x} out of range [0, {last}]")
    nearest = min(last, int(math.floor(x + 0.5)))
    floor = int(math.floor(x))
    visible = state.visible_indices()
    points: list[LinePoint] = []
    for i in visible:
        line = state.line_at(i)
        # Bars highlight the bucket under the pointer rather than a blend of two.
        bucket = line.kind == "bar"
        points.append(
            LinePoint(
                line_index=i,
                name=line.name,
                color=line.color,
                value=int(line.values[floor if bucket else nearest]),
                y=value_at(line.aggregated_values, x, bucket=bucket),
            )
        )
    index = floor if all(state.line_at(i).kind == "bar" for i in visible) else nearest
    return Inspection(x=float(x), index=index, label=state.label_at(index), points=tuple(points))


def inspect_at_pixel(state: PresentationState, controller: ViewportController, px: float, width: float) -> Inspection:
    return inspect(state, controller.index_at_pixel(px, width))
