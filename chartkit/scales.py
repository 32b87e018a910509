from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
import math

import numpy as np


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


@dataclass(frozen=True)
class AxisScale:
    lower: int
    upper: int
    step: int
    ticks: tuple[int, ...]


def build_transform(limits: DataLimits, width: int, height: int, *, y_offset: float = 0.0) -> PlotTransform:
    """Affine map from data space to a ``width`` x ``height`` pixel box.

    ``y_offset`` is added to path y before scaling; line paths are stored
    relative to their own ``min_y``, so callers pass that value here.
    """
    if width <= 1 or height <= 1:
        raise ValueError("plot viewport width/height must be > 1")
    if limits.xmax <= limits.xmin or limits.ymax <= limits.ymin:
        raise ValueError("data limits must have positive extent")
    sx = (width - 1) / (limits.xmax - limits.xmin)
    tx = -limits.xmin * sx
    sy = (height - 1) / (limits.ymax - limits.ymin)
    ty = (y_offset - limits.ymin) * sy
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty)


def map_to_pixels(
    x: np.ndarray, y: np.ndarray, transform: PlotTransform, height: int | None = None
) -> tuple[np.ndarray, np.ndarray]:
    """Apply ``transform``; with ``height`` the y axis is flipped to screen space."""
    px = np.asarray(x, dtype=np.float64) * transform.sx + transform.tx
    py = np.asarray(y, dtype=np.float64) * transform.sy + transform.ty
    if height is not None:
        py = (height - 1) - py
    return px, py


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def axis_steps(lower: float, upper: float, tick_count: int = 5) -> AxisScale:
    if tick_count <= 0:
        raise ValueError("tick_count must be > 0")
    if upper < lower:
        raise ValueError("upper must be >= lower")
    low = int(math.floor(lower))
    step = max(1, int(math.ceil((upper - low) / tick_count)))
    ticks = tuple(low + step * k for k in range(tick_count))
    return AxisScale(lower=low, upper=low + step * tick_count, step=step, ticks=ticks)


def pad_extent(lower: float, upper: float, *, ratio: float = 0.1, clamp_zero: bool = False) -> tuple[float, float]:
    if ratio < 0:
        raise ValueError("ratio must be >= 0")
    pad = round_half_up((upper - lower) * ratio)
    padded_lower = lower - pad
    if clamp_zero and lower >= 0:
        padded_lower = max(0.0, padded_lower)
    return (padded_lower, upper + pad)


def format_tick(value: float) -> str:
    """Axis label for a whole-number tick; millions and billions get a suffix."""
    if abs(value) >= 1e6:
        return _format_compact(value)
    return str(round_half_up(value))


def format_ticks_for_axis(ticks: Sequence[int]) -> list[str]:
    return [format_tick(tick) for tick in ticks]


def _format_compact(value: float) -> str:
    for divisor, suffix in ((1e9, "B"), (1e6, "M")):
        if abs(value) >= divisor:
            out = f"{value / divisor:.1f}".rstrip("0").rstrip(".")
            return f"{out}{suffix}"
    return str(value)
