from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from chartkit.presentation import PresentationLine, PresentationState
from chartkit.scales import AxisScale, DataLimits, PlotTransform, axis_steps, build_transform, pad_extent

DEFAULT_TICK_COUNT = 5
DEFAULT_PADDING_RATIO = 0.1
DEFAULT_X_LABEL_COUNT = 5


@dataclass(frozen=True)
class Viewport:
    min_index: int
    max_index: int

    def __post_init__(self) -> None:
        if self.min_index < 0:
            raise ValueError("min_index must be >= 0")
        if self.max_index < self.min_index:
            raise ValueError("max_index must be >= min_index")

    @property
    def span(self) -> int:
        return self.max_index - self.min_index


class ViewportController:
    """Visible index window driven by the preview strip.

    The window starts on the last ``1 / initial_fraction`` of the series and
    can never be narrower than ``1 / min_fraction`` of it.
    """

    def __init__(self, points_count: int, *, initial_fraction: int = 5, min_fraction: int = 10) -> None:
        if points_count <= 0:
            raise ValueError("points_count must be > 0")
        if initial_fraction <= 0 or min_fraction <= 0:
            raise ValueError("initial_fraction and min_fraction must be > 0")
        self._count = points_count - 1
        self._min_width = 0 if self._count == 0 else max(1, self._count // min_fraction)
        width = 0 if self._count == 0 else max(self._min_width, self._count // initial_fraction, 1)
        self._viewport = Viewport(min_index=self._count - min(width, self._count), max_index=self._count)

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def last_index(self) -> int:
        return self._count

    @property
    def min_width(self) -> int:
        return self._min_width

    def set_range(self, min_index: int, max_index: int) -> Viewport:
        if not 0 <= min_index <= max_index <= self._count:
            raise ValueError(f"viewport [{min_index}, {max_index}] outside [0, {self._count}]")
        if max_index - min_index < self._min_width:
            raise ValueError(f"viewport [{min_index}, {max_index}] narrower than {self._min_width} indices")
        self._viewport = Viewport(min_index=min_index, max_index=max_index)
        return self._viewport

    def pan(self, delta: int) -> Viewport:
        span = self._viewport.span
        start = min(max(0, self._viewport.min_index + int(delta)), self._count - span)
        self._viewport = Viewport(min_index=start, max_index=start + span)
        return self._viewport

    def move_left_edge(self, index: int) -> Viewport:
        start = max(0, min(int(index), self._viewport.max_index - self._min_width))
        self._viewport = Viewport(min_index=start, max_index=self._viewport.max_index)
        return self._viewport

    def move_right_edge(self, index: int) -> Viewport:
        end = min(self._count, max(int(index), self._viewport.min_index + self._min_width))
        self._viewport = Viewport(min_index=self._viewport.min_index, max_index=end)
        return self._viewport

    def index_at(self, fraction: float) -> float:
        f = min(1.0, max(0.0, float(fraction)))
        return self._viewport.min_index + f * self._viewport.span

    def index_at_pixel(self, px: float, width: float) -> float:
        if width <= 0:
            raise ValueError("width must be > 0")
        return self.index_at(px / width)


def _anchored_at_zero(state: PresentationState, line: PresentationLine) -> bool:
    if state.type in ("stacked", "percentage"):
        return True
    return state.type == "regular" and line.kind == "bar"


def line_extent(state: PresentationState, index: int, viewport: Viewport) -> tuple[float, float]:
    """Y-extent of one line's aggregated values inside ``viewport``."""
    line = state.line_at(index)
    window = line.aggregated_values[viewport.min_index : viewport.max_index + 1]
    if window.size == 0:
        raise ValueError(f"viewport [{viewport.min_index}, {viewport.max_index}] outside the series")
    low = 0.0 if _anchored_at_zero(state, line) else float(np.min(window))
    return (min(low, float(np.min(window))), float(np.max(window)))


def visible_extent(
    state: PresentationState,
    viewport: Viewport,
    indices: Iterable[int] | None = None,
) -> tuple[float, float]:
    """Combined y-extent of the visible lines restricted to ``viewport``."""
    if state.type == "percentage":
        return (0.0, 100.0)
    chosen = state.visible_indices() if indices is None else [i for i in indices if state.is_line_visible_at(i)]
    if not chosen:
        raise ValueError("no visible lines to measure")
    extents = [line_extent(state, i, viewport) for i in chosen]
    return (min(lo for lo, _ in extents), max(hi for _, hi in extents))


def axis_for(
    state: PresentationState,
    viewport: Viewport,
    *,
    tick_count: int = DEFAULT_TICK_COUNT,
    padding_ratio: float = DEFAULT_PADDING_RATIO,
) -> AxisScale:
    """Y-axis scale for the visible window.

    Regular and stacked charts get padding above and below the data; the
    padding never pushes a zero-anchored chart (stacked, or with visible
    bar/area lines) below zero.
    """
    lower, upper = visible_extent(state, viewport)
    if state.type in ("regular", "stacked"):
        clamp_zero = state.type == "stacked" or any(
            line.kind in ("bar", "area") for line in state.visible_lines()
        )
        lower, upper = pad_extent(lower, upper, ratio=padding_ratio, clamp_zero=clamp_zero)
    return axis_steps(lower, upper, tick_count)


def line_axis_for(
    state: PresentationState,
    index: int,
    viewport: Viewport,
    *,
    tick_count: int = DEFAULT_TICK_COUNT,
) -> AxisScale:
    """Independent axis for one line of a y-scaled chart."""
    lower, upper = line_extent(state, index, viewport)
    return axis_steps(lower, upper, tick_count)


def line_transform(
    state: PresentationState,
    index: int,
    viewport: Viewport,
    axis: AxisScale,
    width: int,
    height: int,
) -> PlotTransform:
    """Map a line's data-space path into a ``width`` x ``height`` plot box."""
    line = state.line_at(index)
    xmax = viewport.max_index if viewport.span > 0 else viewport.min_index + 1
    limits = DataLimits(xmin=float(viewport.min_index), xmax=float(xmax), ymin=float(axis.lower), ymax=float(axis.upper))
    return build_transform(limits, width, height, y_offset=line.min_y)


def x_axis_labels(labels: Sequence[str], viewport: Viewport, count: int = DEFAULT_X_LABEL_COUNT) -> list[str]:
    """``count`` evenly spaced labels across the window plus the label at its right edge."""
    if count <= 0:
        raise ValueError("count must be > 0")
    if viewport.max_index >= len(labels):
        raise IndexError(f"viewport end {viewport.max_index} out of range for {len(labels)} labels")
    step = viewport.span / count
    picked = [labels[viewport.min_index + int(np.floor(step * i + 0.5))] for i in range(count)]
    picked.append(labels[viewport.max_index])
    return picked
