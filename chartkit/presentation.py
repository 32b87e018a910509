from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable

import numpy as np

from chartkit.aggregation import aggregate_lines
from chartkit.path_builder import DEFAULT_PREVIEW_STRIDE, build_line_paths
from chartkit.paths import ChartPath
from chartkit.series import ChartData, ChartType, Color, Line, LineKind

LOGGER = logging.getLogger(__name__)

VisibilityCallback = Callable[["PresentationState", int, bool], None]


@dataclass
class PresentationLine:
    line: Line
    is_visible: bool = True
    aggregated_values: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float64))
    min_y: float = 0.0
    max_y: float = 0.0
    path: ChartPath = field(default_factory=ChartPath.empty)
    preview_path: ChartPath = field(default_factory=ChartPath.empty)

    @property
    def values(self) -> np.ndarray:
        return self.line.values

    @property
    def name(self) -> str:
        return self.line.name

    @property
    def color(self) -> Color:
        return self.line.color

    @property
    def kind(self) -> LineKind:
        return self.line.kind


class PresentationState:
    """Per-chart presentation controller.

    Owns line visibility and the cached aggregation/path layout of every line.
    All mutation goes through :meth:`set_line_visible`, which recomputes the
    whole line set before publishing anything, so readers never see a chart
    where only some lines were re-aggregated.
    """

    def __init__(
        self,
        chart_data: ChartData,
        on_visibility_change: VisibilityCallback | None = None,
        *,
        preview_stride: int = DEFAULT_PREVIEW_STRIDE,
    ) -> None:
        if preview_stride <= 0:
            raise ValueError("preview_stride must be > 0")
        self._chart_data = chart_data
        self._on_visibility_change = on_visibility_change
        self._preview_stride = preview_stride
        self._lines = [PresentationLine(line) for line in chart_data.lines]
        self.lower = 0.0
        self.upper = 0.0
        self._recalc_bounds()

    @property
    def chart_data(self) -> ChartData:
        return self._chart_data

    @property
    def lines_count(self) -> int:
        return self._chart_data.lines_count

    @property
    def points_count(self) -> int:
        return self._chart_data.points_count

    @property
    def labels(self) -> tuple[str, ...]:
        return self._chart_data.labels

    @property
    def type(self) -> ChartType:
        return self._chart_data.type

    def label_at(self, point: int) -> str:
        _check_index(point, self.points_count, "point")
        return self._chart_data.labels[point]

    def line_at(self, index: int) -> PresentationLine:
        _check_index(index, self.lines_count, "line index")
        return self._lines[index]

    def is_line_visible_at(self, index: int) -> bool:
        return self.line_at(index).is_visible

    def visible_indices(self) -> list[int]:
        return [i for i, line in enumerate(self._lines) if line.is_visible]

    def visible_lines(self) -> list[PresentationLine]:
        return [line for line in self._lines if line.is_visible]

    def line_bounds(self, index: int) -> tuple[float, float]:
        line = self.line_at(index)
        return (line.min_y, line.max_y)

    def set_line_visible(self, visible: bool, index: int) -> bool:
        """Show or hide one line; returns ``False`` when the request was rejected.

        Hiding the last visible line is refused so the chart always has an
        extent to draw. A request that matches the current state changes
        nothing and does not notify the callback.
        """
        target = self.line_at(index)
        if not visible and len(self.visible_indices()) == 1:
            LOGGER.debug("refusing to hide last visible line %d (%s)", index, target.name)
            return False
        if target.is_visible == bool(visible):
            return True
        target.is_visible = bool(visible)
        self._recalc_bounds()
        if self._on_visibility_change is not None:
            self._on_visibility_change(self, index, bool(visible))
        return True

    def toggle_line(self, index: int) -> bool:
        return self.set_line_visible(not self.is_line_visible_at(index), index)

    def _recalc_bounds(self) -> None:
        visible = [line.is_visible for line in self._lines]
        kinds = [line.kind for line in self._lines]
        aggregates = aggregate_lines(self.type, [line.values for line in self._lines], kinds, visible)
        paths = build_line_paths(self.type, kinds, aggregates, visible, stride=self._preview_stride)

        lower = min(agg.min_y for agg, vis in zip(aggregates, visible) if vis)
        upper = max(agg.max_y for agg, vis in zip(aggregates, visible) if vis)

        for line, agg, (path, preview) in zip(self._lines, aggregates, paths, strict=True):
            line.aggregated_values = agg.values
            line.min_y = agg.min_y
            line.max_y = agg.max_y
            line.path = path
            line.preview_path = preview
        self.lower = lower
        self.upper = upper
        LOGGER.debug(
            "recomputed %s chart: %d/%d lines visible, bounds=(%s, %s)",
            self.type,
            sum(visible),
            len(visible),
            lower,
            upper,
        )


def _check_index(index: int, count: int, label: str) -> None:
    if not 0 <= index < count:
        raise IndexError(f"{label} {index} out of range [0, {count})")
