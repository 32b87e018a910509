from __future__ import annotations

from typing import Sequence

import numpy as np

from chartkit.aggregation import LineAggregate
from chartkit.paths import ChartPath
from chartkit.series import ChartType, LineKind


DEFAULT_PREVIEW_STRIDE = 5


def make_line_path(aggregated: np.ndarray, min_y: float) -> ChartPath:
    ys = np.asarray(aggregated, dtype=np.float64) - float(min_y)
    xs = np.arange(ys.size, dtype=np.float64)
    return ChartPath(points=np.column_stack((xs, ys)), closed=False)


def make_bar_path(aggregated: np.ndarray, min_y: float) -> ChartPath:
    return _step_silhouette(np.asarray(aggregated, dtype=np.float64) - float(min_y), step=1)


def make_bar_preview_path(aggregated: np.ndarray, min_y: float, *, stride: int = DEFAULT_PREVIEW_STRIDE) -> ChartPath:
    if stride <= 0:
        raise ValueError("stride must be > 0")
    sampled = np.asarray(aggregated, dtype=np.float64)[::stride] - float(min_y)
    return _step_silhouette(sampled, step=stride)


def make_percent_line_path(aggregated: np.ndarray, min_y: float) -> ChartPath:
    ys = np.asarray(aggregated, dtype=np.float64) - float(min_y)
    n = ys.size
    pts = np.empty((n + 2, 2), dtype=np.float64)
    pts[0] = (0.0, 0.0)
    pts[1 : n + 1, 0] = np.arange(n, dtype=np.float64)
    pts[1 : n + 1, 1] = ys
    pts[n + 1] = (float(n), 0.0)
    return ChartPath(points=pts, closed=True)


def _step_silhouette(ys: np.ndarray, *, step: int) -> ChartPath:
    n = ys.size
    pts = np.empty((2 * n + 2, 2), dtype=np.float64)
    pts[0] = (0.0, 0.0)
    left = np.arange(n, dtype=np.float64) * step
    pts[1 : 2 * n + 1 : 2, 0] = left
    pts[2 : 2 * n + 2 : 2, 0] = left + step
    pts[1 : 2 * n + 1, 1] = np.repeat(ys, 2)
    pts[2 * n + 1] = (float(n * step), 0.0)
    return ChartPath(points=pts, closed=True)


def build_line_paths(
    chart_type: ChartType,
    kinds: Sequence[LineKind],
    aggregates: Sequence[LineAggregate],
    visible: Sequence[bool],
    *,
    stride: int = DEFAULT_PREVIEW_STRIDE,
) -> list[tuple[ChartPath, ChartPath]]:
    """Full-resolution and preview path for every line, in line order."""
    if chart_type == "stacked":
        return _banded(aggregates, visible, full=make_bar_path, preview=_preview_maker(stride))
    if chart_type == "percentage":
        return _banded(aggregates, visible, full=make_percent_line_path, preview=None)

    out: list[tuple[ChartPath, ChartPath]] = []
    for kind, agg, is_visible in zip(kinds, aggregates, visible, strict=True):
        if chart_type == "regular" and kind == "bar":
            path = make_bar_path(agg.values, agg.min_y)
            preview = make_bar_preview_path(agg.values, agg.min_y, stride=stride)
            if not is_visible:
                path, preview = path.collapsed(), preview.collapsed()
            out.append((path, preview))
        else:
            path = make_line_path(agg.values, agg.min_y)
            out.append((path, path))
    return out


def _preview_maker(stride: int):
    def make(aggregated: np.ndarray, min_y: float) -> ChartPath:
        return make_bar_preview_path(aggregated, min_y, stride=stride)

    return make


def _banded(aggregates, visible, *, full, preview) -> list[tuple[ChartPath, ChartPath]]:
    # A hidden band folds onto the band of the nearest visible line below it,
    # or flattens onto the baseline when there is none.
    out: list[tuple[ChartPath, ChartPath]] = []
    below: tuple[ChartPath, ChartPath] | None = None
    for agg, is_visible in zip(aggregates, visible, strict=True):
        path = full(agg.values, agg.min_y)
        preview_path = path if preview is None else preview(agg.values, agg.min_y)
        if is_visible:
            below = (path, preview_path)
            out.append(below)
        elif below is not None:
            out.append(below)
        else:
            out.append((path.collapsed(), preview_path.collapsed()))
    return out
