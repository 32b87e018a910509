from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Protocol, Sequence

import numpy as np

from chartkit.errors import ChartDataError
from chartkit.series import ChartType, LineKind


# Cumulative percentages are rounded to this many decimals before ceil() so
# float drift such as 100.00000000000001 does not round up to 101.
_PERCENT_DECIMALS = 9


@dataclass(frozen=True)
class LineAggregate:
    values: np.ndarray
    min_y: float
    max_y: float


class AggregationStrategy(Protocol):
    def aggregate(
        self,
        values: Sequence[np.ndarray],
        kinds: Sequence[LineKind],
        visible: Sequence[bool],
    ) -> list[LineAggregate]:
        ...


def _frozen(values: np.ndarray) -> np.ndarray:
    out = np.asarray(values, dtype=np.float64).copy()
    out.setflags(write=False)
    return out


class RegularAggregation:
    """Identity aggregation; bar lines are anchored at zero."""

    def aggregate(
        self,
        values: Sequence[np.ndarray],
        kinds: Sequence[LineKind],
        visible: Sequence[bool],
    ) -> list[LineAggregate]:
        out: list[LineAggregate] = []
        for raw, kind in zip(values, kinds, strict=True):
            agg = _frozen(raw)
            if kind == "bar":
                out.append(LineAggregate(values=agg, min_y=0.0, max_y=float(np.max(agg))))
            else:
                out.append(LineAggregate(values=agg, min_y=float(np.min(agg)), max_y=float(np.max(agg))))
        return out


class YScaledAggregation:
    """Identity aggregation with independent per-line extents (one axis per line)."""

    def aggregate(
        self,
        values: Sequence[np.ndarray],
        kinds: Sequence[LineKind],
        visible: Sequence[bool],
    ) -> list[LineAggregate]:
        out: list[LineAggregate] = []
        for raw in values:
            agg = _frozen(raw)
            out.append(LineAggregate(values=agg, min_y=float(np.min(agg)), max_y=float(np.max(agg))))
        return out


class StackedAggregation:
    """Running stack in line order.

    Each line sits on the curve of the nearest preceding visible line. Hidden
    lines still get a stack computed on the current baseline, but never
    become the baseline for the lines after them.
    """

    def aggregate(
        self,
        values: Sequence[np.ndarray],
        kinds: Sequence[LineKind],
        visible: Sequence[bool],
    ) -> list[LineAggregate]:
        if not values:
            return []
        baseline = np.zeros(np.asarray(values[0]).shape, dtype=np.float64)
        out: list[LineAggregate] = []
        for raw, is_visible in zip(values, visible, strict=True):
            agg = _frozen(np.asarray(raw, dtype=np.float64) + baseline)
            out.append(LineAggregate(values=agg, min_y=0.0, max_y=float(np.max(agg))))
            if is_visible:
                baseline = agg
        return out


class PercentageAggregation:
    """Cumulative share (0..100) of each visible line, in line order."""

    def aggregate(
        self,
        values: Sequence[np.ndarray],
        kinds: Sequence[LineKind],
        visible: Sequence[bool],
    ) -> list[LineAggregate]:
        if not values:
            return []
        if not any(visible):
            raise ChartDataError("percentage aggregation requires at least one visible line")

        matrix = np.vstack([np.asarray(v, dtype=np.float64) for v in values])
        mask = np.asarray(visible, dtype=bool)
        totals = matrix[mask].sum(axis=0)
        nonzero = totals != 0
        safe_totals = np.where(nonzero, totals, 1.0)
        top = int(np.flatnonzero(mask)[-1])

        running = np.zeros(matrix.shape[1], dtype=np.float64)
        out: list[LineAggregate] = []
        for idx, row in enumerate(matrix):
            if mask[idx]:
                share = np.where(nonzero, row / safe_totals * 100.0, 0.0)
                running = running + share
            agg = _frozen(running)
            if idx == top:
                max_y = 100.0
            else:
                max_y = float(math.ceil(round(float(np.max(agg)), _PERCENT_DECIMALS)))
            out.append(LineAggregate(values=agg, min_y=0.0, max_y=max_y))
        return out


AGGREGATION_STRATEGIES: dict[str, AggregationStrategy] = {
    "regular": RegularAggregation(),
    "y_scaled": YScaledAggregation(),
    "stacked": StackedAggregation(),
    "percentage": PercentageAggregation(),
}


def strategy_for(chart_type: ChartType) -> AggregationStrategy:
    try:
        return AGGREGATION_STRATEGIES[chart_type]
    except KeyError as exc:
        raise ChartDataError(f"unsupported chart type: {chart_type}") from exc


def aggregate_lines(
    chart_type: ChartType,
    values: Sequence[np.ndarray],
    kinds: Sequence[LineKind],
    visible: Sequence[bool],
) -> list[LineAggregate]:
    if not (len(values) == len(kinds) == len(visible)):
        raise ChartDataError("values, kinds and visibility must have the same length")
    return strategy_for(chart_type).aggregate(values, kinds, visible)
