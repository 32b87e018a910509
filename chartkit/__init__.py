from chartkit.aggregation import AGGREGATION_STRATEGIES, LineAggregate, aggregate_lines
from chartkit.config import LayoutConfig, load_layout_config
from chartkit.errors import ChartDataError
from chartkit.interpolation import Inspection, LinePoint, inspect, value_at
from chartkit.paths import ChartPath
from chartkit.presentation import PresentationLine, PresentationState
from chartkit.series import ChartData, Line
from chartkit.viewport import Viewport, ViewportController, axis_for, line_axis_for, x_axis_labels

__all__ = [
    "AGGREGATION_STRATEGIES",
    "ChartData",
    "ChartDataError",
    "ChartPath",
    "Inspection",
    "LayoutConfig",
    "Line",
    "LineAggregate",
    "LinePoint",
    "PresentationLine",
    "PresentationState",
    "Viewport",
    "ViewportController",
    "aggregate_lines",
    "axis_for",
    "inspect",
    "line_axis_for",
    "load_layout_config",
    "value_at",
    "x_axis_labels",
]
