from chartkit.adapters.columns import chart_from_dict, charts_from_json, load_charts, parse_hex_color
from chartkit.adapters.normalize import chart_from_frame, coerce_values

__all__ = [
    "chart_from_dict",
    "chart_from_frame",
    "charts_from_json",
    "coerce_values",
    "load_charts",
    "parse_hex_color",
]
