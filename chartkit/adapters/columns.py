from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
import re
from typing import Any, Mapping

from chartkit.adapters.normalize import coerce_values
from chartkit.errors import ChartDataError
from chartkit.series import ChartData, ChartType, Color, Line

LOGGER = logging.getLogger(__name__)

COLUMN_TYPES: tuple[str, ...] = ("x", "line", "bar", "area")
_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
_KNOWN_KEYS = frozenset({"columns", "types", "colors", "names", "y_scaled", "stacked", "percentage"})
# Alpha of the synthetic fill line paired with every plain line column.
_AREA_ALPHA = 128


def parse_hex_color(text: str, alpha: int = 255) -> Color:
    match = _HEX_COLOR.match(text.strip()) if isinstance(text, str) else None
    if match is None:
        raise ChartDataError(f"invalid color: {text!r} (expected #RRGGBB)")
    r, g, b = (int(part, 16) for part in match.groups())
    return (r, g, b, alpha)


def format_timestamp(ms: int, date_format: str = "%b %d") -> str:
    stamp = dt.datetime.fromtimestamp(int(ms) // 1000, tz=dt.timezone.utc)
    return stamp.strftime(date_format)


def chart_type_from_flags(payload: Mapping[str, Any]) -> ChartType:
    chart_type: ChartType = "regular"
    # Later flags win when a payload sets more than one.
    if payload.get("y_scaled", False):
        chart_type = "y_scaled"
    if payload.get("stacked", False):
        chart_type = "stacked"
    if payload.get("percentage", False):
        chart_type = "percentage"
    return chart_type


def chart_from_dict(payload: Mapping[str, Any], *, date_format: str = "%b %d") -> ChartData:
    if not isinstance(payload, Mapping):
        raise ChartDataError("chart payload must be an object")
    for key in ("columns", "types", "colors", "names"):
        if key not in payload:
            raise ChartDataError(f"chart payload missing `{key}`")
    unknown = sorted(set(payload) - _KNOWN_KEYS)
    if unknown:
        LOGGER.warning("ignoring unknown chart keys: %s", ", ".join(unknown))

    types = _mapping(payload, "types")
    colors = _mapping(payload, "colors")
    names = _mapping(payload, "names")
    chart_type = chart_type_from_flags(payload)

    columns = payload["columns"]
    if not isinstance(columns, list) or not columns:
        raise ChartDataError("`columns` must be a non-empty list")

    labels: tuple[str, ...] | None = None
    lines: list[Line] = []
    for column in columns:
        if not isinstance(column, list) or not column or not isinstance(column[0], str):
            raise ChartDataError("each column must be a list starting with its key")
        key = column[0]
        values = coerce_values(column[1:], label=key)
        col_type = types.get(key)
        if col_type is None:
            raise ChartDataError(f"column `{key}` has no type")
        if col_type not in COLUMN_TYPES:
            raise ChartDataError(f"unsupported column type for `{key}`: {col_type}")
        if col_type == "x":
            labels = tuple(format_timestamp(v, date_format) for v in values.tolist())
            continue
        if key not in names:
            raise ChartDataError(f"column `{key}` has no name")
        if key not in colors:
            raise ChartDataError(f"column `{key}` has no color")
        color = parse_hex_color(colors[key])
        lines.append(Line(values=values, name=str(names[key]), color=color, kind=col_type))
        if col_type == "line" and chart_type == "regular":
            lines.append(
                Line(values=values, name=str(names[key]), color=color[:3] + (_AREA_ALPHA,), kind="area")
            )

    if labels is None:
        raise ChartDataError("chart payload has no `x` column")
    if not lines:
        raise ChartDataError("chart payload has no data columns")
    return ChartData(labels=labels, lines=tuple(lines), type=chart_type)


def charts_from_json(text: str, *, date_format: str = "%b %d") -> list[ChartData]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ChartDataError(f"invalid chart JSON: {exc}") from exc
    items = raw if isinstance(raw, list) else [raw]
    if not items:
        raise ChartDataError("chart JSON contains no charts")
    return [chart_from_dict(item, date_format=date_format) for item in items]


def load_charts(path: Path, *, date_format: str = "%b %d") -> list[ChartData]:
    charts = charts_from_json(Path(path).read_text(encoding="utf-8"), date_format=date_format)
    LOGGER.debug("loaded %d chart(s) from %s", len(charts), path)
    return charts


def _mapping(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload[key]
    if not isinstance(value, Mapping):
        raise ChartDataError(f"`{key}` must be an object")
    return value
