from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from chartkit.errors import ChartDataError
from chartkit.series import ChartData, ChartType, Color, Line, LineKind


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


_DEFAULT_COLORS: tuple[Color, ...] = (
    (62, 149, 255, 255),
    (255, 170, 70, 255),
    (76, 201, 120, 255),
    (232, 84, 96, 255),
    (170, 120, 255, 255),
)


def coerce_values(value: Any, *, label: str) -> np.ndarray:
    """Convert a 1-D numeric input to an int64 array of whole numbers."""
    if pd is not None and isinstance(value, pd.Series):
        if value.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise ChartDataError(f"unsupported {label} input type: {type(value)!r}")


def chart_from_frame(
    frame: Any,
    *,
    x: str | None = None,
    kinds: Mapping[str, LineKind] | None = None,
    colors: Mapping[str, Color] | None = None,
    chart_type: ChartType = "regular",
) -> ChartData:
    """Build chart data from a DataFrame: numeric columns become lines.

    ``x`` names the label column; without it the frame index is used.
    """
    if pd is None:
        raise ChartDataError("pandas is required for chart_from_frame")
    if not isinstance(frame, pd.DataFrame):
        raise ChartDataError("`frame` must be a pandas DataFrame")
    if x is not None and x not in frame.columns:
        raise ChartDataError(f"column not found: {x}")

    kinds = kinds or {}
    colors = colors or {}
    labels = frame[x] if x is not None else frame.index
    data_cols = [c for c in frame.columns if c != x and _is_numeric_dtype(frame[c])]
    if not data_cols:
        raise ChartDataError("frame has no numeric columns")

    lines = []
    for i, col in enumerate(data_cols):
        name = str(col)
        lines.append(
            Line(
                values=coerce_values(frame[col], label=name),
                name=name,
                color=colors.get(name, _DEFAULT_COLORS[i % len(_DEFAULT_COLORS)]),
                kind=kinds.get(name, "bar" if chart_type in ("stacked", "percentage") else "line"),
            )
        )
    return ChartData(labels=tuple(str(v) for v in labels), lines=tuple(lines), type=chart_type)


def _is_numeric_dtype(series: Any) -> bool:
    if pd is None:
        return False
    try:
        return bool(pd.api.types.is_numeric_dtype(series)) and not pd.api.types.is_bool_dtype(series)
    except Exception:
        return False


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u"}:
        return arr.astype(np.int64, copy=False)
    if arr.dtype.kind == "f":
        if not np.all(np.isfinite(arr)) or not np.all(arr == np.floor(arr)):
            raise ChartDataError(f"{label} must contain whole numbers")
        return arr.astype(np.int64)

    out = np.empty(arr.shape[0], dtype=np.int64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None or isinstance(raw, (bool, str)):
            raise ChartDataError(f"{label} contains non-numeric value at index {i}: {raw!r}")
        if isinstance(raw, Decimal):
            raw = float(raw)
        if isinstance(raw, float) and (not np.isfinite(raw) or raw != int(raw)):
            raise ChartDataError(f"{label} must contain whole numbers (index {i}: {raw!r})")
        try:
            out[i] = int(raw)
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
