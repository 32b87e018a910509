from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when chart input or the chart model itself is malformed."""
