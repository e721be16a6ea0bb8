from __future__ import annotations

from .chart_trends_validation_error import ChartTrendsValidationError


class InvalidRangeError(ChartTrendsValidationError):
    """
    Raised when an inclusive `[start, end]` index range does not fit the series.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards, ...application.services.linear_trend_fitter
    """

    def __init__(self, *, start: int, end: int, length: int) -> None:
        super().__init__(
            f"invalid index range [{start}, {end}] for series length {length}",
            details={"start": start, "end": end, "length": length},
        )
