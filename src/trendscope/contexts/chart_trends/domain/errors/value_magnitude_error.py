from __future__ import annotations

from .chart_trends_validation_error import ChartTrendsValidationError


class ValueMagnitudeError(ChartTrendsValidationError):
    """
    Raised when a finite input value is too large for overflow-free least squares.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards
    """

    def __init__(self, *, name: str, index: int, limit: float) -> None:
        super().__init__(
            f"{name} values must satisfy |x| <= {limit:g}, first violation at index {index}",
            details={"name": name, "index": index, "limit": limit},
        )
