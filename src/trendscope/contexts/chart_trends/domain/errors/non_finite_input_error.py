from __future__ import annotations

from .chart_trends_validation_error import ChartTrendsValidationError


class NonFiniteInputError(ChartTrendsValidationError):
    """
    Raised when a price series contains NaN or infinite values.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards
    """

    def __init__(self, *, name: str, index: int) -> None:
        super().__init__(
            f"{name} must contain only finite values, first non-finite at index {index}",
            details={"name": name, "index": index},
        )
