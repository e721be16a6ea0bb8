from __future__ import annotations

from .chart_trends_validation_error import ChartTrendsValidationError


class EmptyInputError(ChartTrendsValidationError):
    """
    Raised when a required price series has no elements.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards
    """

    def __init__(self, *, name: str) -> None:
        super().__init__(f"{name} cannot be empty", details={"name": name})
