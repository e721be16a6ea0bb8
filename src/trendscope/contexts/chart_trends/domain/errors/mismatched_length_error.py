from __future__ import annotations

from typing import Mapping

from .chart_trends_validation_error import ChartTrendsValidationError


class MismatchedLengthError(ChartTrendsValidationError):
    """
    Raised when index-aligned inputs do not share one length.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards, ...application.services.linear_trend_fitter
    """

    def __init__(self, *, lengths: Mapping[str, int]) -> None:
        rendered = ", ".join(f"{name}={length}" for name, length in lengths.items())
        super().__init__(f"mismatched lengths: {rendered}", details=dict(lengths))
