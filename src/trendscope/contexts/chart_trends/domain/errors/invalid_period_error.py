from __future__ import annotations

from .chart_trends_validation_error import ChartTrendsValidationError


class InvalidPeriodError(ChartTrendsValidationError):
    """
    Raised when a look-around period is zero or does not fit inside the series.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards, ...application.services.extremum_detector
    """

    def __init__(self, *, period: int, length: int, reason: str) -> None:
        """
        Build deterministic invalid-period payload and message.

        Args:
            period: Rejected period value.
            length: Length of the series the period was checked against.
            reason: Short reason token for the rejection.
        Returns:
            None.
        Assumptions:
            None.
        Raises:
            None.
        Side Effects:
            None.
        """
        super().__init__(
            f"invalid period {period}: {reason} (series length: {length})",
            details={"period": period, "length": length, "reason": reason},
        )
