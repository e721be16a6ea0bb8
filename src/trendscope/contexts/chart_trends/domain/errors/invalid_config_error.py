from __future__ import annotations

from typing import Any

from .chart_trends_validation_error import ChartTrendsValidationError


class InvalidConfigError(ChartTrendsValidationError):
    """
    Raised when a tuning parameter lies outside its valid domain.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..specifications.breakdown_config, ..specifications.classification_thresholds
    """

    def __init__(self, *, field: str, value: Any, reason: str) -> None:
        """
        Build deterministic invalid-config payload and message.

        Args:
            field: Name of the offending config field.
            value: Rejected value.
            reason: Human-readable constraint description.
        Returns:
            None.
        Assumptions:
            `value` is a scalar that renders deterministically with `repr`.
        Raises:
            None.
        Side Effects:
            None.
        """
        super().__init__(
            f"invalid {field}={value!r}: {reason}",
            details={"field": field, "value": value, "reason": reason},
        )
