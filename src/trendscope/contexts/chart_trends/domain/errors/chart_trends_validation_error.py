from __future__ import annotations

from collections import OrderedDict
from typing import Any, Mapping


class ChartTrendsValidationError(ValueError):
    """
    Base error for input and configuration violations detected before any scan starts.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.input_guards, ..specifications.breakdown_config
    """

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        """
        Store deterministic details payload next to the human-readable message.

        Args:
            message: Error message.
            details: Optional ordered diagnostics payload.
        Returns:
            None.
        Assumptions:
            Subclasses pass details in a stable key order.
        Raises:
            None.
        Side Effects:
            None.
        """
        self._details: Mapping[str, Any] = OrderedDict(details or {})
        super().__init__(message)

    @property
    def details(self) -> Mapping[str, Any]:
        """
        Return stable ordered details payload for diagnostics.

        Args:
            None.
        Returns:
            Mapping[str, Any]: Deterministic details mapping.
        Assumptions:
            Mapping keys order is preserved for predictable error rendering.
        Raises:
            None.
        Side Effects:
            None.
        """
        return self._details
