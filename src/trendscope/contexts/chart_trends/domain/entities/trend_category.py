from __future__ import annotations

from enum import Enum


class TrendCategory(str, Enum):
    """
    Closed set of trend classifications derived from a fitted line.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.trend_classifier, ..specifications.classification_thresholds
    """

    STRONG_UP = "strong_up"
    UP = "up"
    SIDEWAYS = "sideways"
    DOWN = "down"
    STRONG_DOWN = "strong_down"

    @property
    def direction(self) -> int:
        """
        Return signed direction: `+1` for up categories, `-1` for down, `0` for sideways.

        Args:
            None.
        Returns:
            int: Direction sign.
        Assumptions:
            None.
        Raises:
            None.
        Side Effects:
            None.
        """
        if self in (TrendCategory.STRONG_UP, TrendCategory.UP):
            return 1
        if self in (TrendCategory.STRONG_DOWN, TrendCategory.DOWN):
            return -1
        return 0
