from __future__ import annotations

from dataclasses import dataclass

from .linear_fit import LinearFit
from .trend_category import TrendCategory


@dataclass(frozen=True, slots=True)
class TrendSegment:
    """
    One classified trend segment covering inclusive indices `[start_index, end_index]`.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: .linear_fit, .trend_category, ...application.services.trend_segmentation
    """

    start_index: int
    end_index: int
    category: TrendCategory
    fit: LinearFit

    def __post_init__(self) -> None:
        """
        Validate segment bounds.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Neighbouring segments share their boundary index.
        Raises:
            ValueError: If start is negative or the segment is zero/negative length.
        Side Effects:
            None.
        """
        if self.start_index < 0:
            raise ValueError(f"TrendSegment.start_index must be >= 0, got {self.start_index}")
        if self.end_index <= self.start_index:
            raise ValueError(
                "TrendSegment requires start_index < end_index, "
                f"got [{self.start_index}, {self.end_index}]"
            )

    @property
    def span(self) -> int:
        """Return index distance between segment bounds."""
        return self.end_index - self.start_index

    def as_tuple(self) -> tuple[int, int, float, float]:
        """
        Return compact `(start, end, slope, intercept)` representation.

        Args:
            None.
        Returns:
            tuple[int, int, float, float]: Segment bounds and fitted coefficients.
        Assumptions:
            Intercept is relative to `start_index`.
        Raises:
            None.
        Side Effects:
            None.
        """
        return (self.start_index, self.end_index, self.fit.slope, self.fit.intercept)
