from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LinearFit:
    """
    Least-squares line over one index range plus fit quality.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ...application.services.linear_trend_fitter, ..services.trend_classifier
    """

    slope: float
    intercept: float
    r_squared: float
    normalized_slope: float
    points: int

    def __post_init__(self) -> None:
        """
        Validate fit scalar invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `intercept` is relative to x=0 at the first fitted point for range fits
            and to absolute index 0 for point fits.
        Raises:
            ValueError: If coefficients are not finite, `r_squared` lies outside `[0, 1]`,
                or `points` is not positive.
        Side Effects:
            None.
        """
        if not math.isfinite(self.slope) or not math.isfinite(self.intercept):
            raise ValueError(
                "LinearFit slope and intercept must be finite, "
                f"got slope={self.slope!r}, intercept={self.intercept!r}"
            )
        if not math.isnan(self.r_squared) and not 0.0 <= self.r_squared <= 1.0:
            raise ValueError(f"LinearFit.r_squared must be in [0, 1], got {self.r_squared!r}")
        if not math.isfinite(self.normalized_slope):
            raise ValueError(
                f"LinearFit.normalized_slope must be finite, got {self.normalized_slope!r}"
            )
        if self.points <= 0:
            raise ValueError(f"LinearFit.points must be > 0, got {self.points}")

    def value_at(self, offset: float) -> float:
        """Return fitted line value at x=`offset`."""
        return self.intercept + (self.slope * offset)
