from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FitQuality:
    """
    Goodness-of-fit diagnostics for one OLS line: adjusted R², RMSE and Durbin-Watson.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: .linear_fit, ...application.services.linear_trend_fitter
    """

    adjusted_r_squared: float
    rmse: float
    durbin_watson: float

    def __post_init__(self) -> None:
        """
        Validate diagnostic ranges.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Durbin-Watson lies in `[0, 4]`; 2.0 means no residual autocorrelation.
        Raises:
            ValueError: If RMSE is negative or Durbin-Watson is outside `[0, 4]`.
        Side Effects:
            None.
        """
        if self.rmse < 0.0:
            raise ValueError(f"FitQuality.rmse must be >= 0, got {self.rmse}")
        if not 0.0 <= self.durbin_watson <= 4.0 + 1e-9:
            raise ValueError(
                f"FitQuality.durbin_watson must be in [0, 4], got {self.durbin_watson}"
            )
