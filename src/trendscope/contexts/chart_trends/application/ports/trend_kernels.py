from __future__ import annotations

from typing import Protocol

import numpy as np

EXTREMUM_MODE_PEAK = 0
EXTREMUM_MODE_VALLEY = 1


class TrendKernels(Protocol):
    """
    Port for numeric inner loops used by the chart-trends services.

    Docs:
      - docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related:
      - src/trendscope/contexts/chart_trends/adapters/outbound/compute_numba/numba_trend_kernels.py
      - src/trendscope/contexts/chart_trends/adapters/outbound/compute_numpy/numpy_trend_kernels.py
      - src/trendscope/contexts/chart_trends/application/services/linear_trend_fitter.py

    All methods receive float64 C-contiguous vectors already validated by input guards
    and inclusive `[start, end]` ranges already checked against series bounds.
    """

    def extremum_mask(self, values: np.ndarray, period: int, mode: int) -> np.ndarray:
        """
        Flag indices whose value is the max (`mode=0`) or min (`mode=1`) of their window.

        Args:
            values: Float64 price vector.
            period: Half-width of the centred look-around window.
            mode: `EXTREMUM_MODE_PEAK` or `EXTREMUM_MODE_VALLEY`.
        Returns:
            np.ndarray: Boolean mask with the same length as `values`.
        Assumptions:
            Windows `[i-period, i+period]` are clipped to series bounds; ties qualify.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def ols_range(
        self,
        values: np.ndarray,
        start: int,
        end: int,
    ) -> tuple[float, float, float, float]:
        """
        Fit OLS line over `values[start:end+1]` with local x `0..m-1`.

        Args:
            values: Float64 price vector.
            start: First index.
            end: Last index, inclusive.
        Returns:
            tuple[float, float, float, float]: `(slope, intercept, ssr, sst)`.
        Assumptions:
            Single-point ranges return slope `0.0` and intercept equal to the value.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def ols_points(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
    ) -> tuple[float, float, float, float]:
        """
        Fit OLS line over explicit `(x, y)` points.

        Args:
            xs: Float64 x coordinates.
            ys: Float64 y coordinates, same length as `xs`.
        Returns:
            tuple[float, float, float, float]: `(slope, intercept, ssr, sst)`.
        Assumptions:
            Zero x-variance yields slope `0.0` and intercept equal to mean `y`.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def residual_diagnostics(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
    ) -> tuple[float, float]:
        """
        Return residual sum of squares and Durbin-Watson numerator for one fitted range.

        Args:
            values: Float64 price vector.
            start: First index.
            end: Last index, inclusive.
            slope: Fitted slope over local x.
            intercept: Fitted intercept at local x=0.
        Returns:
            tuple[float, float]: `(ssr, sum((e_t - e_{t-1})^2))`.
        Assumptions:
            None.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def count_residual_outliers(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
        threshold: float,
    ) -> int:
        """
        Count points whose absolute residual strictly exceeds `threshold`.

        Args:
            values: Float64 price vector.
            start: First index.
            end: Last index, inclusive.
            slope: Fitted slope over local x.
            intercept: Fitted intercept at local x=0.
            threshold: Absolute residual threshold.
        Returns:
            int: Number of outlier points.
        Assumptions:
            None.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

    def median_abs_residual(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
    ) -> float:
        """
        Return the median absolute residual of one fitted range.

        Args:
            values: Float64 price vector.
            start: First index.
            end: Last index, inclusive.
            slope: Fitted slope over local x.
            intercept: Fitted intercept at local x=0.
        Returns:
            float: Robust residual scale used to set the outlier threshold.
        Assumptions:
            Even-length ranges average the two middle magnitudes.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...
