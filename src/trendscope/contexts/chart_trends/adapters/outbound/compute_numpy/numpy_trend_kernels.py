"""
Numpy oracle implementation of the chart-trends `TrendKernels` port.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numba.kernels,
  trendscope.contexts.chart_trends.application.ports.trend_kernels
"""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from trendscope.contexts.chart_trends.application.ports import EXTREMUM_MODE_PEAK


class NumpyTrendKernels:
    """
    Vectorised reference backend used to validate the Numba kernels.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numba
    """

    def extremum_mask(self, values: np.ndarray, period: int, mode: int) -> np.ndarray:
        """
        Build candidate mask from padded sliding-window max/min.

        Args:
            values: Float64 price vector.
            period: Half-width of the centred window.
            mode: `0=peak`, `1=valley`.
        Returns:
            np.ndarray: Boolean candidate mask.
        Assumptions:
            Padding with `-inf`/`+inf` reproduces the clipped-window semantics.
        Raises:
            None.
        Side Effects:
            Allocates padded copy and `(T, 2*period+1)` window view.
        """
        if mode == EXTREMUM_MODE_PEAK:
            padded = np.pad(values, period, mode="constant", constant_values=-np.inf)
            window_extreme = sliding_window_view(padded, 2 * period + 1).max(axis=1)
            return np.asarray(values >= window_extreme, dtype=np.bool_)

        padded = np.pad(values, period, mode="constant", constant_values=np.inf)
        window_extreme = sliding_window_view(padded, 2 * period + 1).min(axis=1)
        return np.asarray(values <= window_extreme, dtype=np.bool_)

    def ols_range(
        self,
        values: np.ndarray,
        start: int,
        end: int,
    ) -> tuple[float, float, float, float]:
        window = values[start : end + 1]
        xs = np.arange(window.shape[0], dtype=np.float64)
        return _ols(xs=xs, ys=window)

    def ols_points(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
    ) -> tuple[float, float, float, float]:
        return _ols(xs=np.asarray(xs, dtype=np.float64), ys=np.asarray(ys, dtype=np.float64))

    def residual_diagnostics(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
    ) -> tuple[float, float]:
        residuals = _residuals(
            values=values,
            start=start,
            end=end,
            slope=slope,
            intercept=intercept,
        )
        ssr = float(np.sum(residuals * residuals))
        dw_numerator = float(np.sum(np.diff(residuals) ** 2))
        return ssr, dw_numerator

    def count_residual_outliers(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
        threshold: float,
    ) -> int:
        residuals = _residuals(
            values=values,
            start=start,
            end=end,
            slope=slope,
            intercept=intercept,
        )
        return int(np.count_nonzero(np.abs(residuals) > threshold))

    def median_abs_residual(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
    ) -> float:
        residuals = _residuals(
            values=values,
            start=start,
            end=end,
            slope=slope,
            intercept=intercept,
        )
        return float(np.median(np.abs(residuals)))


def _ols(*, xs: np.ndarray, ys: np.ndarray) -> tuple[float, float, float, float]:
    """
    Fit OLS line with centered sums.

    Args:
        xs: Float64 x coordinates.
        ys: Float64 y coordinates.
    Returns:
        tuple[float, float, float, float]: `(slope, intercept, ssr, sst)`.
    Assumptions:
        Zero x-variance yields slope `0.0`.
    Raises:
        None.
    Side Effects:
        Allocates centered copies of inputs.
    """
    mean_x = float(np.mean(xs))
    mean_y = float(np.mean(ys))
    dx = xs - mean_x
    dy = ys - mean_y
    sxx = float(np.dot(dx, dx))
    sxy = float(np.dot(dx, dy))
    sst = float(np.dot(dy, dy))

    slope = sxy / sxx if sxx > 0.0 else 0.0
    intercept = mean_y - (slope * mean_x)
    residuals = ys - (intercept + (slope * xs))
    ssr = float(np.dot(residuals, residuals))
    return slope, intercept, ssr, sst


def _residuals(
    *,
    values: np.ndarray,
    start: int,
    end: int,
    slope: float,
    intercept: float,
) -> np.ndarray:
    """Return residuals of `values[start:end+1]` against the line over local x."""
    window = values[start : end + 1]
    xs = np.arange(window.shape[0], dtype=np.float64)
    return window - (intercept + (slope * xs))
