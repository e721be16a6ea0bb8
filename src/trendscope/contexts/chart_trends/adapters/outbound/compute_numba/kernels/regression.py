"""
Numba kernels for ordinary least squares over index ranges and residual statistics.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numpy.numpy_trend_kernels,
  trendscope.contexts.chart_trends.application.services.linear_trend_fitter
"""

from __future__ import annotations

import numba as nb
import numpy as np


@nb.njit(cache=True)
def ols_range_f64(values: np.ndarray, start: int, end: int) -> tuple[float, float, float, float]:
    """
    Fit OLS line over `values[start:end+1]` for local `x=0..m-1`.

    Args:
        values: Float64 finite price series.
        start: First index.
        end: Last index, inclusive.
    Returns:
        tuple[float, float, float, float]: `(slope, intercept, ssr, sst)`.
    Assumptions:
        Centered two-pass sums are used to keep precision on large price levels.
    Raises:
        None.
    Side Effects:
        None.
    """
    size = end - start + 1
    mean_x = (float(size) - 1.0) * 0.5

    sum_y = 0.0
    for offset in range(size):
        sum_y += values[start + offset]
    mean_y = sum_y / float(size)

    sxy = 0.0
    sxx = 0.0
    syy = 0.0
    for offset in range(size):
        dx = float(offset) - mean_x
        dy = values[start + offset] - mean_y
        sxy += dx * dy
        sxx += dx * dx
        syy += dy * dy

    slope = 0.0
    if sxx > 0.0:
        slope = sxy / sxx
    intercept = mean_y - (slope * mean_x)

    ssr = 0.0
    for offset in range(size):
        residual = values[start + offset] - (intercept + (slope * float(offset)))
        ssr += residual * residual

    return slope, intercept, ssr, syy


@nb.njit(cache=True)
def ols_points_f64(xs: np.ndarray, ys: np.ndarray) -> tuple[float, float, float, float]:
    """
    Fit OLS line over explicit `(x, y)` points.

    Args:
        xs: Float64 x coordinates.
        ys: Float64 y coordinates.
    Returns:
        tuple[float, float, float, float]: `(slope, intercept, ssr, sst)`.
    Assumptions:
        `xs` and `ys` have equal non-zero length.
    Raises:
        None.
    Side Effects:
        None.
    """
    size = xs.shape[0]
    sum_x = 0.0
    sum_y = 0.0
    for idx in range(size):
        sum_x += xs[idx]
        sum_y += ys[idx]
    mean_x = sum_x / float(size)
    mean_y = sum_y / float(size)

    sxy = 0.0
    sxx = 0.0
    syy = 0.0
    for idx in range(size):
        dx = xs[idx] - mean_x
        dy = ys[idx] - mean_y
        sxy += dx * dy
        sxx += dx * dx
        syy += dy * dy

    slope = 0.0
    if sxx > 0.0:
        slope = sxy / sxx
    intercept = mean_y - (slope * mean_x)

    ssr = 0.0
    for idx in range(size):
        residual = ys[idx] - (intercept + (slope * xs[idx]))
        ssr += residual * residual

    return slope, intercept, ssr, syy


@nb.njit(cache=True)
def residual_diagnostics_f64(
    values: np.ndarray,
    start: int,
    end: int,
    slope: float,
    intercept: float,
) -> tuple[float, float]:
    """
    Compute residual sum of squares and Durbin-Watson numerator.

    Args:
        values: Float64 finite price series.
        start: First index.
        end: Last index, inclusive.
        slope: Slope over local x.
        intercept: Intercept at local x=0.
    Returns:
        tuple[float, float]: `(ssr, dw_numerator)`.
    Assumptions:
        None.
    Raises:
        None.
    Side Effects:
        None.
    """
    ssr = 0.0
    dw_numerator = 0.0
    previous = 0.0
    for offset in range(end - start + 1):
        residual = values[start + offset] - (intercept + (slope * float(offset)))
        ssr += residual * residual
        if offset > 0:
            diff = residual - previous
            dw_numerator += diff * diff
        previous = residual
    return ssr, dw_numerator


@nb.njit(cache=True)
def count_residual_outliers_f64(
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
        values: Float64 finite price series.
        start: First index.
        end: Last index, inclusive.
        slope: Slope over local x.
        intercept: Intercept at local x=0.
        threshold: Absolute residual threshold.
    Returns:
        int: Outlier count.
    Assumptions:
        None.
    Raises:
        None.
    Side Effects:
        None.
    """
    count = 0
    for offset in range(end - start + 1):
        residual = values[start + offset] - (intercept + (slope * float(offset)))
        if abs(residual) > threshold:
            count += 1
    return count


@nb.njit(cache=True)
def median_abs_residual_f64(
    values: np.ndarray,
    start: int,
    end: int,
    slope: float,
    intercept: float,
) -> float:
    """
    Median of absolute residuals over an inclusive range.

    Args:
        values: Float64 finite price series.
        start: First index.
        end: Last index, inclusive.
        slope: Slope over local x.
        intercept: Intercept at local x=0.
    Returns:
        float: Median `|residual|`; a single spike cannot move it past the bulk.
    Assumptions:
        Range holds at least one point.
    Raises:
        None.
    Side Effects:
        Allocates one scratch vector of range length.
    """
    size = end - start + 1
    magnitudes = np.empty(size, dtype=np.float64)
    for offset in range(size):
        magnitudes[offset] = abs(values[start + offset] - (intercept + (slope * float(offset))))
    return np.median(magnitudes)
