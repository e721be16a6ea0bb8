"""
Numba-backed implementation of the chart-trends `TrendKernels` port.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.application.ports.trend_kernels,
  trendscope.contexts.chart_trends.adapters.outbound.compute_numba.kernels
"""

from __future__ import annotations

import numpy as np

from .kernels import (
    count_residual_outliers_f64,
    extremum_mask_f64,
    median_abs_residual_f64,
    ols_points_f64,
    ols_range_f64,
    residual_diagnostics_f64,
)


class NumbaTrendKernels:
    """
    Default compute backend dispatching to JIT-compiled kernels.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numpy,
      trendscope.contexts.chart_trends.adapters.outbound.compute_numba.warmup
    """

    def extremum_mask(self, values: np.ndarray, period: int, mode: int) -> np.ndarray:
        return extremum_mask_f64(values, int(period), int(mode))

    def ols_range(
        self,
        values: np.ndarray,
        start: int,
        end: int,
    ) -> tuple[float, float, float, float]:
        slope, intercept, ssr, sst = ols_range_f64(values, int(start), int(end))
        return float(slope), float(intercept), float(ssr), float(sst)

    def ols_points(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
    ) -> tuple[float, float, float, float]:
        slope, intercept, ssr, sst = ols_points_f64(xs, ys)
        return float(slope), float(intercept), float(ssr), float(sst)

    def residual_diagnostics(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
    ) -> tuple[float, float]:
        ssr, dw_numerator = residual_diagnostics_f64(
            values,
            int(start),
            int(end),
            float(slope),
            float(intercept),
        )
        return float(ssr), float(dw_numerator)

    def count_residual_outliers(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
        threshold: float,
    ) -> int:
        return int(
            count_residual_outliers_f64(
                values,
                int(start),
                int(end),
                float(slope),
                float(intercept),
                float(threshold),
            )
        )

    def median_abs_residual(
        self,
        values: np.ndarray,
        start: int,
        end: int,
        slope: float,
        intercept: float,
    ) -> float:
        return float(
            median_abs_residual_f64(
                values,
                int(start),
                int(end),
                float(slope),
                float(intercept),
            )
        )
