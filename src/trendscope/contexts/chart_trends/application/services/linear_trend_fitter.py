"""
Least-squares trend fitting, goodness-of-fit diagnostics and residual outlier counts.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.domain.services.trend_classifier,
  trendscope.contexts.chart_trends.application.services.trend_segmentation
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from trendscope.contexts.chart_trends.application.ports import TrendKernels
from trendscope.contexts.chart_trends.domain.entities import (
    FitQuality,
    LinearFit,
    TrendCategory,
)
from trendscope.contexts.chart_trends.domain.errors import (
    ChartTrendsValidationError,
    EmptyInputError,
)
from trendscope.contexts.chart_trends.domain.services import (
    classify_fit,
    ensure_index_range,
    ensure_same_length,
    prepare_price_series,
)
from trendscope.contexts.chart_trends.domain.specifications import (
    DEFAULT_CLASSIFICATION_THRESHOLDS,
    ClassificationThresholds,
)

_OUTLIER_RANGE_EPSILON = 1e-9
_MAD_TO_SIGMA = 1.4826
_DW_SSR_EPSILON = 1e-10
_NEUTRAL_DURBIN_WATSON = 2.0


class LinearTrendFitter:
    """
    Fit OLS lines over index ranges or explicit points and classify them.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.contexts.chart_trends.application.ports.trend_kernels,
      trendscope.contexts.chart_trends.domain.entities.linear_fit
    """

    def __init__(
        self,
        *,
        kernels: TrendKernels,
        thresholds: ClassificationThresholds = DEFAULT_CLASSIFICATION_THRESHOLDS,
    ) -> None:
        self._kernels = kernels
        self._thresholds = thresholds

    @property
    def thresholds(self) -> ClassificationThresholds:
        return self._thresholds

    def fit(
        self,
        values: Sequence[float] | np.ndarray,
        start: int,
        end: int,
    ) -> LinearFit:
        """
        Fit one OLS line over inclusive range `[start, end]` of `values`.

        Args:
            values: Ordered price series.
            start: First index of the fitted range.
            end: Last index of the fitted range, inclusive.
        Returns:
            LinearFit: Coefficients over local x `0..m-1`, R² and normalized slope.
        Assumptions:
            Flat ranges, including `start == end`, fit exactly with R² of 1.
        Raises:
            EmptyInputError: If values are empty.
            NonFiniteInputError: If values contain NaN or inf.
            InvalidRangeError: If range is out of bounds or reversed.
        Side Effects:
            None.
        """
        series = prepare_price_series(values, name="values")
        start_index, end_index = ensure_index_range(start, end, length=series.shape[0])
        return self.fit_series_range(series, start_index, end_index)

    def fit_series_range(self, series: np.ndarray, start: int, end: int) -> LinearFit:
        """
        Fit OLS line over a range of an already validated series.

        Args:
            series: Float64 series returned by `prepare_price_series`.
            start: Validated first index.
            end: Validated last index, inclusive.
        Returns:
            LinearFit: Range fit.
        Assumptions:
            Guards already ran; this method performs no validation.
        Raises:
            None.
        Side Effects:
            None.
        """
        points = end - start + 1
        window = series[start : end + 1]
        value_range = float(window.max() - window.min())
        if value_range == 0.0:
            return _flat_fit(value=float(series[start]), points=points)

        slope, intercept, ssr, sst = self._kernels.ols_range(series, start, end)
        return LinearFit(
            slope=slope,
            intercept=intercept,
            r_squared=_r_squared(ssr=ssr, sst=sst),
            normalized_slope=slope * (points - 1) / value_range,
            points=points,
        )

    def fit_points(
        self,
        values: Sequence[float] | np.ndarray,
        indices: Sequence[int] | np.ndarray,
    ) -> LinearFit:
        """
        Fit OLS line over explicit `(index, value)` points such as peaks or valleys.

        Args:
            values: Point values.
            indices: Point x coordinates (series indices), same length as `values`.
        Returns:
            LinearFit: Fit with intercept at absolute index 0.
        Assumptions:
            Normalized slope uses the x span between the first and last point.
        Raises:
            MismatchedLengthError: If `values` and `indices` differ in length.
            EmptyInputError: If no points are given.
            NonFiniteInputError: If any value is NaN or inf.
            ValueMagnitudeError: If a value or index is beyond `MAX_VALUE_MAGNITUDE`.
            ChartTrendsValidationError: If indices are not one-dimensional.
        Side Effects:
            None.
        """
        xs = np.ascontiguousarray(np.asarray(indices, dtype=np.float64))
        if xs.ndim != 1:
            raise ChartTrendsValidationError(
                "indices must be one-dimensional",
                details={"ndim": xs.ndim},
            )
        ensure_same_length(values=len(values), indices=xs.shape[0])
        if xs.shape[0] == 0:
            raise EmptyInputError(name="values")
        xs = prepare_price_series(xs, name="indices")
        ys = prepare_price_series(values, name="values")

        points = ys.shape[0]
        value_range = float(ys.max() - ys.min())
        if value_range == 0.0:
            return _flat_fit(value=float(ys[0]), points=points)

        slope, intercept, ssr, sst = self._kernels.ols_points(xs, ys)
        x_span = float(xs.max() - xs.min())
        return LinearFit(
            slope=slope,
            intercept=intercept,
            r_squared=_r_squared(ssr=ssr, sst=sst),
            normalized_slope=slope * x_span / value_range,
            points=points,
        )

    def goodness_of_fit(
        self,
        values: Sequence[float] | np.ndarray,
        start: int,
        end: int,
    ) -> FitQuality:
        """
        Compute adjusted R², RMSE and Durbin-Watson of the range fit.

        Args:
            values: Ordered price series.
            start: First index of the fitted range.
            end: Last index of the fitted range, inclusive.
        Returns:
            FitQuality: Diagnostics of the OLS line over `[start, end]`.
        Assumptions:
            Adjusted R² equals R² for ranges of at most two points; Durbin-Watson
            is 2.0 when residuals vanish.
        Raises:
            EmptyInputError: If values are empty.
            NonFiniteInputError: If values contain NaN or inf.
            InvalidRangeError: If range is out of bounds or reversed.
        Side Effects:
            None.
        """
        series = prepare_price_series(values, name="values")
        start_index, end_index = ensure_index_range(start, end, length=series.shape[0])
        return self.goodness_of_fit_series_range(series, start_index, end_index)

    def goodness_of_fit_series_range(
        self,
        series: np.ndarray,
        start: int,
        end: int,
        line: LinearFit | None = None,
    ) -> FitQuality:
        """
        Compute fit diagnostics over a range of an already validated series.

        Args:
            series: Float64 series returned by `prepare_price_series`.
            start: Validated first index.
            end: Validated last index, inclusive.
            line: Fit of the same range when the caller already has it.
        Returns:
            FitQuality: Adjusted R², RMSE and Durbin-Watson.
        Assumptions:
            Guards already ran; this method performs no validation.
        Raises:
            None.
        Side Effects:
            None.
        """
        if line is None:
            line = self.fit_series_range(series, start, end)
        ssr, dw_numerator = self._kernels.residual_diagnostics(
            series,
            start,
            end,
            line.slope,
            line.intercept,
        )

        points = line.points
        r_squared = line.r_squared
        if points > 2:
            adjusted = 1.0 - ((1.0 - r_squared) * (points - 1) / (points - 2))
        else:
            adjusted = r_squared
        if ssr > _DW_SSR_EPSILON:
            durbin_watson = dw_numerator / ssr
        else:
            durbin_watson = _NEUTRAL_DURBIN_WATSON
        return FitQuality(
            adjusted_r_squared=adjusted,
            rmse=math.sqrt(max(ssr, 0.0) / points),
            durbin_watson=durbin_watson,
        )

    def classify(self, fit: LinearFit) -> TrendCategory:
        """Classify fitted line against configured thresholds."""
        return classify_fit(fit, thresholds=self._thresholds)

    def count_outliers(
        self,
        series: np.ndarray,
        start: int,
        end: int,
        fit: LinearFit,
        tolerance: float,
    ) -> int:
        """
        Count points of a fitted range lying off-trend.

        Args:
            series: Validated float64 series.
            start: First index of the fitted range.
            end: Last index of the fitted range, inclusive.
            fit: Range fit returned by `fit_series_range` for the same range.
            tolerance: Residual threshold as multiple of the robust residual scale.
        Returns:
            int: Points with `|residual| > max(tolerance * scale, 1e-9 * value_range)`
            where `scale = 1.4826 * median(|residual|)`.
        Assumptions:
            A lone spike does not move the median, so short ranges still flag it.
            The range floor keeps rounding noise of exact fits from counting.
        Raises:
            None.
        Side Effects:
            None.
        """
        median_abs = self._kernels.median_abs_residual(
            series,
            start,
            end,
            fit.slope,
            fit.intercept,
        )
        window = series[start : end + 1]
        value_range = float(window.max() - window.min())
        threshold = max(
            tolerance * _MAD_TO_SIGMA * median_abs,
            _OUTLIER_RANGE_EPSILON * value_range,
        )
        return self._kernels.count_residual_outliers(
            series,
            start,
            end,
            fit.slope,
            fit.intercept,
            threshold,
        )


def _flat_fit(*, value: float, points: int) -> LinearFit:
    """Return exact horizontal fit for a constant range."""
    return LinearFit(
        slope=0.0,
        intercept=value,
        r_squared=1.0,
        normalized_slope=0.0,
        points=points,
    )


def _r_squared(*, ssr: float, sst: float) -> float:
    """Return `1 - ssr/sst` clamped to `[0, 1]`."""
    if sst <= 0.0:
        return 1.0
    return min(1.0, max(0.0, 1.0 - (ssr / sst)))
