"""
Greedy breakdown of one price series into contiguous classified trend segments.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.application.services.extremum_detector,
  trendscope.contexts.chart_trends.application.services.linear_trend_fitter
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Sequence

import numpy as np

from trendscope.contexts.chart_trends.domain.entities import TrendCategory, TrendSegment
from trendscope.contexts.chart_trends.domain.services import prepare_price_series
from trendscope.contexts.chart_trends.domain.specifications import BreakdownConfig

from .extremum_detector import ExtremumDetector
from .linear_trend_fitter import LinearTrendFitter

log = logging.getLogger(__name__)


class TrendSegmentationEngine:
    """
    Split a price series at turning points into segments that each fit one line.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.contexts.chart_trends.domain.specifications.breakdown_config,
      trendscope.contexts.chart_trends.domain.entities.trend_segment

    Segments share boundary indices: `segments[i].end_index == segments[i+1].start_index`.
    """

    def __init__(self, *, detector: ExtremumDetector, fitter: LinearTrendFitter) -> None:
        self._detector = detector
        self._fitter = fitter

    def break_down_trends(
        self,
        prices: Sequence[float] | np.ndarray,
        config: BreakdownConfig,
    ) -> tuple[TrendSegment, ...]:
        """
        Segment prices into ordered trend segments covering `[0, len(prices)-1]`.

        Args:
            prices: Ordered price series.
            config: Segmentation sensitivity settings.
        Returns:
            tuple[TrendSegment, ...]: Contiguous segments ordered by start index.
        Assumptions:
            Candidate breakpoints are interior turning points followed by the last index.
            A tentative segment is accepted when `r_squared >= quality_floor` and its
            outlier count is `<= max_outliers`.
        Raises:
            EmptyInputError: If prices are empty.
            NonFiniteInputError: If prices contain NaN or inf.
            ValueMagnitudeError: If any price magnitude exceeds 1e100.
            InvalidConfigError: If config does not fit series length.
        Side Effects:
            Emits one debug log record per closed segment.
        """
        series = prepare_price_series(prices)
        length = int(series.shape[0])
        config.validate_for_length(length)

        last = length - 1
        turning_points = self._detector.find_turning_points_in_series(
            series,
            period=config.extremum_period,
            closeness_threshold=config.extremum_closeness,
        )
        candidates = [point.index for point in turning_points if 0 < point.index < last]
        candidates.append(last)

        segments: list[TrendSegment] = []
        start = 0
        while start < last:
            end = self._select_segment_end(
                series=series,
                start=start,
                candidates=candidates,
                config=config,
            )
            segment = self._close_segment(series=series, start=start, end=end, config=config)
            segments.append(segment)
            log.debug(
                "chart_trends segment closed",
                extra={
                    "start_index": segment.start_index,
                    "end_index": segment.end_index,
                    "category": segment.category.value,
                    "r_squared": segment.fit.r_squared,
                },
            )
            start = end
        return tuple(segments)

    def _select_segment_end(
        self,
        *,
        series: np.ndarray,
        start: int,
        candidates: list[int],
        config: BreakdownConfig,
    ) -> int:
        """
        Pick the end index of the segment opened at `start`.

        Args:
            series: Validated price series.
            start: Segment start index.
            candidates: Ascending breakpoint candidates ending with the last index.
            config: Segmentation settings.
        Returns:
            int: Chosen end index, with a short tail absorbed into the segment.
        Assumptions:
            Candidates at or before `start`, and those closer than `min_segment_length`
            to it, are never evaluated.
        Raises:
            None.
        Side Effects:
            None.
        """
        last = candidates[-1]
        min_length = config.min_segment_length
        best_end: int | None = None
        previous_rmse: float | None = None

        for position in range(bisect_right(candidates, start), len(candidates)):
            end = candidates[position]
            if end - start < min_length:
                continue
            rmse = self._accepted_rmse(
                series=series,
                start=start,
                end=end,
                config=config,
                previous_rmse=previous_rmse,
            )
            if end == last:
                if best_end is None or rmse is not None:
                    best_end = last
                break
            if rmse is not None:
                best_end = end
                # two-point fits are exact and give no baseline for growth
                previous_rmse = rmse if end - start > 1 else None
                continue
            if best_end is None:
                # forced minimum-length segment
                best_end = end
            break

        if best_end is None:
            best_end = last
        if last - best_end < min_length:
            best_end = last
        return best_end

    def _accepted_rmse(
        self,
        *,
        series: np.ndarray,
        start: int,
        end: int,
        config: BreakdownConfig,
        previous_rmse: float | None,
    ) -> float | None:
        """
        Run every enabled break test on `[start, end]`.

        Args:
            series: Validated price series.
            start: Segment start index.
            end: Tentative end index.
            config: Segmentation settings.
            previous_rmse: RMSE of the last accepted extension from `start`, if any.
        Returns:
            float | None: Range RMSE when accepted, `None` when any test breaks.
        Assumptions:
            R² floor and outlier budget always apply; adjusted R², RMSE growth
            and Durbin-Watson tests apply only when configured.
        Raises:
            None.
        Side Effects:
            None.
        """
        fit = self._fitter.fit_series_range(series, start, end)
        if not fit.r_squared >= config.quality_floor:
            return None
        outliers = self._fitter.count_outliers(
            series,
            start,
            end,
            fit,
            config.outlier_tolerance,
        )
        if outliers > config.max_outliers:
            return None

        quality = self._fitter.goodness_of_fit_series_range(series, start, end, fit)
        if (
            config.min_adjusted_r_squared is not None
            and quality.adjusted_r_squared < config.min_adjusted_r_squared
        ):
            return None
        if (
            config.max_rmse_growth is not None
            and previous_rmse is not None
            and quality.rmse > config.max_rmse_growth * previous_rmse
        ):
            return None
        if config.durbin_watson_band is not None:
            low, high = config.durbin_watson_band
            if not low <= quality.durbin_watson <= high:
                return None
        return quality.rmse

    def _close_segment(
        self,
        *,
        series: np.ndarray,
        start: int,
        end: int,
        config: BreakdownConfig,
    ) -> TrendSegment:
        fit = self._fitter.fit_series_range(series, start, end)
        if fit.r_squared < config.quality_floor:
            category = TrendCategory.SIDEWAYS
        else:
            category = self._fitter.classify(fit)
        return TrendSegment(start_index=start, end_index=end, category=category, fit=fit)
