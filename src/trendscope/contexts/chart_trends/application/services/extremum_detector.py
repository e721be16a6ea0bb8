"""
Local peak/valley detection with same-kind closeness merging.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.application.ports.trend_kernels,
  trendscope.contexts.chart_trends.application.services.trend_segmentation
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from trendscope.contexts.chart_trends.application.ports import (
    EXTREMUM_MODE_PEAK,
    EXTREMUM_MODE_VALLEY,
    TrendKernels,
)
from trendscope.contexts.chart_trends.domain.entities import ExtremumKind, ExtremumPoint
from trendscope.contexts.chart_trends.domain.services import (
    ensure_closeness,
    ensure_period,
    prepare_price_series,
)

log = logging.getLogger(__name__)

_KIND_TO_MODE = {
    ExtremumKind.PEAK: EXTREMUM_MODE_PEAK,
    ExtremumKind.VALLEY: EXTREMUM_MODE_VALLEY,
}


class ExtremumDetector:
    """
    Find peaks, valleys and alternating turning points of one price series.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.contexts.chart_trends.domain.entities.extremum_point,
      trendscope.contexts.chart_trends.adapters.outbound.compute_numba.kernels.extrema
    """

    def __init__(self, *, kernels: TrendKernels) -> None:
        self._kernels = kernels

    def find_extrema(
        self,
        prices: Sequence[float] | np.ndarray,
        *,
        period: int,
        closeness_threshold: int,
        kind: ExtremumKind,
    ) -> tuple[ExtremumPoint, ...]:
        """
        Find local extrema of one kind and merge same-kind neighbours that are too close.

        Args:
            prices: Ordered price series.
            period: Half-width of the centred look-around window.
            closeness_threshold: Maximum index distance at which two same-kind
                extrema are merged.
            kind: Peak or valley.
        Returns:
            tuple[ExtremumPoint, ...]: Extrema ordered by strictly increasing index.
        Assumptions:
            Boundary indices are candidates on their clipped window.
        Raises:
            EmptyInputError: If prices are empty.
            NonFiniteInputError: If prices contain NaN or inf.
            InvalidPeriodError: If period is zero or `>= len(prices)`.
            InvalidConfigError: If closeness threshold is negative or not an integer.
        Side Effects:
            None.
        """
        series = prepare_price_series(prices)
        period_value = ensure_period(period, length=series.shape[0])
        closeness_value = ensure_closeness(closeness_threshold)
        return self.find_extrema_in_series(
            series,
            period=period_value,
            closeness_threshold=closeness_value,
            kind=kind,
        )

    def find_turning_points(
        self,
        prices: Sequence[float] | np.ndarray,
        *,
        period: int,
        closeness_threshold: int,
    ) -> tuple[ExtremumPoint, ...]:
        """
        Merge peaks and valleys into one alternating sequence of turning points.

        Args:
            prices: Ordered price series.
            period: Half-width of the centred look-around window.
            closeness_threshold: Same-kind merge distance.
        Returns:
            tuple[ExtremumPoint, ...]: Index-ordered points with alternating kinds.
        Assumptions:
            An index that is both peak and valley lies on a flat window and is dropped.
        Raises:
            EmptyInputError: If prices are empty.
            NonFiniteInputError: If prices contain NaN or inf.
            InvalidPeriodError: If period is zero or `>= len(prices)`.
            InvalidConfigError: If closeness threshold is invalid.
        Side Effects:
            None.
        """
        series = prepare_price_series(prices)
        period_value = ensure_period(period, length=series.shape[0])
        closeness_value = ensure_closeness(closeness_threshold)
        return self.find_turning_points_in_series(
            series,
            period=period_value,
            closeness_threshold=closeness_value,
        )

    def find_extrema_in_series(
        self,
        series: np.ndarray,
        *,
        period: int,
        closeness_threshold: int,
        kind: ExtremumKind,
    ) -> tuple[ExtremumPoint, ...]:
        """
        Run candidate scan and closeness merge on an already validated series.

        Args:
            series: Float64 series returned by `prepare_price_series`.
            period: Validated period.
            closeness_threshold: Validated merge distance.
            kind: Peak or valley.
        Returns:
            tuple[ExtremumPoint, ...]: Merged extrema.
        Assumptions:
            Guards already ran; this method performs no validation.
        Raises:
            None.
        Side Effects:
            Emits one debug log record.
        """
        mask = self._kernels.extremum_mask(series, period, _KIND_TO_MODE[kind])
        candidates = np.flatnonzero(mask)
        merged = _merge_close_candidates(
            series=series,
            candidates=candidates,
            closeness_threshold=closeness_threshold,
            kind=kind,
        )
        log.debug(
            "chart_trends extrema detected",
            extra={
                "kind": kind.value,
                "period": period,
                "closeness_threshold": closeness_threshold,
                "candidates": int(candidates.shape[0]),
                "extrema": len(merged),
            },
        )
        return merged

    def find_turning_points_in_series(
        self,
        series: np.ndarray,
        *,
        period: int,
        closeness_threshold: int,
    ) -> tuple[ExtremumPoint, ...]:
        """Merge validated-series peaks and valleys into alternating turning points."""
        peaks = self.find_extrema_in_series(
            series,
            period=period,
            closeness_threshold=closeness_threshold,
            kind=ExtremumKind.PEAK,
        )
        valleys = self.find_extrema_in_series(
            series,
            period=period,
            closeness_threshold=closeness_threshold,
            kind=ExtremumKind.VALLEY,
        )
        return _alternate_turning_points(peaks=peaks, valleys=valleys)


def _is_more_extreme(*, value: float, reference: float, kind: ExtremumKind) -> bool:
    """Return whether `value` is strictly more extreme than `reference` for `kind`."""
    if kind is ExtremumKind.PEAK:
        return value > reference
    return value < reference


def _merge_close_candidates(
    *,
    series: np.ndarray,
    candidates: np.ndarray,
    closeness_threshold: int,
    kind: ExtremumKind,
) -> tuple[ExtremumPoint, ...]:
    """
    Merge left-to-right candidates within closeness distance of the last accepted one.

    Args:
        series: Float64 price series.
        candidates: Ascending candidate indices.
        closeness_threshold: Merge distance; `index - last_index <= threshold` merges.
        kind: Extremum kind deciding which value is more extreme.
    Returns:
        tuple[ExtremumPoint, ...]: Accepted extrema.
    Assumptions:
        A later candidate replaces the accepted one only when strictly more extreme,
        so exact ties keep the earlier index.
    Raises:
        None.
    Side Effects:
        None.
    """
    accepted: list[ExtremumPoint] = []
    for raw_index in candidates:
        index = int(raw_index)
        value = float(series[index])
        if accepted and index - accepted[-1].index <= closeness_threshold:
            if _is_more_extreme(value=value, reference=accepted[-1].value, kind=kind):
                accepted[-1] = ExtremumPoint(index=index, value=value, kind=kind)
            continue
        accepted.append(ExtremumPoint(index=index, value=value, kind=kind))
    return tuple(accepted)


def _alternate_turning_points(
    *,
    peaks: tuple[ExtremumPoint, ...],
    valleys: tuple[ExtremumPoint, ...],
) -> tuple[ExtremumPoint, ...]:
    """
    Interleave peaks and valleys by index and collapse same-kind runs.

    Args:
        peaks: Merged peaks.
        valleys: Merged valleys.
    Returns:
        tuple[ExtremumPoint, ...]: Alternating turning points with unique indices.
    Assumptions:
        Within a same-kind run the more extreme point survives; ties keep the earlier.
    Raises:
        None.
    Side Effects:
        None.
    """
    flat_indices = {point.index for point in peaks} & {point.index for point in valleys}
    events = sorted(
        (point for point in (*peaks, *valleys) if point.index not in flat_indices),
        key=lambda point: point.index,
    )

    out: list[ExtremumPoint] = []
    for point in events:
        if out and out[-1].kind is point.kind:
            if _is_more_extreme(value=point.value, reference=out[-1].value, kind=point.kind):
                out[-1] = point
            continue
        out.append(point)
    return tuple(out)
