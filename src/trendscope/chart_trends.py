"""
Public chart-trends API: extrema, whole-series trend and trend breakdown.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.application.services,
  trendscope.contexts.chart_trends.adapters.outbound.compute_numba
"""

from __future__ import annotations

import os
from typing import Mapping, Sequence

import numpy as np

from trendscope.contexts.chart_trends.adapters.outbound.compute_numba import (
    ChartTrendsNumbaWarmupRunner,
    NumbaTrendKernels,
)
from trendscope.contexts.chart_trends.adapters.outbound.config import (
    ChartTrendsDefaults,
    load_chart_trends_defaults,
    load_chart_trends_defaults_yaml,
)
from trendscope.contexts.chart_trends.application.ports import TrendKernels
from trendscope.contexts.chart_trends.application.services import (
    ExtremumDetector,
    LinearTrendFitter,
    TrendSegmentationEngine,
)
from trendscope.contexts.chart_trends.domain.entities import (
    ExtremumKind,
    ExtremumPoint,
    FitQuality,
    LinearFit,
    TrendCategory,
    TrendSegment,
)
from trendscope.contexts.chart_trends.domain.errors import (
    ChartTrendsValidationError,
    EmptyInputError,
    InvalidConfigError,
    InvalidPeriodError,
    InvalidRangeError,
    MismatchedLengthError,
    NonFiniteInputError,
    ValueMagnitudeError,
)
from trendscope.contexts.chart_trends.domain.services import prepare_price_series
from trendscope.contexts.chart_trends.domain.specifications import (
    DEFAULT_CLASSIFICATION_THRESHOLDS,
    BreakdownConfig,
    ClassificationThresholds,
)
from trendscope.platform.config import (
    ChartTrendsComputeNumbaConfig,
    load_chart_trends_compute_numba_config,
)

PriceInput = Sequence[float] | np.ndarray

_DEFAULT_KERNELS: TrendKernels = NumbaTrendKernels()
_DEFAULT_BREAKDOWN_CONFIG = BreakdownConfig()


def peaks(
    prices: PriceInput,
    period: int,
    closeness_threshold: int,
    *,
    kernels: TrendKernels | None = None,
) -> list[tuple[float, int]]:
    """
    Return merged local maxima as `(value, index)` pairs ordered by index.

    Args:
        prices: Ordered price series.
        period: Half-width of the centred look-around window.
        closeness_threshold: Same-kind merge distance.
        kernels: Optional compute backend; numba kernels by default.
    Returns:
        list[tuple[float, int]]: Peak values and indices.
    Assumptions:
        No two returned peaks are within `closeness_threshold` of each other.
    Raises:
        ChartTrendsValidationError: If prices, period or threshold are invalid.
    Side Effects:
        None.
    """
    points = find_extrema(
        prices,
        period,
        closeness_threshold,
        ExtremumKind.PEAK,
        kernels=kernels,
    )
    return [point.as_pair() for point in points]


def valleys(
    prices: PriceInput,
    period: int,
    closeness_threshold: int,
    *,
    kernels: TrendKernels | None = None,
) -> list[tuple[float, int]]:
    """Return merged local minima as `(value, index)` pairs ordered by index."""
    points = find_extrema(
        prices,
        period,
        closeness_threshold,
        ExtremumKind.VALLEY,
        kernels=kernels,
    )
    return [point.as_pair() for point in points]


def find_extrema(
    prices: PriceInput,
    period: int,
    closeness_threshold: int,
    kind: ExtremumKind | str,
    *,
    kernels: TrendKernels | None = None,
) -> tuple[ExtremumPoint, ...]:
    """
    Return merged extrema of one kind as `ExtremumPoint` values.

    Args:
        prices: Ordered price series.
        period: Half-width of the centred look-around window.
        closeness_threshold: Same-kind merge distance.
        kind: `ExtremumKind` or its string value (`peak`/`valley`).
        kernels: Optional compute backend.
    Returns:
        tuple[ExtremumPoint, ...]: Extrema with strictly increasing indices.
    Assumptions:
        None.
    Raises:
        ChartTrendsValidationError: If inputs are invalid or `kind` is unknown.
    Side Effects:
        None.
    """
    detector = ExtremumDetector(kernels=_resolve_kernels(kernels))
    return detector.find_extrema(
        prices,
        period=period,
        closeness_threshold=closeness_threshold,
        kind=_coerce_kind(kind),
    )


def turning_points(
    prices: PriceInput,
    period: int,
    closeness_threshold: int,
    *,
    kernels: TrendKernels | None = None,
) -> tuple[ExtremumPoint, ...]:
    """Return alternating peaks and valleys ordered by index."""
    detector = ExtremumDetector(kernels=_resolve_kernels(kernels))
    return detector.find_turning_points(
        prices,
        period=period,
        closeness_threshold=closeness_threshold,
    )


def overall_trend_line(
    prices: PriceInput,
    *,
    kernels: TrendKernels | None = None,
) -> LinearFit:
    """
    Fit one OLS line over the whole price series.

    Args:
        prices: Ordered price series.
        kernels: Optional compute backend.
    Returns:
        LinearFit: Whole-series fit with intercept at index 0.
    Assumptions:
        A single price yields an exact horizontal fit.
    Raises:
        EmptyInputError: If prices are empty.
        NonFiniteInputError: If prices contain NaN or inf.
        ValueMagnitudeError: If any price magnitude exceeds 1e100.
    Side Effects:
        None.
    """
    series = prepare_price_series(prices)
    fitter = LinearTrendFitter(kernels=_resolve_kernels(kernels))
    return fitter.fit_series_range(series, 0, series.shape[0] - 1)


def overall_trend(
    prices: PriceInput,
    *,
    thresholds: ClassificationThresholds | None = None,
    kernels: TrendKernels | None = None,
) -> TrendCategory:
    """
    Classify the whole-series fit.

    Args:
        prices: Ordered price series.
        thresholds: Optional classification thresholds.
        kernels: Optional compute backend.
    Returns:
        TrendCategory: Category of the whole-series line.
    Assumptions:
        Category is invariant to positive scaling and offsets of prices.
    Raises:
        EmptyInputError: If prices are empty.
        NonFiniteInputError: If prices contain NaN or inf.
        ValueMagnitudeError: If any price magnitude exceeds 1e100.
    Side Effects:
        None.
    """
    line = overall_trend_line(prices, kernels=kernels)
    return classify(line, thresholds=thresholds)


def peak_trend(
    prices: PriceInput,
    period: int,
    closeness_threshold: int = 1,
    *,
    kernels: TrendKernels | None = None,
) -> LinearFit:
    """
    Fit one line through the merged peaks of the series.

    Args:
        prices: Ordered price series.
        period: Peak look-around half-width.
        closeness_threshold: Same-kind merge distance.
        kernels: Optional compute backend.
    Returns:
        LinearFit: Fit over `(index, value)` of peaks, intercept at absolute index 0.
    Assumptions:
        Boundary indices qualify as peaks, so at least one peak always exists.
    Raises:
        ChartTrendsValidationError: If prices, period or threshold are invalid.
    Side Effects:
        None.
    """
    return _extremum_trend(
        prices,
        period=period,
        closeness_threshold=closeness_threshold,
        kind=ExtremumKind.PEAK,
        kernels=kernels,
    )


def valley_trend(
    prices: PriceInput,
    period: int,
    closeness_threshold: int = 1,
    *,
    kernels: TrendKernels | None = None,
) -> LinearFit:
    """Fit one line through the merged valleys of the series."""
    return _extremum_trend(
        prices,
        period=period,
        closeness_threshold=closeness_threshold,
        kind=ExtremumKind.VALLEY,
        kernels=kernels,
    )


def fit(
    values: PriceInput,
    start: int,
    end: int,
    *,
    kernels: TrendKernels | None = None,
) -> LinearFit:
    """Fit OLS line over inclusive range `[start, end]` with local x `0..m-1`."""
    return LinearTrendFitter(kernels=_resolve_kernels(kernels)).fit(values, start, end)


def classify(
    fit: LinearFit,
    *,
    thresholds: ClassificationThresholds | None = None,
) -> TrendCategory:
    """Classify one fitted line; pure function of normalized slope and R²."""
    fitter = LinearTrendFitter(
        kernels=_DEFAULT_KERNELS,
        thresholds=thresholds or DEFAULT_CLASSIFICATION_THRESHOLDS,
    )
    return fitter.classify(fit)


def goodness_of_fit(
    values: PriceInput,
    start: int,
    end: int,
    *,
    kernels: TrendKernels | None = None,
) -> FitQuality:
    """Return adjusted R², RMSE and Durbin-Watson of the range fit."""
    fitter = LinearTrendFitter(kernels=_resolve_kernels(kernels))
    return fitter.goodness_of_fit(values, start, end)


def break_down_trends(
    prices: PriceInput,
    config: BreakdownConfig | None = None,
    *,
    thresholds: ClassificationThresholds | None = None,
    kernels: TrendKernels | None = None,
) -> tuple[TrendSegment, ...]:
    """
    Split prices into contiguous classified trend segments covering every index.

    Args:
        prices: Ordered price series.
        config: Segmentation settings; `BreakdownConfig()` defaults when omitted.
            `load_chart_trends_defaults(environ=...).breakdown` gives YAML settings.
        thresholds: Optional classification thresholds for segment categories.
        kernels: Optional compute backend.
    Returns:
        tuple[TrendSegment, ...]: Segments with shared boundary indices.
    Assumptions:
        Output is deterministic for equal inputs.
    Raises:
        EmptyInputError: If prices are empty.
        NonFiniteInputError: If prices contain NaN or inf.
        ValueMagnitudeError: If any price magnitude exceeds 1e100.
        InvalidConfigError: If config does not fit the series length.
    Side Effects:
        Emits debug log records per closed segment.
    """
    backend = _resolve_kernels(kernels)
    engine = TrendSegmentationEngine(
        detector=ExtremumDetector(kernels=backend),
        fitter=LinearTrendFitter(
            kernels=backend,
            thresholds=thresholds or DEFAULT_CLASSIFICATION_THRESHOLDS,
        ),
    )
    return engine.break_down_trends(prices, config or _DEFAULT_BREAKDOWN_CONFIG)


def warmup(
    config: ChartTrendsComputeNumbaConfig | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ChartTrendsNumbaWarmupRunner:
    """
    Apply numba runtime settings and pre-compile chart-trends kernels.

    Args:
        config: Numba runtime config; resolved from env and YAML when omitted.
        environ: Environment used for resolution; `os.environ` when omitted.
    Returns:
        ChartTrendsNumbaWarmupRunner: Runner in warm state.
    Assumptions:
        Kernels compile lazily without warmup; warmup only moves JIT cost to startup.
    Raises:
        ValueError: If numba cache directory is not writable or env/YAML values
            are invalid.
        FileNotFoundError: If `TRENDSCOPE_CHART_TRENDS_CONFIG` names a missing file.
    Side Effects:
        Mutates numba runtime state and writes JIT cache files.
    """
    if config is None:
        config = load_chart_trends_compute_numba_config(
            environ=os.environ if environ is None else environ,
            missing_ok=True,
        )
    runner = ChartTrendsNumbaWarmupRunner(config=config)
    runner.warmup()
    return runner


def _extremum_trend(
    prices: PriceInput,
    *,
    period: int,
    closeness_threshold: int,
    kind: ExtremumKind,
    kernels: TrendKernels | None,
) -> LinearFit:
    backend = _resolve_kernels(kernels)
    points = ExtremumDetector(kernels=backend).find_extrema(
        prices,
        period=period,
        closeness_threshold=closeness_threshold,
        kind=kind,
    )
    return LinearTrendFitter(kernels=backend).fit_points(
        [point.value for point in points],
        [point.index for point in points],
    )


def _resolve_kernels(kernels: TrendKernels | None) -> TrendKernels:
    return _DEFAULT_KERNELS if kernels is None else kernels


def _coerce_kind(kind: ExtremumKind | str) -> ExtremumKind:
    if isinstance(kind, ExtremumKind):
        return kind
    try:
        return ExtremumKind(str(kind).strip().lower())
    except ValueError as error:
        raise ChartTrendsValidationError(
            f"unknown extremum kind: {kind!r}",
            details={"kind": kind},
        ) from error


__all__ = [
    "BreakdownConfig",
    "ChartTrendsDefaults",
    "ChartTrendsValidationError",
    "ClassificationThresholds",
    "EmptyInputError",
    "ExtremumKind",
    "ExtremumPoint",
    "FitQuality",
    "InvalidConfigError",
    "InvalidPeriodError",
    "InvalidRangeError",
    "LinearFit",
    "MismatchedLengthError",
    "NonFiniteInputError",
    "TrendCategory",
    "TrendSegment",
    "ValueMagnitudeError",
    "break_down_trends",
    "classify",
    "find_extrema",
    "fit",
    "goodness_of_fit",
    "load_chart_trends_defaults",
    "load_chart_trends_defaults_yaml",
    "overall_trend",
    "overall_trend_line",
    "peak_trend",
    "peaks",
    "turning_points",
    "valley_trend",
    "valleys",
    "warmup",
]
