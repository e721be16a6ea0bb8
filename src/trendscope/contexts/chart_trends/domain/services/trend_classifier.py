from __future__ import annotations

from trendscope.contexts.chart_trends.domain.entities import LinearFit, TrendCategory
from trendscope.contexts.chart_trends.domain.specifications import (
    DEFAULT_CLASSIFICATION_THRESHOLDS,
    ClassificationThresholds,
)


def classify_trend(
    *,
    normalized_slope: float,
    r_squared: float,
    thresholds: ClassificationThresholds = DEFAULT_CLASSIFICATION_THRESHOLDS,
) -> TrendCategory:
    """
    Bucket a normalized slope and fit quality into one trend category.

    Args:
        normalized_slope: Fitted rise over the range divided by the value range.
        r_squared: Coefficient of determination of the fit.
        thresholds: Classification thresholds.
    Returns:
        TrendCategory: Deterministic category for the inputs.
    Assumptions:
        Strong categories additionally require `r_squared >= strong_min_r_squared`;
        NaN inputs fall through to `SIDEWAYS`.
    Raises:
        None.
    Side Effects:
        None.

    Docs:
      - docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related:
      - src/trendscope/contexts/chart_trends/domain/specifications/classification_thresholds.py
      - src/trendscope/contexts/chart_trends/application/services/linear_trend_fitter.py
    """
    strong_quality = r_squared >= thresholds.strong_min_r_squared

    if normalized_slope >= thresholds.strong_slope and strong_quality:
        return TrendCategory.STRONG_UP
    if normalized_slope >= thresholds.trend_slope:
        return TrendCategory.UP
    if normalized_slope <= -thresholds.strong_slope and strong_quality:
        return TrendCategory.STRONG_DOWN
    if normalized_slope <= -thresholds.trend_slope:
        return TrendCategory.DOWN
    return TrendCategory.SIDEWAYS


def classify_fit(
    fit: LinearFit,
    *,
    thresholds: ClassificationThresholds = DEFAULT_CLASSIFICATION_THRESHOLDS,
) -> TrendCategory:
    """Classify a fitted line using its normalized slope and R²."""
    return classify_trend(
        normalized_slope=fit.normalized_slope,
        r_squared=fit.r_squared,
        thresholds=thresholds,
    )
