from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real

from trendscope.contexts.chart_trends.domain.errors import InvalidConfigError

DEFAULT_TREND_SLOPE = 0.15
DEFAULT_STRONG_SLOPE = 0.6
DEFAULT_STRONG_MIN_R_SQUARED = 0.6


@dataclass(frozen=True, slots=True)
class ClassificationThresholds:
    """
    Thresholds that bucket a normalized slope into one `TrendCategory`.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ..services.trend_classifier, ..entities.linear_fit

    Fields:
        trend_slope: Minimum |normalized slope| for `UP`/`DOWN`.
        strong_slope: Minimum |normalized slope| for `STRONG_UP`/`STRONG_DOWN`.
        strong_min_r_squared: Minimum R² required for a strong category.

    Normalized slope is the fitted rise over the range divided by the value range,
    so classification is invariant to positive scaling and offsets of prices.
    """

    trend_slope: float = DEFAULT_TREND_SLOPE
    strong_slope: float = DEFAULT_STRONG_SLOPE
    strong_min_r_squared: float = DEFAULT_STRONG_MIN_R_SQUARED

    def __post_init__(self) -> None:
        """
        Validate threshold ordering and domains.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            None.
        Raises:
            InvalidConfigError: If thresholds are non-finite, non-positive,
                unordered, or R² bound lies outside `[0, 1]`.
        Side Effects:
            Normalizes fields to builtin float.
        """
        for field_name in ("trend_slope", "strong_slope", "strong_min_r_squared"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidConfigError(
                    field=field_name,
                    value=value,
                    reason="must be a real number",
                )
            if not math.isfinite(float(value)):
                raise InvalidConfigError(field=field_name, value=value, reason="must be finite")
            object.__setattr__(self, field_name, float(value))

        if self.trend_slope <= 0.0:
            raise InvalidConfigError(
                field="trend_slope",
                value=self.trend_slope,
                reason="must be > 0",
            )
        if self.strong_slope < self.trend_slope:
            raise InvalidConfigError(
                field="strong_slope",
                value=self.strong_slope,
                reason=f"must be >= trend_slope {self.trend_slope}",
            )
        if not 0.0 <= self.strong_min_r_squared <= 1.0:
            raise InvalidConfigError(
                field="strong_min_r_squared",
                value=self.strong_min_r_squared,
                reason="must be in [0, 1]",
            )


DEFAULT_CLASSIFICATION_THRESHOLDS = ClassificationThresholds()
