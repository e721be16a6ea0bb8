from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Integral, Real

from trendscope.contexts.chart_trends.domain.errors import InvalidConfigError

DEFAULT_MIN_SEGMENT_LENGTH = 3
DEFAULT_QUALITY_FLOOR = 0.5
DEFAULT_MAX_OUTLIERS = 1
DEFAULT_OUTLIER_TOLERANCE = 2.5
DEFAULT_EXTREMUM_PERIOD = 2
DEFAULT_EXTREMUM_CLOSENESS = 1


@dataclass(frozen=True, slots=True)
class BreakdownConfig:
    """
    Immutable sensitivity settings for trend segmentation, validated as one unit.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: ...application.services.trend_segmentation,
      ...adapters.outbound.config.yaml_chart_trends_defaults_loader

    Fields:
        min_segment_length: Lower bound on `end_index - start_index` of emitted segments.
        quality_floor: Minimum R² for a tentative segment to be accepted.
        max_outliers: Off-trend points tolerated inside an accepted segment.
        outlier_tolerance: Residual threshold in robust sigmas (1.4826 * median |residual|).
        extremum_period: Look-around window used to seed candidate breakpoints.
        extremum_closeness: Merge distance for same-kind extrema while seeding.
        min_adjusted_r_squared: Optional adjusted R² floor; a range below it breaks.
        max_rmse_growth: Optional cap on RMSE of an extension relative to the last
            accepted RMSE from the same start.
        durbin_watson_band: Optional inclusive `(low, high)` Durbin-Watson band;
            residual autocorrelation outside it breaks.

    The three optional break tests are disabled when `None`.
    """

    min_segment_length: int = DEFAULT_MIN_SEGMENT_LENGTH
    quality_floor: float = DEFAULT_QUALITY_FLOOR
    max_outliers: int = DEFAULT_MAX_OUTLIERS
    outlier_tolerance: float = DEFAULT_OUTLIER_TOLERANCE
    extremum_period: int = DEFAULT_EXTREMUM_PERIOD
    extremum_closeness: int = DEFAULT_EXTREMUM_CLOSENESS
    min_adjusted_r_squared: float | None = None
    max_rmse_growth: float | None = None
    durbin_watson_band: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        """
        Validate every threshold domain independent of series length.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Length-dependent checks happen in `validate_for_length`.
        Raises:
            InvalidConfigError: If any field is outside its valid domain.
        Side Effects:
            Normalizes numeric fields to builtin `int`/`float`.
        """
        _require_int(field="min_segment_length", value=self.min_segment_length, minimum=1)
        _require_int(field="max_outliers", value=self.max_outliers, minimum=0)
        _require_int(field="extremum_period", value=self.extremum_period, minimum=1)
        _require_int(field="extremum_closeness", value=self.extremum_closeness, minimum=0)
        _require_real(field="quality_floor", value=self.quality_floor)
        _require_real(field="outlier_tolerance", value=self.outlier_tolerance)

        if not 0.0 <= float(self.quality_floor) <= 1.0:
            raise InvalidConfigError(
                field="quality_floor",
                value=self.quality_floor,
                reason="must be in [0, 1]",
            )
        if float(self.outlier_tolerance) <= 0.0:
            raise InvalidConfigError(
                field="outlier_tolerance",
                value=self.outlier_tolerance,
                reason="must be > 0",
            )

        object.__setattr__(self, "min_segment_length", int(self.min_segment_length))
        object.__setattr__(self, "max_outliers", int(self.max_outliers))
        object.__setattr__(self, "extremum_period", int(self.extremum_period))
        object.__setattr__(self, "extremum_closeness", int(self.extremum_closeness))
        object.__setattr__(self, "quality_floor", float(self.quality_floor))
        object.__setattr__(self, "outlier_tolerance", float(self.outlier_tolerance))
        self._normalize_break_tests()

    def _normalize_break_tests(self) -> None:
        """
        Validate optional break tests and store them as builtin floats.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            YAML lists are accepted for `durbin_watson_band`.
        Raises:
            InvalidConfigError: If an enabled test has an out-of-domain threshold.
        Side Effects:
            Replaces enabled fields with normalized values.
        """
        if self.min_adjusted_r_squared is not None:
            _require_real(field="min_adjusted_r_squared", value=self.min_adjusted_r_squared)
            if float(self.min_adjusted_r_squared) > 1.0:
                raise InvalidConfigError(
                    field="min_adjusted_r_squared",
                    value=self.min_adjusted_r_squared,
                    reason="must be <= 1",
                )
            object.__setattr__(
                self, "min_adjusted_r_squared", float(self.min_adjusted_r_squared)
            )

        if self.max_rmse_growth is not None:
            _require_real(field="max_rmse_growth", value=self.max_rmse_growth)
            if float(self.max_rmse_growth) < 1.0:
                raise InvalidConfigError(
                    field="max_rmse_growth",
                    value=self.max_rmse_growth,
                    reason="must be >= 1",
                )
            object.__setattr__(self, "max_rmse_growth", float(self.max_rmse_growth))

        if self.durbin_watson_band is not None:
            band = self.durbin_watson_band
            if not isinstance(band, (tuple, list)) or len(band) != 2:
                raise InvalidConfigError(
                    field="durbin_watson_band",
                    value=band,
                    reason="must be a (low, high) pair",
                )
            low, high = band
            _require_real(field="durbin_watson_band", value=low)
            _require_real(field="durbin_watson_band", value=high)
            if not 0.0 <= float(low) <= float(high) <= 4.0:
                raise InvalidConfigError(
                    field="durbin_watson_band",
                    value=band,
                    reason="must satisfy 0 <= low <= high <= 4",
                )
            object.__setattr__(self, "durbin_watson_band", (float(low), float(high)))

    def validate_for_length(self, length: int) -> None:
        """
        Validate length-dependent constraints before any scan starts.

        Args:
            length: Price series length.
        Returns:
            None.
        Assumptions:
            `length` is already validated as positive by input guards.
        Raises:
            InvalidConfigError: If minimum segment length or extremum period
                does not fit inside the series.
        Side Effects:
            None.
        """
        if self.min_segment_length >= length:
            raise InvalidConfigError(
                field="min_segment_length",
                value=self.min_segment_length,
                reason=f"must be < series length {length}",
            )
        if self.extremum_period >= length:
            raise InvalidConfigError(
                field="extremum_period",
                value=self.extremum_period,
                reason=f"must be < series length {length}",
            )


def _require_int(*, field: str, value: object, minimum: int) -> None:
    """
    Require integral (non-bool) value greater or equal to `minimum`.

    Args:
        field: Field name for diagnostics.
        value: Candidate value.
        minimum: Inclusive lower bound.
    Returns:
        None.
    Assumptions:
        Numpy integer scalars are accepted as integral values.
    Raises:
        InvalidConfigError: If value is not integral or below minimum.
    Side Effects:
        None.
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidConfigError(field=field, value=value, reason="must be an integer")
    if int(value) < minimum:
        raise InvalidConfigError(field=field, value=value, reason=f"must be >= {minimum}")


def _require_real(*, field: str, value: object) -> None:
    """
    Require finite real (non-bool) value.

    Args:
        field: Field name for diagnostics.
        value: Candidate value.
    Returns:
        None.
    Assumptions:
        None.
    Raises:
        InvalidConfigError: If value is not a finite real number.
    Side Effects:
        None.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidConfigError(field=field, value=value, reason="must be a real number")
    if not math.isfinite(float(value)):
        raise InvalidConfigError(field=field, value=value, reason="must be finite")
