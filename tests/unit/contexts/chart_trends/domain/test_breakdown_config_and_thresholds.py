from __future__ import annotations

import numpy as np
import pytest

from trendscope.contexts.chart_trends.domain.errors import InvalidConfigError
from trendscope.contexts.chart_trends.domain.specifications import (
    BreakdownConfig,
    ClassificationThresholds,
)


def test_breakdown_config_defaults_are_valid_and_normalized() -> None:
    config = BreakdownConfig(min_segment_length=np.int64(4), quality_floor=np.float32(0.25))

    assert config.min_segment_length == 4
    assert type(config.min_segment_length) is int
    assert type(config.quality_floor) is float
    assert config.max_outliers == 1
    assert config.outlier_tolerance == 2.5


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"min_segment_length": 0}, "min_segment_length"),
        ({"min_segment_length": 2.5}, "min_segment_length"),
        ({"min_segment_length": True}, "min_segment_length"),
        ({"quality_floor": 1.5}, "quality_floor"),
        ({"quality_floor": -0.1}, "quality_floor"),
        ({"quality_floor": float("nan")}, "quality_floor"),
        ({"max_outliers": -1}, "max_outliers"),
        ({"outlier_tolerance": 0.0}, "outlier_tolerance"),
        ({"extremum_period": 0}, "extremum_period"),
        ({"extremum_closeness": -1}, "extremum_closeness"),
        ({"min_adjusted_r_squared": 1.5}, "min_adjusted_r_squared"),
        ({"max_rmse_growth": 0.5}, "max_rmse_growth"),
        ({"max_rmse_growth": float("inf")}, "max_rmse_growth"),
        ({"durbin_watson_band": (3.0, 1.0)}, "durbin_watson_band"),
        ({"durbin_watson_band": (1.0,)}, "durbin_watson_band"),
        ({"durbin_watson_band": "ab"}, "durbin_watson_band"),
    ],
)
def test_breakdown_config_rejects_out_of_domain_fields(
    kwargs: dict[str, object],
    field: str,
) -> None:
    """
    Verify `BreakdownConfig` validates every threshold domain as one unit.

    Args:
        kwargs: Field overrides.
        field: Expected failing field name.
    Returns:
        None.
    Assumptions:
        Validation happens at construction, before any scan.
    Raises:
        AssertionError: If invalid configs are accepted or report wrong field.
    Side Effects:
        None.
    """
    with pytest.raises(InvalidConfigError) as exc_info:
        BreakdownConfig(**kwargs)  # type: ignore[arg-type]

    assert exc_info.value.details["field"] == field


def test_breakdown_config_optional_break_tests_default_off_and_normalize() -> None:
    assert BreakdownConfig().min_adjusted_r_squared is None
    assert BreakdownConfig().max_rmse_growth is None
    assert BreakdownConfig().durbin_watson_band is None

    config = BreakdownConfig(
        min_adjusted_r_squared=np.float32(-0.5),
        max_rmse_growth=2,
        durbin_watson_band=[1, np.float64(3.0)],  # type: ignore[arg-type]
    )

    assert type(config.min_adjusted_r_squared) is float
    assert config.max_rmse_growth == 2.0
    assert config.durbin_watson_band == (1.0, 3.0)
    assert all(type(bound) is float for bound in config.durbin_watson_band)


def test_breakdown_config_validate_for_length_rejects_oversized_settings() -> None:
    """
    Verify length-dependent checks reject minimum length and period that do not fit.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Both bounds are exclusive of series length.
    Raises:
        AssertionError: If oversized settings pass validation.
    Side Effects:
        None.
    """
    BreakdownConfig(min_segment_length=9, extremum_period=9).validate_for_length(10)

    with pytest.raises(InvalidConfigError) as exc_info:
        BreakdownConfig(min_segment_length=10).validate_for_length(10)
    assert exc_info.value.details["field"] == "min_segment_length"

    with pytest.raises(InvalidConfigError) as exc_info:
        BreakdownConfig(min_segment_length=2, extremum_period=5).validate_for_length(5)
    assert exc_info.value.details["field"] == "extremum_period"


def test_classification_thresholds_require_ordered_slopes() -> None:
    with pytest.raises(InvalidConfigError):
        ClassificationThresholds(trend_slope=0.5, strong_slope=0.2)
    with pytest.raises(InvalidConfigError):
        ClassificationThresholds(trend_slope=0.0)
    with pytest.raises(InvalidConfigError):
        ClassificationThresholds(strong_min_r_squared=1.2)

    thresholds = ClassificationThresholds(trend_slope=1, strong_slope=2)
    assert thresholds.trend_slope == 1.0
    assert type(thresholds.strong_slope) is float
