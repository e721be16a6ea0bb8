from __future__ import annotations

import numpy as np
import pytest

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
from trendscope.contexts.chart_trends.domain.services import (
    MAX_VALUE_MAGNITUDE,
    ensure_closeness,
    ensure_index_range,
    ensure_period,
    ensure_same_length,
    prepare_price_series,
)


def test_prepare_price_series_returns_contiguous_float64_vector() -> None:
    """
    Verify guard normalizes list and strided ndarray inputs to contiguous float64.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Strided views are copied into C-contiguous layout.
    Raises:
        AssertionError: If dtype or layout normalization regresses.
    Side Effects:
        None.
    """
    from_list = prepare_price_series([1, 2, 3])
    strided = prepare_price_series(np.arange(10, dtype=np.int32)[::2])

    for out in (from_list, strided):
        assert out.dtype == np.float64
        assert out.flags["C_CONTIGUOUS"]
    np.testing.assert_array_equal(strided, np.asarray([0.0, 2.0, 4.0, 6.0, 8.0]))


def test_prepare_price_series_rejects_empty_non_finite_and_shapeless_input() -> None:
    with pytest.raises(EmptyInputError):
        prepare_price_series([])

    with pytest.raises(NonFiniteInputError) as exc_info:
        prepare_price_series([1.0, 2.0, np.nan, np.inf])
    assert exc_info.value.details["index"] == 2

    with pytest.raises(ChartTrendsValidationError):
        prepare_price_series([[1.0, 2.0], [3.0, 4.0]])
    with pytest.raises(ChartTrendsValidationError):
        prepare_price_series(["a", "b"])


def test_prepare_price_series_rejects_values_whose_squares_overflow() -> None:
    with pytest.raises(ValueMagnitudeError) as exc_info:
        prepare_price_series([1.0, 1e101, -1e308])
    assert exc_info.value.details["index"] == 1
    assert exc_info.value.details["limit"] == MAX_VALUE_MAGNITUDE

    edge = prepare_price_series([-MAX_VALUE_MAGNITUDE, MAX_VALUE_MAGNITUDE])
    np.testing.assert_array_equal(edge, [-MAX_VALUE_MAGNITUDE, MAX_VALUE_MAGNITUDE])


def test_ensure_period_rejects_zero_and_period_not_shorter_than_series() -> None:
    """
    Verify period guard enforces `1 <= period < length`.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Period equal to length leaves no neighbour inside the window bounds.
    Raises:
        AssertionError: If invalid periods are accepted.
    Side Effects:
        None.
    """
    assert ensure_period(np.int64(2), length=5) == 2

    for bad_period in (0, -1, 5, 7):
        with pytest.raises(InvalidPeriodError):
            ensure_period(bad_period, length=5)
    with pytest.raises(InvalidPeriodError):
        ensure_period(1.5, length=5)  # type: ignore[arg-type]


def test_ensure_closeness_allows_zero_and_rejects_negative() -> None:
    assert ensure_closeness(0) == 0
    with pytest.raises(InvalidConfigError):
        ensure_closeness(-1)
    with pytest.raises(InvalidConfigError):
        ensure_closeness(True)


def test_ensure_index_range_accepts_single_point_and_rejects_out_of_bounds() -> None:
    assert ensure_index_range(3, 3, length=4) == (3, 3)

    for start, end in ((-1, 2), (2, 1), (0, 4)):
        with pytest.raises(InvalidRangeError):
            ensure_index_range(start, end, length=4)


def test_ensure_same_length_reports_all_lengths() -> None:
    assert ensure_same_length(values=3, indices=3) == 3

    with pytest.raises(MismatchedLengthError) as exc_info:
        ensure_same_length(values=3, indices=2)
    assert dict(exc_info.value.details) == {"values": 3, "indices": 2}
