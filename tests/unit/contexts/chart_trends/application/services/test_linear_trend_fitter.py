from __future__ import annotations

import numpy as np
import pytest

from trendscope.contexts.chart_trends.adapters.outbound.compute_numba import NumbaTrendKernels
from trendscope.contexts.chart_trends.adapters.outbound.compute_numpy import NumpyTrendKernels
from trendscope.contexts.chart_trends.application.ports import TrendKernels
from trendscope.contexts.chart_trends.application.services import LinearTrendFitter
from trendscope.contexts.chart_trends.domain.entities import TrendCategory
from trendscope.contexts.chart_trends.domain.errors import (
    EmptyInputError,
    InvalidRangeError,
    MismatchedLengthError,
    ValueMagnitudeError,
)

_BACKENDS = [
    pytest.param(NumbaTrendKernels(), id="numba"),
    pytest.param(NumpyTrendKernels(), id="numpy"),
]


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_fit_single_point_range_is_exact_horizontal_line(kernels: TrendKernels) -> None:
    """
    Verify `fit(values, i, i)` returns slope 0, intercept=value and R² of 1.

    Args:
        kernels: Compute backend under test.
    Returns:
        None.
    Assumptions:
        Single-point ranges are defined behaviour, not errors.
    Raises:
        AssertionError: If single-point fit contract regresses.
    Side Effects:
        None.
    """
    fitter = LinearTrendFitter(kernels=kernels)
    values = [3.0, 7.5, -2.0, 4.0]

    for index, value in enumerate(values):
        line = fitter.fit(values, index, index)
        assert line.slope == 0.0
        assert line.intercept == value
        assert line.r_squared == 1.0
        assert line.points == 1
        assert fitter.classify(line) is TrendCategory.SIDEWAYS


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_fit_uses_local_x_and_reports_r_squared(kernels: TrendKernels) -> None:
    """
    Verify coefficients are relative to the first point of the range.

    Args:
        kernels: Compute backend under test.
    Returns:
        None.
    Assumptions:
        `values[3:7]` lies exactly on `y = 10 + 2 * x_local`.
    Raises:
        AssertionError: If local-x convention or R² regresses.
    Side Effects:
        None.
    """
    fitter = LinearTrendFitter(kernels=kernels)
    values = [0.0, 50.0, -3.0, 10.0, 12.0, 14.0, 16.0, 1.0]

    line = fitter.fit(values, 3, 6)
    noisy = fitter.fit([100.0, 102.0, 103.0], 0, 2)

    assert line.slope == pytest.approx(2.0)
    assert line.intercept == pytest.approx(10.0)
    assert line.r_squared == pytest.approx(1.0)
    assert line.normalized_slope == pytest.approx(1.0)
    assert line.value_at(3) == pytest.approx(16.0)
    assert noisy.slope == pytest.approx(1.5)
    assert noisy.intercept == pytest.approx(100.0 + 1.0 / 6.0)
    assert noisy.r_squared == pytest.approx(1.0 - (1.0 / 6.0) / (14.0 / 3.0))


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_fit_flat_range_has_unit_r_squared(kernels: TrendKernels) -> None:
    fitter = LinearTrendFitter(kernels=kernels)

    line = fitter.fit([5.0] * 8, 1, 6)

    assert line.slope == 0.0
    assert line.intercept == 5.0
    assert line.r_squared == 1.0
    assert line.normalized_slope == 0.0


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_fit_r_squared_stays_in_unit_interval_on_random_ranges(kernels: TrendKernels) -> None:
    fitter = LinearTrendFitter(kernels=kernels)
    rng = np.random.default_rng(11)
    values = rng.normal(0.0, 5.0, size=300)

    for _ in range(100):
        start = int(rng.integers(0, 299))
        end = int(rng.integers(start, 300))
        line = fitter.fit(values, start, end)
        assert 0.0 <= line.r_squared <= 1.0


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_fit_category_is_invariant_under_positive_scale_and_shift(kernels: TrendKernels) -> None:
    """
    Verify classification of a range fit ignores positive scaling and offsets.

    Args:
        kernels: Compute backend under test.
    Returns:
        None.
    Assumptions:
        Normalized slope divides the fitted rise by the value range.
    Raises:
        AssertionError: If category changes after affine transform.
    Side Effects:
        None.
    """
    fitter = LinearTrendFitter(kernels=kernels)
    rng = np.random.default_rng(3)

    for _ in range(30):
        base = np.cumsum(rng.normal(0.0, 1.0, size=50))
        scale = float(rng.uniform(0.01, 500.0))
        shift = float(rng.uniform(-1_000.0, 1_000.0))
        original = fitter.fit(base, 0, 49)
        transformed = fitter.fit(base * scale + shift, 0, 49)

        assert transformed.normalized_slope == pytest.approx(original.normalized_slope)
        assert transformed.r_squared == pytest.approx(original.r_squared)
        assert fitter.classify(transformed) is fitter.classify(original)


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_fit_points_uses_absolute_indices(kernels: TrendKernels) -> None:
    fitter = LinearTrendFitter(kernels=kernels)

    line = fitter.fit_points([3.0, 5.0, 9.0], [2, 4, 8])
    single = fitter.fit_points([7.0], [5])

    assert line.slope == pytest.approx(1.0)
    assert line.intercept == pytest.approx(1.0)
    assert line.r_squared == pytest.approx(1.0)
    assert line.normalized_slope == pytest.approx(1.0)
    assert single.slope == 0.0
    assert single.intercept == 7.0


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_goodness_of_fit_reports_adjusted_r_squared_rmse_and_durbin_watson(
    kernels: TrendKernels,
) -> None:
    """
    Verify fit diagnostics on a hand-computed three-point range and degenerate ranges.

    Args:
        kernels: Compute backend under test.
    Returns:
        None.
    Assumptions:
        For `[100, 102, 103]` residuals are `[-1/6, 1/3, -1/6]`.
    Raises:
        AssertionError: If diagnostics formulas regress.
    Side Effects:
        None.
    """
    fitter = LinearTrendFitter(kernels=kernels)

    quality = fitter.goodness_of_fit([100.0, 102.0, 103.0], 0, 2)
    r_squared = 1.0 - (1.0 / 6.0) / (14.0 / 3.0)
    ssr = 1.0 / 6.0
    dw_numerator = 2.0 * (0.5**2)

    assert quality.adjusted_r_squared == pytest.approx(1.0 - (1.0 - r_squared) * 2.0)
    assert quality.rmse == pytest.approx(np.sqrt(ssr / 3.0))
    assert quality.durbin_watson == pytest.approx(dw_numerator / ssr)

    single = fitter.goodness_of_fit([4.0, 5.0], 1, 1)
    exact = fitter.goodness_of_fit([1.0, 2.0, 3.0, 4.0], 0, 3)
    assert (single.adjusted_r_squared, single.rmse, single.durbin_watson) == (1.0, 0.0, 2.0)
    assert exact.adjusted_r_squared == pytest.approx(1.0)
    assert exact.rmse == pytest.approx(0.0, abs=1e-12)
    assert exact.durbin_watson == 2.0


def test_count_outliers_flags_single_spike() -> None:
    """
    Verify one spike in an otherwise linear range is the only outlier.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Tolerance of 2.0 robust sigmas separates the spike from the shifted residuals.
    Raises:
        AssertionError: If outlier counting regresses.
    Side Effects:
        None.
    """
    fitter = LinearTrendFitter(kernels=NumpyTrendKernels())
    series = np.arange(20, dtype=np.float64)
    series[10] += 25.0
    clean = np.arange(20, dtype=np.float64)

    spiked_fit = fitter.fit_series_range(series, 0, 19)
    clean_fit = fitter.fit_series_range(clean, 0, 19)

    assert fitter.count_outliers(series, 0, 19, spiked_fit, 2.0) == 1
    assert fitter.count_outliers(clean, 0, 19, clean_fit, 2.0) == 0


def test_fitter_rejects_invalid_ranges_and_point_sets() -> None:
    fitter = LinearTrendFitter(kernels=NumpyTrendKernels())

    with pytest.raises(InvalidRangeError):
        fitter.fit([1.0, 2.0, 3.0], 2, 1)
    with pytest.raises(InvalidRangeError):
        fitter.goodness_of_fit([1.0, 2.0, 3.0], 0, 3)
    with pytest.raises(MismatchedLengthError):
        fitter.fit_points([1.0, 2.0], [0])
    with pytest.raises(EmptyInputError):
        fitter.fit_points([], [])
    with pytest.raises(ValueMagnitudeError):
        fitter.fit_points([1.0, 2.0], [0.0, 1e200])


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_count_outliers_flags_spike_in_six_point_range(kernels: TrendKernels) -> None:
    """
    Verify a lone spike in a short range is counted even though it dominates the RMSE.

    Args:
        kernels: Compute backend under test.
    Returns:
        None.
    Assumptions:
        Residuals are about `4.8, 3.8, 12.4, 21.0, 70.5, 38.1`; median-based scale puts
        the 2.5x threshold near 61.8, between the spike and the next largest residual.
    Raises:
        AssertionError: If the spike escapes the outlier budget.
    Side Effects:
        None.
    """
    fitter = LinearTrendFitter(kernels=kernels)
    series = np.asarray([0.0, 0.0, 0.0, 0.0, 100.0, 0.0])
    fit = fitter.fit_series_range(series, 0, 5)

    assert fitter.count_outliers(series, 0, 5, fit, 2.5) == 1


@pytest.mark.parametrize("kernels", _BACKENDS)
def test_count_outliers_ignores_symmetric_three_point_residuals(kernels: TrendKernels) -> None:
    fitter = LinearTrendFitter(kernels=kernels)
    series = np.asarray([0.0, 1.0, 0.0])
    fit = fitter.fit_series_range(series, 0, 2)

    assert fitter.count_outliers(series, 0, 2, fit, 2.5) == 0
