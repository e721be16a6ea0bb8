"""
Guard clauses run before any chart-trends scan starts.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.domain.errors,
  trendscope.contexts.chart_trends.application.services
"""

from __future__ import annotations

from numbers import Integral
from typing import Sequence

import numpy as np

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

# squares of centred values must stay finite for long windows
MAX_VALUE_MAGNITUDE = 1e100


def prepare_price_series(
    values: Sequence[float] | np.ndarray,
    *,
    name: str = "prices",
) -> np.ndarray:
    """
    Normalize one price series into a validated float64 C-contiguous vector.

    Args:
        values: Ordered price sequence or ndarray.
        name: Logical input name for deterministic error messages.
    Returns:
        np.ndarray: Float64 C-contiguous one-dimensional array.
    Assumptions:
        Input order is the time order; the engine never reorders values.
    Raises:
        ChartTrendsValidationError: If input cannot be read as a 1D numeric vector.
        EmptyInputError: If series has no elements.
        NonFiniteInputError: If series contains NaN or infinite values.
        ValueMagnitudeError: If any value exceeds `MAX_VALUE_MAGNITUDE` in absolute terms.
    Side Effects:
        Allocates normalized array when input is not already float64 contiguous.
    """
    try:
        out = np.ascontiguousarray(values, dtype=np.float64)
    except (TypeError, ValueError) as error:
        raise ChartTrendsValidationError(
            f"{name} must be a numeric sequence",
            details={"name": name},
        ) from error
    if out.ndim != 1:
        raise ChartTrendsValidationError(
            f"{name} must be a 1D sequence, got ndim={out.ndim}",
            details={"name": name, "ndim": int(out.ndim)},
        )
    if out.shape[0] == 0:
        raise EmptyInputError(name=name)

    finite_mask = np.isfinite(out)
    if not bool(finite_mask.all()):
        first_bad = int(np.flatnonzero(~finite_mask)[0])
        raise NonFiniteInputError(name=name, index=first_bad)

    oversized = np.abs(out) > MAX_VALUE_MAGNITUDE
    if bool(oversized.any()):
        raise ValueMagnitudeError(
            name=name,
            index=int(np.flatnonzero(oversized)[0]),
            limit=MAX_VALUE_MAGNITUDE,
        )
    return out


def ensure_period(period: int, *, length: int) -> int:
    """
    Validate extremum look-around period against series length.

    Args:
        period: Candidate period.
        length: Series length.
    Returns:
        int: Validated period as builtin int.
    Assumptions:
        A valid period leaves room for at least one neighbour: `1 <= period < length`.
    Raises:
        InvalidPeriodError: If period is not an integer, is zero, or is `>= length`.
    Side Effects:
        None.
    """
    if isinstance(period, bool) or not isinstance(period, Integral):
        raise InvalidPeriodError(period=period, length=length, reason="must be an integer")
    if period <= 0:
        raise InvalidPeriodError(period=int(period), length=length, reason="must be > 0")
    if period >= length:
        raise InvalidPeriodError(
            period=int(period),
            length=length,
            reason="must be shorter than the series",
        )
    return int(period)


def ensure_closeness(closeness_threshold: int) -> int:
    """
    Validate same-kind extremum merge distance.

    Args:
        closeness_threshold: Candidate merge distance in indices.
    Returns:
        int: Validated distance as builtin int.
    Assumptions:
        Zero disables merging.
    Raises:
        InvalidConfigError: If value is not a non-negative integer.
    Side Effects:
        None.
    """
    if isinstance(closeness_threshold, bool) or not isinstance(closeness_threshold, Integral):
        raise InvalidConfigError(
            field="closeness_threshold",
            value=closeness_threshold,
            reason="must be an integer",
        )
    if closeness_threshold < 0:
        raise InvalidConfigError(
            field="closeness_threshold",
            value=int(closeness_threshold),
            reason="must be >= 0",
        )
    return int(closeness_threshold)


def ensure_index_range(start: int, end: int, *, length: int) -> tuple[int, int]:
    """
    Validate inclusive `[start, end]` range against series bounds.

    Args:
        start: First index.
        end: Last index, inclusive.
        length: Series length.
    Returns:
        tuple[int, int]: Validated bounds as builtin ints.
    Assumptions:
        Single-point ranges (`start == end`) are valid.
    Raises:
        InvalidRangeError: If bounds are not integers or `0 <= start <= end < length` fails.
    Side Effects:
        None.
    """
    for bound in (start, end):
        if isinstance(bound, bool) or not isinstance(bound, Integral):
            raise InvalidRangeError(start=start, end=end, length=length)
    if start < 0 or end < start or end >= length:
        raise InvalidRangeError(start=int(start), end=int(end), length=length)
    return int(start), int(end)


def ensure_same_length(**named_lengths: int) -> int:
    """
    Validate that index-aligned inputs share one length.

    Args:
        **named_lengths: Input name to length mapping, in caller order.
    Returns:
        int: The shared length, or 0 when no inputs are given.
    Assumptions:
        None.
    Raises:
        MismatchedLengthError: If any two lengths differ.
    Side Effects:
        None.
    """
    if not named_lengths:
        return 0
    lengths = list(named_lengths.values())
    if any(length != lengths[0] for length in lengths):
        raise MismatchedLengthError(lengths=named_lengths)
    return lengths[0]


__all__ = [
    "MAX_VALUE_MAGNITUDE",
    "ensure_closeness",
    "ensure_index_range",
    "ensure_period",
    "ensure_same_length",
    "prepare_price_series",
]
