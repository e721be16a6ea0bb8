from .chart_trends_validation_error import ChartTrendsValidationError
from .empty_input_error import EmptyInputError
from .invalid_config_error import InvalidConfigError
from .invalid_period_error import InvalidPeriodError
from .invalid_range_error import InvalidRangeError
from .mismatched_length_error import MismatchedLengthError
from .non_finite_input_error import NonFiniteInputError
from .value_magnitude_error import ValueMagnitudeError

__all__ = [
    "ChartTrendsValidationError",
    "EmptyInputError",
    "InvalidConfigError",
    "InvalidPeriodError",
    "InvalidRangeError",
    "MismatchedLengthError",
    "NonFiniteInputError",
    "ValueMagnitudeError",
]
