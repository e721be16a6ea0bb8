from .input_guards import (
    MAX_VALUE_MAGNITUDE,
    ensure_closeness,
    ensure_index_range,
    ensure_period,
    ensure_same_length,
    prepare_price_series,
)
from .trend_classifier import classify_fit, classify_trend

__all__ = [
    "MAX_VALUE_MAGNITUDE",
    "classify_fit",
    "classify_trend",
    "ensure_closeness",
    "ensure_index_range",
    "ensure_period",
    "ensure_same_length",
    "prepare_price_series",
]
