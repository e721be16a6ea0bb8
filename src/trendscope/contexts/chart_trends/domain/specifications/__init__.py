from .breakdown_config import BreakdownConfig
from .classification_thresholds import DEFAULT_CLASSIFICATION_THRESHOLDS, ClassificationThresholds

__all__ = [
    "BreakdownConfig",
    "ClassificationThresholds",
    "DEFAULT_CLASSIFICATION_THRESHOLDS",
]
