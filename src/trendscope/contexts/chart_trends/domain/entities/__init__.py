from .extremum_kind import ExtremumKind
from .extremum_point import ExtremumPoint
from .fit_quality import FitQuality
from .linear_fit import LinearFit
from .trend_category import TrendCategory
from .trend_segment import TrendSegment

__all__ = [
    "ExtremumKind",
    "ExtremumPoint",
    "FitQuality",
    "LinearFit",
    "TrendCategory",
    "TrendSegment",
]
