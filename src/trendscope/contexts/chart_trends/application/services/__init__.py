from .extremum_detector import ExtremumDetector
from .linear_trend_fitter import LinearTrendFitter
from .trend_segmentation import TrendSegmentationEngine

__all__ = [
    "ExtremumDetector",
    "LinearTrendFitter",
    "TrendSegmentationEngine",
]
