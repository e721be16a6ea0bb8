from .trend_kernels import EXTREMUM_MODE_PEAK, EXTREMUM_MODE_VALLEY, TrendKernels

__all__ = [
    "EXTREMUM_MODE_PEAK",
    "EXTREMUM_MODE_VALLEY",
    "TrendKernels",
]
