from .numba_trend_kernels import NumbaTrendKernels
from .warmup import (
    ChartTrendsNumbaWarmupRunner,
    apply_numba_runtime_config,
    ensure_numba_cache_dir_writable,
)

__all__ = [
    "ChartTrendsNumbaWarmupRunner",
    "NumbaTrendKernels",
    "apply_numba_runtime_config",
    "ensure_numba_cache_dir_writable",
]
