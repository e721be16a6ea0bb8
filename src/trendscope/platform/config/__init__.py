from .chart_trends_compute_numba import (
    ChartTrendsComputeNumbaConfig,
    load_chart_trends_compute_numba_config,
    resolve_chart_trends_config_path,
)

__all__ = [
    "ChartTrendsComputeNumbaConfig",
    "load_chart_trends_compute_numba_config",
    "resolve_chart_trends_config_path",
]
