"""
Numpy oracle adapters for chart-trends kernel validation.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numba.kernels
"""

from .numpy_trend_kernels import NumpyTrendKernels

__all__ = ["NumpyTrendKernels"]
