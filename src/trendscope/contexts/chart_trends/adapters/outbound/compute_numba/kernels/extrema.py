"""
Numba kernels for windowed local-extremum detection.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numpy.numpy_trend_kernels,
  trendscope.contexts.chart_trends.application.services.extremum_detector
"""

from __future__ import annotations

import numba as nb
import numpy as np


@nb.njit(cache=True)
def extremum_mask_f64(values: np.ndarray, period: int, mode: int) -> np.ndarray:
    """
    Flag indices that are the window max (`mode=0`) or window min (`mode=1`).

    Args:
        values: Float64 finite price series.
        period: Half-width of the centred window.
        mode: `0=peak`, `1=valley`.
    Returns:
        np.ndarray: Boolean candidate mask.
    Assumptions:
        Window `[i-period, i+period]` is clipped to `[0, T-1]`, so boundary
        indices are evaluated on their partial window. Equal values qualify.
    Raises:
        None.
    Side Effects:
        Allocates one output mask.
    """
    t_size = values.shape[0]
    out = np.zeros(t_size, dtype=np.bool_)
    last_index = t_size - 1

    for center in range(t_size):
        start = center - period
        if start < 0:
            start = 0
        end = center + period
        if end > last_index:
            end = last_index

        candidate = values[center]
        valid = True
        for idx in range(start, end + 1):
            value = values[idx]
            if mode == 0:
                if value > candidate:
                    valid = False
                    break
            elif value < candidate:
                valid = False
                break

        out[center] = valid

    return out
