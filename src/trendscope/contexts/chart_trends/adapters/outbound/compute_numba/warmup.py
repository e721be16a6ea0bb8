"""
Process-level Numba setup and one-shot JIT warmup for chart-trends kernels.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numba.kernels,
  trendscope.platform.config.chart_trends_compute_numba
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from tempfile import TemporaryFile
from typing import Any, Callable, cast

import numba
import numpy as np

from trendscope.platform.config import ChartTrendsComputeNumbaConfig

from . import kernels

log = logging.getLogger(__name__)

_WARMUP_SIZE = 256


def apply_numba_runtime_config(*, config: ChartTrendsComputeNumbaConfig) -> int:
    """
    Point numba at the configured cache dir and cap its worker thread count.

    Args:
        config: Validated chart-trends Numba runtime config.
    Returns:
        int: Thread count numba reports after the update.
    Assumptions:
        Requested threads above numba's launch-time limit are clamped to that limit.
    Raises:
        ValueError: If cache directory is not writable.
    Side Effects:
        Sets `NUMBA_CACHE_DIR` in process env and updates numba runtime state.
    """
    cache_dir = ensure_numba_cache_dir_writable(path=config.numba_cache_dir)
    os.environ["NUMBA_CACHE_DIR"] = str(cache_dir)

    runtime = cast(Any, numba.config)
    runtime.CACHE_DIR = str(cache_dir)
    numba.set_num_threads(min(config.numba_num_threads, int(runtime.NUMBA_NUM_THREADS)))
    return int(numba.get_num_threads())


def ensure_numba_cache_dir_writable(*, path: Path) -> Path:
    """
    Create cache directory when missing and prove a file can be written inside it.

    Args:
        path: Numba cache directory.
    Returns:
        Path: Same directory as `Path`.
    Assumptions:
        None.
    Raises:
        ValueError: If directory creation or test write fails.
    Side Effects:
        May create directories; writes and removes one anonymous temp file.
    """
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with TemporaryFile(dir=directory) as scratch:
            scratch.write(b"numba")
    except OSError as error:
        raise ValueError(f"numba cache dir {directory} is not writable: {error}") from error
    return directory


def _warmup_calls(source: np.ndarray) -> list[tuple[str, Callable[[], object]]]:
    last = int(source.shape[0]) - 1
    xs = np.arange(source.shape[0], dtype=np.float64)
    slope, intercept, _, _ = kernels.ols_range_f64(source, 0, last)
    return [
        ("extremum_mask_f64", lambda: kernels.extremum_mask_f64(source, 3, 1)),
        ("ols_range_f64", lambda: kernels.ols_range_f64(source, 1, last)),
        ("ols_points_f64", lambda: kernels.ols_points_f64(xs, source)),
        (
            "residual_diagnostics_f64",
            lambda: kernels.residual_diagnostics_f64(source, 0, last, slope, intercept),
        ),
        (
            "count_residual_outliers_f64",
            lambda: kernels.count_residual_outliers_f64(
                source, 0, last, slope, intercept, 1.0
            ),
        ),
        (
            "median_abs_residual_f64",
            lambda: kernels.median_abs_residual_f64(source, 0, last, slope, intercept),
        ),
    ]


class ChartTrendsNumbaWarmupRunner:
    """
    Applies runtime config and compiles every chart-trends kernel exactly once.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.chart_trends
    """

    def __init__(self, *, config: ChartTrendsComputeNumbaConfig) -> None:
        self._config = config
        self._is_warm = False

    @property
    def is_warm(self) -> bool:
        return self._is_warm

    def warmup(self) -> None:
        """
        Compile kernels on a small sine wave; later calls return immediately.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Kernel outputs are discarded; only compilation matters.
        Raises:
            ValueError: If runtime config cannot be applied.
        Side Effects:
            JIT-compiles kernels and logs one info record with timing fields.
        """
        if self._is_warm:
            return

        started = time.perf_counter()
        threads = apply_numba_runtime_config(config=self._config)
        source = np.ascontiguousarray(
            100.0 + np.sin(np.linspace(0.0, 12.0, _WARMUP_SIZE, dtype=np.float64))
        )
        compiled: list[str] = []
        for name, call in _warmup_calls(source):
            call()
            compiled.append(name)

        log.info(
            "chart_trends compute_numba warmup complete",
            extra={
                "warmup_done": True,
                "warmup_seconds": round(time.perf_counter() - started, 6),
                "numba_num_threads_effective": threads,
                "numba_cache_dir": str(self._config.numba_cache_dir),
                "kernels": compiled,
            },
        )
        self._is_warm = True
