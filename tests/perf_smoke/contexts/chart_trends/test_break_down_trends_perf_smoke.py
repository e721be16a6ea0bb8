from __future__ import annotations

import time
from pathlib import Path

import numpy as np

from trendscope import chart_trends
from trendscope.platform.config import ChartTrendsComputeNumbaConfig


def test_break_down_trends_perf_smoke(tmp_path: Path) -> None:
    """
    Run lightweight perf-smoke for trend breakdown after warmup.

    Args:
        tmp_path: pytest temporary path fixture.
    Returns:
        None.
    Assumptions:
        Perf-smoke verifies runtime viability only, not strict latency SLA.
    Raises:
        AssertionError: If output coverage is wrong or execution time is non-positive.
    Side Effects:
        Triggers Numba warmup and JIT compilation.
    """
    runner = chart_trends.warmup(
        ChartTrendsComputeNumbaConfig(
            numba_num_threads=1,
            numba_cache_dir=tmp_path / "numba-cache",
        )
    )
    assert runner.is_warm

    rng = np.random.default_rng(1)
    prices = 100.0 + np.cumsum(rng.normal(0.0, 1.0, size=20_000))

    started = time.perf_counter()
    segments = chart_trends.break_down_trends(prices)
    elapsed = time.perf_counter() - started

    assert segments[0].start_index == 0
    assert segments[-1].end_index == prices.shape[0] - 1
    assert elapsed > 0.0
