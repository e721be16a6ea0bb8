from __future__ import annotations

from enum import Enum


class ExtremumKind(str, Enum):
    """
    Kind of local extremum found by the extremum detector.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: .extremum_point, ...application.services.extremum_detector
    """

    PEAK = "peak"
    VALLEY = "valley"
