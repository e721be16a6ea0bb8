from __future__ import annotations

import math
from dataclasses import dataclass

from .extremum_kind import ExtremumKind


@dataclass(frozen=True, slots=True)
class ExtremumPoint:
    """
    One local peak or valley located by absolute series index.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: .extremum_kind, ...application.services.extremum_detector
    """

    index: int
    value: float
    kind: ExtremumKind

    def __post_init__(self) -> None:
        """
        Validate index, value and kind invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Detector emits points only for validated finite series.
        Raises:
            ValueError: If index is negative, value is not finite, or kind is unknown.
        Side Effects:
            Normalizes `value` to builtin float.
        """
        if isinstance(self.index, bool) or self.index < 0:
            raise ValueError(f"ExtremumPoint.index must be >= 0, got {self.index!r}")
        if not math.isfinite(self.value):
            raise ValueError(f"ExtremumPoint.value must be finite, got {self.value!r}")
        if not isinstance(self.kind, ExtremumKind):
            raise ValueError(f"ExtremumPoint.kind must be ExtremumKind, got {self.kind!r}")
        object.__setattr__(self, "index", int(self.index))
        object.__setattr__(self, "value", float(self.value))

    def as_pair(self) -> tuple[float, int]:
        """
        Return `(value, index)` pair used by the public peaks/valleys contract.

        Args:
            None.
        Returns:
            tuple[float, int]: Value and absolute index.
        Assumptions:
            None.
        Raises:
            None.
        Side Effects:
            None.
        """
        return (self.value, self.index)
