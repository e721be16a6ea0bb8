"""
Filesystem YAML loader for chart-trends breakdown and classification defaults.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.domain.specifications,
  trendscope.platform.config.chart_trends_compute_numba
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from trendscope.contexts.chart_trends.domain.specifications import (
    BreakdownConfig,
    ClassificationThresholds,
)
from trendscope.platform.config import resolve_chart_trends_config_path


@dataclass(frozen=True, slots=True)
class ChartTrendsDefaults:
    """
    Parsed chart-trends defaults document.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.chart_trends
    """

    schema_version: int
    breakdown: BreakdownConfig
    thresholds: ClassificationThresholds


def load_chart_trends_defaults(*, environ: Mapping[str, str]) -> ChartTrendsDefaults:
    """
    Resolve chart-trends YAML path from environment and load defaults from it.

    Args:
        environ: Environment mapping (`TRENDSCOPE_CHART_TRENDS_CONFIG`, `TRENDSCOPE_ENV`).
    Returns:
        ChartTrendsDefaults: Parsed defaults.
    Assumptions:
        Relative paths resolve against the process working directory.
    Raises:
        FileNotFoundError: If config path does not exist.
        ValueError: If env values or YAML shape are invalid.
    Side Effects:
        Reads one UTF-8 file from disk.
    """
    return load_chart_trends_defaults_yaml(resolve_chart_trends_config_path(environ=environ))


def load_chart_trends_defaults_yaml(path: str | Path) -> ChartTrendsDefaults:
    """
    Load chart-trends defaults YAML from filesystem.

    Args:
        path: Config path to `chart_trends.yaml`.
    Returns:
        ChartTrendsDefaults: Parsed and validated defaults.
    Assumptions:
        `chart_trends.breakdown` and `chart_trends.classification` are optional;
        missing keys keep domain defaults.
    Raises:
        FileNotFoundError: If config path does not exist.
        ValueError: If YAML shape is invalid or values fail domain validation.
    Side Effects:
        Reads one UTF-8 file from disk.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart trends config not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("chart trends config must be a mapping at top-level")

    schema_version = raw.get("schema_version")
    if isinstance(schema_version, bool) or not isinstance(schema_version, int):
        raise ValueError(
            "expected int at schema_version, "
            f"got {type(schema_version).__name__}"
        )

    section = _optional_mapping(raw, key="chart_trends", yaml_path="chart_trends")
    breakdown_map = _optional_mapping(
        section,
        key="breakdown",
        yaml_path="chart_trends.breakdown",
    )
    classification_map = _optional_mapping(
        section,
        key="classification",
        yaml_path="chart_trends.classification",
    )

    _reject_unknown_keys(
        breakdown_map,
        allowed=_field_names(BreakdownConfig),
        yaml_path="chart_trends.breakdown",
    )
    _reject_unknown_keys(
        classification_map,
        allowed=_field_names(ClassificationThresholds),
        yaml_path="chart_trends.classification",
    )

    return ChartTrendsDefaults(
        schema_version=schema_version,
        breakdown=BreakdownConfig(**breakdown_map),
        thresholds=ClassificationThresholds(**classification_map),
    )


def _field_names(cls: type) -> frozenset[str]:
    return frozenset(field.name for field in fields(cls))


def _optional_mapping(
    payload: Mapping[str, Any],
    *,
    key: str,
    yaml_path: str,
) -> Mapping[str, Any]:
    """
    Read optional mapping key or return empty mapping.

    Args:
        payload: Parent mapping.
        key: Child key.
        yaml_path: Full YAML path for errors.
    Returns:
        Mapping[str, Any]: Child mapping or empty mapping if absent.
    Assumptions:
        Absence means domain defaults for this section.
    Raises:
        ValueError: If present value is not a mapping.
    Side Effects:
        None.
    """
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected mapping at {yaml_path}, got {type(value).__name__}")
    return value


def _reject_unknown_keys(
    payload: Mapping[str, Any],
    *,
    allowed: frozenset[str],
    yaml_path: str,
) -> None:
    unknown = sorted(str(key) for key in payload if key not in allowed)
    if unknown:
        raise ValueError(f"unknown keys at {yaml_path}: {unknown}")
