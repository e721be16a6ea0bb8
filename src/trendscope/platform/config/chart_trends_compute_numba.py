"""
Runtime config loader for the chart-trends Numba compute backend.

Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numba.warmup,
  trendscope.contexts.chart_trends.adapters.outbound.config.yaml_chart_trends_defaults_loader
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

TRENDSCOPE_ENV_KEY = "TRENDSCOPE_ENV"
CHART_TRENDS_CONFIG_KEY = "TRENDSCOPE_CHART_TRENDS_CONFIG"
_KNOWN_ENVS = ("dev", "prod", "test")

_THREADS_ENV_KEYS = ("TRENDSCOPE_NUMBA_NUM_THREADS", "NUMBA_NUM_THREADS")
_CACHE_DIR_ENV_KEYS = ("TRENDSCOPE_NUMBA_CACHE_DIR", "NUMBA_CACHE_DIR")
_SECTION_PATH = "compute.numba"

_DEFAULT_NUMBA_NUM_THREADS = max(1, min(os.cpu_count() or 1, 16))
_DEFAULT_NUMBA_CACHE_DIR = Path(".cache/numba")


@dataclass(frozen=True, slots=True)
class ChartTrendsComputeNumbaConfig:
    """
    Thread count and JIT cache location for chart-trends Numba kernels.

    Docs: docs/architecture/chart_trends/chart-trends-engine-v1.md
    Related: trendscope.contexts.chart_trends.adapters.outbound.compute_numba.warmup
    """

    numba_num_threads: int = _DEFAULT_NUMBA_NUM_THREADS
    numba_cache_dir: Path = _DEFAULT_NUMBA_CACHE_DIR

    def __post_init__(self) -> None:
        """
        Reject non-positive thread counts and blank cache paths.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Thread count is an integer; the caller clamps it to numba's launch limit.
        Raises:
            ValueError: If threads are `<= 0` or cache dir is blank.
        Side Effects:
            Stores cache dir as `Path`.
        """
        if self.numba_num_threads <= 0:
            raise ValueError(
                f"numba_num_threads must be > 0, got {self.numba_num_threads}"
            )
        if not str(self.numba_cache_dir).strip():
            raise ValueError("numba_cache_dir must be a non-empty path")
        object.__setattr__(self, "numba_cache_dir", Path(self.numba_cache_dir))


def load_chart_trends_compute_numba_config(
    *,
    environ: Mapping[str, str],
    missing_ok: bool = False,
) -> ChartTrendsComputeNumbaConfig:
    """
    Build Numba runtime config with env > `compute.numba` YAML > default precedence.

    Args:
        environ: Process environment mapping.
        missing_ok: Treat an absent `configs/<env>/chart_trends.yaml` as empty.
    Returns:
        ChartTrendsComputeNumbaConfig: Validated runtime settings.
    Assumptions:
        The `compute.numba` section is optional; missing keys fall back to defaults.
        An explicit `TRENDSCOPE_CHART_TRENDS_CONFIG` path must always exist.
    Raises:
        FileNotFoundError: If the resolved chart-trends YAML does not exist and
            absence is not allowed.
        ValueError: If env name, env overrides or YAML values are invalid.
    Side Effects:
        Reads one YAML file from disk.
    """
    path = resolve_chart_trends_config_path(environ=environ)
    explicit = bool(environ.get(CHART_TRENDS_CONFIG_KEY, "").strip())
    if missing_ok and not explicit and not path.exists():
        section: Mapping[str, Any] = {}
    else:
        section = _read_compute_numba_section(path=path)

    raw_threads = _first_env_value(environ=environ, keys=_THREADS_ENV_KEYS)
    if raw_threads is not None:
        threads = _parse_env_threads(raw_threads[1], key=raw_threads[0])
    else:
        threads = _coerce_yaml_threads(section.get("numba_num_threads"))

    raw_cache_dir = _first_env_value(environ=environ, keys=_CACHE_DIR_ENV_KEYS)
    if raw_cache_dir is not None:
        cache_dir = Path(raw_cache_dir[1])
    else:
        cache_dir = _coerce_yaml_cache_dir(section.get("numba_cache_dir"))

    return ChartTrendsComputeNumbaConfig(numba_num_threads=threads, numba_cache_dir=cache_dir)


def resolve_chart_trends_config_path(*, environ: Mapping[str, str]) -> Path:
    """
    Return explicit `TRENDSCOPE_CHART_TRENDS_CONFIG` or `configs/<env>/chart_trends.yaml`.

    Args:
        environ: Process environment mapping.
    Returns:
        Path: Chart-trends YAML path, possibly relative to the working directory.
    Assumptions:
        `TRENDSCOPE_ENV` defaults to `dev` and is case-insensitive.
    Raises:
        ValueError: If `TRENDSCOPE_ENV` names an unknown environment.
    Side Effects:
        None.
    """
    explicit = environ.get(CHART_TRENDS_CONFIG_KEY, "").strip()
    if explicit:
        return Path(explicit)

    env_name = environ.get(TRENDSCOPE_ENV_KEY, "dev").strip().lower()
    if env_name not in _KNOWN_ENVS:
        raise ValueError(
            f"{TRENDSCOPE_ENV_KEY} must be one of {_KNOWN_ENVS}, got {env_name!r}"
        )
    return Path("configs") / env_name / "chart_trends.yaml"


def _read_compute_numba_section(*, path: Path) -> Mapping[str, Any]:
    """
    Read `compute.numba` from chart-trends YAML, or `{}` when absent.

    Args:
        path: Chart-trends YAML path.
    Returns:
        Mapping[str, Any]: Raw section mapping.
    Assumptions:
        Other top-level sections belong to other loaders and are not inspected.
    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If the document or a section on the way is not a mapping.
    Side Effects:
        Reads one UTF-8 file from disk.
    """
    if not path.exists():
        raise FileNotFoundError(f"chart trends config not found: {path}")
    node: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    if node is None:
        return {}
    if not isinstance(node, dict):
        raise ValueError("chart trends config must be a mapping at top-level")

    walked: list[str] = []
    for key in _SECTION_PATH.split("."):
        walked.append(key)
        node = node.get(key)
        if node is None:
            return {}
        if not isinstance(node, dict):
            raise ValueError(f"{'.'.join(walked)} section must be a mapping")
    return node


def _first_env_value(
    *,
    environ: Mapping[str, str],
    keys: tuple[str, ...],
) -> tuple[str, str] | None:
    """Return `(key, stripped value)` of the first non-blank env key, if any."""
    for key in keys:
        value = environ.get(key, "").strip()
        if value:
            return key, value
    return None


def _parse_env_threads(raw: str, *, key: str) -> int:
    """
    Parse a positive base-10 thread count from an env string.

    Args:
        raw: Stripped env value.
        key: Env key for error messages.
    Returns:
        int: Thread count.
    Assumptions:
        None.
    Raises:
        ValueError: If value is not an integer or is `<= 0`.
    Side Effects:
        None.
    """
    try:
        parsed = int(raw, 10)
    except ValueError as error:
        raise ValueError(f"{key} must be int, got {raw!r}") from error
    if parsed <= 0:
        raise ValueError(f"{key} must be > 0, got {parsed}")
    return parsed


def _coerce_yaml_threads(value: Any) -> int:
    if value is None:
        return _DEFAULT_NUMBA_NUM_THREADS
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(
            f"expected int for {_SECTION_PATH}.numba_num_threads, got {type(value).__name__}"
        )
    if value <= 0:
        raise ValueError(f"{_SECTION_PATH}.numba_num_threads must be > 0, got {value}")
    return value


def _coerce_yaml_cache_dir(value: Any) -> Path:
    if value is None:
        return _DEFAULT_NUMBA_CACHE_DIR
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{_SECTION_PATH}.numba_cache_dir must be a non-empty string")
    return Path(value.strip())


__all__ = [
    "CHART_TRENDS_CONFIG_KEY",
    "ChartTrendsComputeNumbaConfig",
    "TRENDSCOPE_ENV_KEY",
    "load_chart_trends_compute_numba_config",
    "resolve_chart_trends_config_path",
]
