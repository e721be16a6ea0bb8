from __future__ import annotations

from pathlib import Path

import pytest

from trendscope.contexts.chart_trends.adapters.outbound.config import (
    load_chart_trends_defaults,
    load_chart_trends_defaults_yaml,
)
from trendscope.contexts.chart_trends.domain.errors import InvalidConfigError
from trendscope.contexts.chart_trends.domain.specifications import (
    BreakdownConfig,
    ClassificationThresholds,
)

_REPO_ROOT = Path(__file__).resolve().parents[7]


def _write_chart_trends_config(tmp_path: Path, *, body: str) -> Path:
    """
    Write temporary chart-trends YAML used by defaults-loader tests.

    Args:
        tmp_path: pytest temporary path fixture.
        body: Full YAML content.
    Returns:
        Path: Written config path.
    Assumptions:
        Input text is valid UTF-8.
    Raises:
        OSError: If write fails.
    Side Effects:
        Creates one temp file.
    """
    config_path = tmp_path / "chart_trends.yaml"
    config_path.write_text(body, encoding="utf-8")
    return config_path


def test_load_chart_trends_defaults_yaml_reads_breakdown_and_classification(
    tmp_path: Path,
) -> None:
    """
    Verify loader maps YAML sections onto validated domain specifications.

    Args:
        tmp_path: pytest temporary path fixture.
    Returns:
        None.
    Assumptions:
        Keys missing from YAML keep domain defaults.
    Raises:
        AssertionError: If parsed values mismatch YAML payload.
    Side Effects:
        None.
    """
    config_path = _write_chart_trends_config(
        tmp_path,
        body="""
schema_version: 1
chart_trends:
  breakdown:
    min_segment_length: 5
    quality_floor: 0.7
  classification:
    trend_slope: 0.2
""".strip(),
    )

    defaults = load_chart_trends_defaults_yaml(config_path)

    assert defaults.schema_version == 1
    assert defaults.breakdown == BreakdownConfig(min_segment_length=5, quality_floor=0.7)
    assert defaults.thresholds == ClassificationThresholds(trend_slope=0.2)


def test_load_chart_trends_defaults_yaml_missing_sections_keep_domain_defaults(
    tmp_path: Path,
) -> None:
    config_path = _write_chart_trends_config(tmp_path, body="schema_version: 1\n")

    defaults = load_chart_trends_defaults_yaml(config_path)

    assert defaults.breakdown == BreakdownConfig()
    assert defaults.thresholds == ClassificationThresholds()


def test_load_chart_trends_defaults_yaml_rejects_invalid_documents(tmp_path: Path) -> None:
    """
    Verify unknown keys, wrong shapes and out-of-domain values fail fast.

    Args:
        tmp_path: pytest temporary path fixture.
    Returns:
        None.
    Assumptions:
        Domain validation errors are `ValueError` subclasses.
    Raises:
        AssertionError: If invalid documents are accepted.
    Side Effects:
        Creates temp files.
    """
    with pytest.raises(FileNotFoundError):
        load_chart_trends_defaults_yaml(tmp_path / "missing.yaml")

    unknown = _write_chart_trends_config(
        tmp_path,
        body="schema_version: 1\nchart_trends:\n  breakdown:\n    min_len: 3\n",
    )
    with pytest.raises(ValueError, match="unknown keys"):
        load_chart_trends_defaults_yaml(unknown)

    not_mapping = _write_chart_trends_config(
        tmp_path,
        body="schema_version: 1\nchart_trends:\n  breakdown: [1, 2]\n",
    )
    with pytest.raises(ValueError, match="expected mapping"):
        load_chart_trends_defaults_yaml(not_mapping)

    out_of_domain = _write_chart_trends_config(
        tmp_path,
        body="schema_version: 1\nchart_trends:\n  breakdown:\n    quality_floor: 1.5\n",
    )
    with pytest.raises(InvalidConfigError):
        load_chart_trends_defaults_yaml(out_of_domain)

    no_schema = _write_chart_trends_config(tmp_path, body="chart_trends: {}\n")
    with pytest.raises(ValueError, match="schema_version"):
        load_chart_trends_defaults_yaml(no_schema)


def test_load_chart_trends_defaults_resolves_path_from_environment(tmp_path: Path) -> None:
    config_path = _write_chart_trends_config(
        tmp_path,
        body="schema_version: 2\nchart_trends:\n  breakdown:\n    max_outliers: 0\n",
    )

    defaults = load_chart_trends_defaults(
        environ={"TRENDSCOPE_CHART_TRENDS_CONFIG": str(config_path)}
    )

    assert defaults.schema_version == 2
    assert defaults.breakdown.max_outliers == 0


def test_load_chart_trends_defaults_yaml_reads_optional_break_tests(tmp_path: Path) -> None:
    config_path = _write_chart_trends_config(
        tmp_path,
        body=(
            "schema_version: 1\n"
            "chart_trends:\n"
            "  breakdown:\n"
            "    min_adjusted_r_squared: 0.5\n"
            "    max_rmse_growth: null\n"
            "    durbin_watson_band: [1, 3]\n"
        ),
    )

    breakdown = load_chart_trends_defaults_yaml(config_path).breakdown

    assert breakdown.min_adjusted_r_squared == 0.5
    assert breakdown.max_rmse_growth is None
    assert breakdown.durbin_watson_band == (1.0, 3.0)


@pytest.mark.parametrize("env_name", ["dev", "prod", "test"])
def test_repository_chart_trends_configs_are_loadable(env_name: str) -> None:
    defaults = load_chart_trends_defaults_yaml(
        _REPO_ROOT / "configs" / env_name / "chart_trends.yaml"
    )

    assert defaults.breakdown == BreakdownConfig()
    assert defaults.thresholds == ClassificationThresholds()
