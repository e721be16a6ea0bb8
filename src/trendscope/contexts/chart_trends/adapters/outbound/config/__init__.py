from .yaml_chart_trends_defaults_loader import (
    ChartTrendsDefaults,
    load_chart_trends_defaults,
    load_chart_trends_defaults_yaml,
)

__all__ = [
    "ChartTrendsDefaults",
    "load_chart_trends_defaults",
    "load_chart_trends_defaults_yaml",
]
