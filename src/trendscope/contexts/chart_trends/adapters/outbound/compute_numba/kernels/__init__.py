from .extrema import extremum_mask_f64
from .regression import (
    count_residual_outliers_f64,
    median_abs_residual_f64,
    ols_points_f64,
    ols_range_f64,
    residual_diagnostics_f64,
)

__all__ = [
    "count_residual_outliers_f64",
    "extremum_mask_f64",
    "median_abs_residual_f64",
    "ols_points_f64",
    "ols_range_f64",
    "residual_diagnostics_f64",
]
