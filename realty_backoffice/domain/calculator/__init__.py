"""Comparative method calculators."""

from .homogenization import calculate_adjustment_factor, homogenize_samples
from .statistics import (
    analyze_samples,
    calculate_coefficient_of_variation,
    calculate_mean,
    calculate_median,
    calculate_std_dev,
)
from .valuation import calculate_valuations, validate_perception_factor

__all__ = [
    "analyze_samples",
    "calculate_adjustment_factor",
    "calculate_coefficient_of_variation",
    "calculate_mean",
    "calculate_median",
    "calculate_std_dev",
    "calculate_valuations",
    "homogenize_samples",
    "validate_perception_factor",
]
