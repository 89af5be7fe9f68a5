"""Statistical distribution engine for scenario modeling."""

from __future__ import annotations

from distribution_engine.services.distribution_registry import (
    DistributionRegistry,
    get_distribution_registry,
)
from distribution_engine.services.normalization import (
    get_appropriate_value,
    initialize_time_series_if_empty,
    normalize_distribution,
    validate_time_series_mode_transition,
)
from distribution_engine.services.percentiles import organize_percentiles
from distribution_engine.services.sensitivity import (
    interpolate_correlation,
    interpolate_metric_impact,
)
from distribution_engine.services.validator import check_data_compatibility, validate_distribution

__version__ = "0.1.0"

__all__ = [
    "DistributionRegistry",
    "get_distribution_registry",
    "normalize_distribution",
    "validate_time_series_mode_transition",
    "get_appropriate_value",
    "initialize_time_series_if_empty",
    "organize_percentiles",
    "validate_distribution",
    "check_data_compatibility",
    "interpolate_correlation",
    "interpolate_metric_impact",
]
