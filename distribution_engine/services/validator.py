"""Schema-level validation of distribution specs.

This module checks a complete distribution spec before it is fitted or plotted:
- The distribution type is known (case-insensitive)
- Parameters are present and pass the family's own ``validate``
- In time-series mode, the series is a list of well-formed {year, value} points

Data that is usable but poor for fitting (too few points, non-positive values
for positive-only families, skewed data for a normal fit) produces warnings
while keeping ``is_valid=True``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from distribution_engine.core.config import POSITIVE_DATA_TYPES
from distribution_engine.models.distribution import ValidationResult
from distribution_engine.services.distribution_registry import (
    DistributionRegistry,
    get_distribution_registry,
)
from distribution_engine.utils.params import is_number

logger = logging.getLogger(__name__)

# Relative mean/median gap above which normal data is reported as skewed
SKEW_THRESHOLD = 0.3


def validate_distribution(
    spec: Mapping[str, Any] | None,
    validate_time_series: bool = True,
    registry: DistributionRegistry | None = None,
) -> ValidationResult:
    """Validate a distribution spec.

    Args:
        spec: Distribution spec (type, parameters, timeSeriesMode, timeSeriesParameters)
        validate_time_series: Whether to check the series when in time-series mode
        registry: Registry to resolve types against (default: global registry)

    Returns:
        ValidationResult; errors stop at the first failing stage, warnings accumulate

    Example:
        >>> validate_distribution({"type": "normal", "parameters": {"value": 10, "stdDev": 5}})
        ValidationResult(is_valid=True, message=[], details=None, warning=[])
    """
    registry = registry or get_distribution_registry()

    if not spec:
        return ValidationResult.fail(
            "Distribution object is required", details="No distribution object provided"
        )

    dist_type = spec.get("type")
    if not dist_type or not isinstance(dist_type, str):
        return ValidationResult.fail(
            "Distribution type is required", details="Please specify a distribution type"
        )

    dist_type = dist_type.lower()
    dist = registry.get(dist_type)
    if dist is None:
        return ValidationResult.fail(
            f"Unknown distribution type: {dist_type}",
            details=(
                f'The distribution type "{dist_type}" is not supported. '
                "Please choose from the available options."
            ),
        )

    parameters = spec.get("parameters")
    if not isinstance(parameters, Mapping):
        return ValidationResult.fail(
            "Parameters are required", details="Please provide parameters for the distribution"
        )

    result = dist.validate(parameters)
    if not result.is_valid:
        return result

    if not (spec.get("timeSeriesMode") and validate_time_series):
        return ValidationResult.ok()

    return _validate_time_series(dist_type, spec.get("timeSeriesParameters"), registry)


def _validate_time_series(
    dist_type: str, ts_parameters: Any, registry: DistributionRegistry
) -> ValidationResult:
    if not ts_parameters or not isinstance(ts_parameters, Mapping):
        return ValidationResult.fail(
            "Time series parameters are required in time series mode",
            details="Please provide time series parameters",
        )

    points = ts_parameters.get("value")
    if not isinstance(points, list):
        return ValidationResult.fail(
            "Time series data must be an array",
            details="Please provide a valid array of time series data points",
        )

    invalid = [
        point
        for point in points
        if not isinstance(point, Mapping) or point.get("year") is None or point.get("value") is None
    ]
    if invalid:
        return ValidationResult.fail(
            "Time series contains invalid data points",
            details=f"{len(invalid)} data points are missing required year or value properties",
        )

    warnings: list[str] = []
    details = None

    min_points = registry.get_min_required_points(dist_type)
    if len(points) < min_points:
        warnings.append(f"Time series has fewer than recommended {min_points} data points")
        details = (
            f"For {dist_type} distribution, it's recommended to have at least "
            f"{min_points} data points for accurate fitting"
        )

    compatibility = check_data_compatibility(dist_type, points)
    if compatibility is not None:
        warnings.extend(compatibility.message or compatibility.warning)
        details = details or compatibility.details

    if warnings:
        logger.debug(f"Time series warnings for {dist_type}: {warnings}")
    return ValidationResult(is_valid=True, warning=warnings, details=details)


def check_data_compatibility(
    dist_type: str, points: Sequence[Mapping[str, Any]] | None
) -> ValidationResult | None:
    """Check whether time-series values suit a distribution family.

    Args:
        dist_type: Distribution type (lowercase)
        points: Time-series points

    Returns:
        None when nothing stands out. Otherwise a result describing the issue:
        ``is_valid=False`` for non-positive values in a positive-only family,
        ``is_valid=True`` with a warning for skewed normal data.
    """
    if not points:
        return None

    values = [
        float(point["value"])
        for point in points
        if isinstance(point, Mapping) and is_number(point.get("value"))
    ]

    if dist_type in POSITIVE_DATA_TYPES and any(v <= 0 for v in values):
        return ValidationResult.fail(
            f"{dist_type} distribution requires all values to be positive",
            details="Please ensure all data points have positive values",
        )

    if dist_type == "normal" and len(points) > 2 and values:
        mean = sum(values) / len(values)
        median = sorted(values)[len(values) // 2]
        if mean != 0 and abs(mean - median) / abs(mean) > SKEW_THRESHOLD:
            return ValidationResult(
                is_valid=True,
                warning=["Data appears skewed. Consider using lognormal or weibull distribution instead."],
                details="Normal distribution works best with symmetric data",
            )

    return None
