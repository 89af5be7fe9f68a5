"""Sensitivity cube interpolation.

Correlation matrices are precomputed at a handful of percentiles (e.g. P10,
P50, P90). These helpers estimate correlations at percentiles in between, and
project how a change in one metric propagates to the others.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

from distribution_engine.core.exceptions import SensitivityDataError
from distribution_engine.models.sensitivity import MetricImpact, PercentileMatrix, SensitivityData

logger = logging.getLogger(__name__)

SensitivityInput = Union[SensitivityData, Mapping[str, Any]]

SUPPORTED_METHODS = ("linear",)


def _coerce(sensitivity_data: SensitivityInput | None) -> SensitivityData | None:
    if sensitivity_data is None:
        return None
    if isinstance(sensitivity_data, SensitivityData):
        return sensitivity_data
    return SensitivityData.model_validate(sensitivity_data)


def interpolate_correlation(
    sensitivity_data: SensitivityInput | None,
    target_percentile: float,
    metric_a: str,
    metric_b: str,
    method: str = "linear",
) -> float | None:
    """Interpolate the correlation between two metrics at a target percentile.

    The two computed percentiles bounding the target are located and their
    coefficients blended linearly:
    ``lower + (upper - lower) * (target - lowerP) / (upperP - lowerP)``.
    Targets outside the computed range take the nearest computed value.

    Args:
        sensitivity_data: Sensitivity data (model or camelCase mapping)
        target_percentile: Percentile to interpolate at (e.g., 60)
        metric_a: First metric ID
        metric_b: Second metric ID
        method: Interpolation method; only "linear" is supported

    Returns:
        The coefficient rounded to 4 decimals, or None when the data has no
        matrices, the method is unsupported or a bounding matrix lacks the pair
    """
    data = _coerce(sensitivity_data)
    if data is None or not data.percentile_matrices:
        logger.warning("No percentile matrices available for correlation interpolation")
        return None
    if method not in SUPPORTED_METHODS:
        logger.warning(f"Unsupported interpolation method: {method}")
        return None

    matrices = data.sorted_matrices()
    if target_percentile <= matrices[0].percentile:
        return matrices[0].correlation(metric_a, metric_b)
    if target_percentile >= matrices[-1].percentile:
        return matrices[-1].correlation(metric_a, metric_b)

    lower, upper = _bounding_matrices(matrices, target_percentile)
    lower_value = lower.correlation(metric_a, metric_b)
    upper_value = upper.correlation(metric_a, metric_b)
    if lower_value is None or upper_value is None:
        logger.debug(
            f"Correlation {metric_a}/{metric_b} missing at P{lower.percentile} or P{upper.percentile}"
        )
        return None
    if upper.percentile == lower.percentile:
        return round(lower_value, 4)

    ratio = (target_percentile - lower.percentile) / (upper.percentile - lower.percentile)
    return round(lower_value + (upper_value - lower_value) * ratio, 4)


def _bounding_matrices(
    matrices: Sequence[PercentileMatrix], target: float
) -> tuple[PercentileMatrix, PercentileMatrix]:
    """Nearest computed matrices at or below and at or above ``target``."""
    lower = max((m for m in matrices if m.percentile <= target), key=lambda m: m.percentile)
    upper = min((m for m in matrices if m.percentile >= target), key=lambda m: m.percentile)
    return lower, upper


def interpolate_metric_impact(
    sensitivity_data: SensitivityInput | None,
    target_metric: str,
    target_value: float,
    baseline_percentile: float,
    impact_metrics: Sequence[str] | None = None,
) -> dict[str, MetricImpact]:
    """Project the effect of moving ``target_metric`` to ``target_value``.

    For every impacted metric:
    ``after = before + correlation * pct_change(target) * before``, using the
    correlations and metric values at ``baseline_percentile``.

    Args:
        sensitivity_data: Sensitivity data including baseline metric values
        target_metric: Metric being changed
        target_value: New value for the target metric
        baseline_percentile: Percentile whose matrix and values form the baseline
        impact_metrics: Metrics to project (default: the matrix's enabled metrics)

    Returns:
        Mapping of metric -> MetricImpact. Metrics without a correlation or
        baseline value are left out. Empty when the target's baseline is 0.

    Raises:
        SensitivityDataError: If the baseline percentile or the target's baseline
            value is missing
    """
    data = _coerce(sensitivity_data)
    if data is None or not data.percentile_matrices:
        raise SensitivityDataError("no percentile matrices available")

    baseline = next(
        (m for m in data.percentile_matrices if m.percentile == baseline_percentile), None
    )
    if baseline is None:
        raise SensitivityDataError(
            f"Baseline percentile {baseline_percentile} not found in sensitivity data",
            percentile=baseline_percentile,
        )

    target_baseline = data.metric_values.get(target_metric, {}).get(baseline_percentile)
    if target_baseline is None:
        raise SensitivityDataError(
            f"No baseline value for metric '{target_metric}'", percentile=baseline_percentile
        )
    if target_baseline == 0:
        logger.warning(f"Baseline value of '{target_metric}' is 0; relative change is undefined")
        return {}

    change = (target_value - target_baseline) / target_baseline
    metrics = impact_metrics or baseline.matrix_metadata.enabled_metrics or list(baseline.correlation_matrix)

    impacts: dict[str, MetricImpact] = {}
    for metric in metrics:
        if metric == target_metric:
            continue
        correlation = baseline.correlation(target_metric, metric)
        before = data.metric_values.get(metric, {}).get(baseline_percentile)
        if correlation is None or before is None:
            logger.debug(f"Skipping impact on '{metric}': missing correlation or baseline value")
            continue
        impacts[metric] = MetricImpact(
            before=before,
            after=before + correlation * change * before,
            pct_change=correlation * change * 100,
        )
    return impacts
