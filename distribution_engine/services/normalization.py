"""Distribution spec normalization and single/time-series mode transitions.

A distribution spec is a plain mapping owned by the scenario store:

    {
        "type": "normal",
        "parameters": {"value": 100, "stdDev": 10},
        "timeSeriesMode": False,
        "timeSeriesParameters": {"value": [{"year": 0, "value": 100}, ...]},
        "metadata": {"percentileDirection": "ascending"},
    }

Nothing here mutates its input; every function works on a deep copy.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from distribution_engine.models.distribution import ModeTransitionResult
from distribution_engine.utils.params import is_number

logger = logging.getLogger(__name__)

DEFAULT_DISTRIBUTION_TYPE = "fixed"


def normalize_distribution(spec: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``spec`` that is safe to read.

    Guarantees:
    - ``type`` is a non-empty string (default ``"fixed"``)
    - ``parameters`` is a dict whose ``value`` is a finite number (default 0)
    - ``timeSeriesParameters.value`` is a list (default empty)
    - ``timeSeriesMode`` is a bool

    Idempotent: normalizing a normalized spec returns an equal spec.
    """
    normalized: dict[str, Any] = copy.deepcopy(dict(spec)) if isinstance(spec, Mapping) else {}

    dist_type = normalized.get("type")
    if not isinstance(dist_type, str) or not dist_type:
        normalized["type"] = DEFAULT_DISTRIBUTION_TYPE

    parameters = normalized.get("parameters")
    parameters = dict(parameters) if isinstance(parameters, Mapping) else {}
    if not is_number(parameters.get("value")):
        parameters["value"] = 0
    normalized["parameters"] = parameters

    ts_parameters = normalized.get("timeSeriesParameters")
    ts_parameters = dict(ts_parameters) if isinstance(ts_parameters, Mapping) else {}
    if not isinstance(ts_parameters.get("value"), list):
        ts_parameters["value"] = []
    normalized["timeSeriesParameters"] = ts_parameters

    normalized["timeSeriesMode"] = bool(normalized.get("timeSeriesMode", False))
    return normalized


def _raw_value(spec: Mapping[str, Any] | None) -> Any:
    """``parameters.value`` as supplied, before any coercion."""
    if not isinstance(spec, Mapping):
        return None
    parameters = spec.get("parameters")
    return parameters.get("value") if isinstance(parameters, Mapping) else None


def _valid_points(points: Any) -> list[Mapping[str, Any]]:
    if not isinstance(points, list):
        return []
    return [p for p in points if isinstance(p, Mapping) and is_number(p.get("value"))]


def _latest_point_value(points: Any) -> float | None:
    """Value of the point with the largest year, if it carries a number."""
    if not isinstance(points, list):
        return None
    dated = [p for p in points if isinstance(p, Mapping) and is_number(p.get("year"))]
    if not dated:
        return None
    latest = max(dated, key=lambda p: p["year"])
    value = latest.get("value")
    return float(value) if is_number(value) else None


def validate_time_series_mode_transition(
    spec: Mapping[str, Any] | None, target_mode: bool, default_value: float = 0
) -> ModeTransitionResult:
    """Switch a spec between single-value and time-series modes.

    Single -> TimeSeries:
        a non-numeric ``parameters.value`` is replaced by ``default_value``;
        an empty series is seeded with ``{year: 0, value: parameters.value}``.
    TimeSeries -> Single:
        a non-numeric ``parameters.value`` is recovered from the most recent
        point (largest year), else ``default_value``.
    Same mode:
        only the mode flag is written.

    Repairs never fail the transition; they are reported in ``message``.

    Args:
        spec: Distribution spec (not modified)
        target_mode: True for time-series mode, False for single-value mode
        default_value: Fallback when no usable value exists

    Returns:
        ModeTransitionResult holding the transitioned copy
    """
    raw_value = _raw_value(spec)
    normalized = normalize_distribution(spec)
    current_mode = normalized["timeSeriesMode"]
    target_mode = bool(target_mode)
    message = None

    if current_mode == target_mode:
        normalized["timeSeriesMode"] = target_mode
        return ModeTransitionResult(is_valid=True, message=None, distribution=normalized)

    parameters = normalized["parameters"]
    ts_parameters = normalized["timeSeriesParameters"]

    if target_mode:
        if not is_number(raw_value):
            parameters["value"] = default_value
            message = "Invalid parameter value, using default"
            logger.info(f"Replaced non-numeric value {raw_value!r} with default {default_value}")
        if not ts_parameters["value"]:
            ts_parameters["value"] = [{"year": 0, "value": parameters["value"]}]
    else:
        if not is_number(raw_value):
            recovered = _latest_point_value(ts_parameters["value"])
            if recovered is not None:
                parameters["value"] = recovered
                message = "Using time series data for parameter value"
            else:
                parameters["value"] = default_value
                message = "No usable time series data, using default"
            logger.info(f"Recovered parameter value {parameters['value']} leaving time series mode")

    normalized["timeSeriesMode"] = target_mode
    return ModeTransitionResult(is_valid=True, message=message, distribution=normalized)


def get_appropriate_value(spec: Mapping[str, Any] | None, default_value: float = 0) -> float:
    """Best single value for a spec in either mode, without modifying it.

    In time-series mode: the most recent point, else the average of numeric
    points, else ``parameters.value``, else ``default_value``. In single-value
    mode ``parameters.value`` wins and the series is only used when the value
    is not numeric.
    """
    raw_value = _raw_value(spec)
    normalized = normalize_distribution(spec)
    points = normalized["timeSeriesParameters"]["value"]

    def from_series() -> float | None:
        latest = _latest_point_value(points)
        if latest is not None:
            return latest
        values = [float(p["value"]) for p in _valid_points(points)]
        if values:
            return sum(values) / len(values)
        return None

    if normalized["timeSeriesMode"]:
        series_value = from_series()
        if series_value is not None:
            return series_value
        return float(raw_value) if is_number(raw_value) else default_value

    if is_number(raw_value):
        return float(raw_value)
    series_value = from_series()
    return series_value if series_value is not None else default_value


def initialize_time_series_if_empty(spec: Mapping[str, Any] | None) -> dict[str, Any]:
    """Seed an empty series with ``{year: 0, value: parameters.value}`` in time-series mode."""
    normalized = normalize_distribution(spec)
    if normalized["timeSeriesMode"] and not normalized["timeSeriesParameters"]["value"]:
        normalized["timeSeriesParameters"]["value"] = [
            {"year": 0, "value": normalized["parameters"]["value"]}
        ]
    return normalized
