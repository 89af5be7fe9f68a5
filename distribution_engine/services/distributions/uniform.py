"""Continuous uniform distribution between min and max."""

from __future__ import annotations

import math

import numpy as np

from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    generate_range,
    require_number,
    validation_result,
)
from distribution_engine.utils.params import get_number, get_param, is_number


class UniformDistribution(BaseDistribution):
    """Continuous uniform distribution.

    Every value in ``[min, max]`` is equally likely; ``min < max`` strictly.
    """

    name = "uniform"
    display_name = "Uniform Distribution"
    description = "Equal probability across a range of values, defined by minimum and maximum."
    applications = (
        "Used when any value in a range is equally likely, often for modeling complete uncertainty."
    )
    examples = (
        "Random equipment selection, uncertainty in expert opinions, or arrival times "
        "with high uncertainty."
    )
    min_points_required = 2

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        require_number(params, "min", "Minimum value", issues)
        require_number(params, "max", "Maximum value", issues)
        if not issues and params["max"] <= params["min"]:
            issues.append("Maximum must be greater than minimum")
        return validation_result(
            issues,
            "The uniform distribution requires minimum and maximum values, where maximum "
            "is greater than minimum.",
        )

    def _bounds(self, params: Params) -> tuple[float, float]:
        return get_number(params, "min"), get_number(params, "max", default=1.0)

    def calculate_mean(self, params: Params) -> float:
        low, high = self._bounds(params)
        return (low + high) / 2

    def calculate_std_dev(self, params: Params) -> float:
        low, high = self._bounds(params)
        return (high - low) / math.sqrt(12)

    def calculate_pdf(self, x: float, params: Params) -> float:
        low, high = self._bounds(params)
        if low <= x <= high:
            return 1 / (high - low)
        return 0.0

    def calculate_cdf(self, x: float, params: Params) -> float:
        low, high = self._bounds(params)
        if x <= low:
            return 0.0
        if x >= high:
            return 1.0
        return (x - low) / (high - low)

    def calculate_quantile(self, p: float, params: Params) -> float:
        low, high = self._bounds(params)
        return low + p * (high - low)

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        low, high = self._bounds(params)
        padding = (high - low) * 0.1
        return generate_range(low - padding, high + padding, count)

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        low, high = self._bounds(params)
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        candidates += [
            (low, "Min"),
            (high, "Max"),
            (mean, "Mean"),
            (mean + std_dev, "+1σ"),
            (mean - std_dev, "-1σ"),
        ]
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        if current_value is not None:
            spread = 0.1 * abs(current_value) or 1.0
            default_min, default_max = current_value - spread, current_value + spread
        else:
            default_min, default_max = 0.0, 10.0

        return [
            ParameterDescriptor(
                name="value",
                description="Default value",
                label="Mean",
                tooltip="Default value",
                default_value=current_value
                if current_value is not None
                else (default_min + default_max) / 2,
            ),
            ParameterDescriptor(
                name="min",
                description="Minimum value",
                label="Minimum",
                tooltip="Smallest possible value",
                default_value=default_min,
            ),
            ParameterDescriptor(
                name="max",
                description="Maximum value",
                label="Maximum",
                tooltip="Largest possible value",
                default_value=default_max,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        low, high = self._bounds(params)
        return rng.uniform(low=low, high=high, size=size)
