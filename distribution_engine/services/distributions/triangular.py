"""Triangular distribution defined by minimum, mode and maximum."""

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


class TriangularDistribution(BaseDistribution):
    """Triangular distribution with a piecewise-linear density peaking at ``mode``."""

    name = "triangular"
    display_name = "Triangular Distribution"
    description = "Simple distribution defined by minimum, maximum, and most likely value."
    applications = (
        "Useful when exact distribution is unknown but minimum, maximum, and most likely "
        "values can be estimated."
    )
    examples = "Project durations, cost estimates with best/worst case scenarios, and expert opinions."
    min_points_required = 3

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        require_number(params, "min", "Minimum value", issues)
        require_number(params, "mode", "Mode value", issues)
        require_number(params, "max", "Maximum value", issues)

        if not issues:
            low, mode, high = params["min"], params["mode"], params["max"]
            if low > mode:
                issues.append("Minimum must be less than or equal to mode")
            if mode > high:
                issues.append("Mode must be less than or equal to maximum")
            if low >= high:
                issues.append("Minimum must be less than maximum")

        return validation_result(
            issues,
            "The triangular distribution requires minimum, mode, and maximum values that "
            "satisfy: min ≤ mode ≤ max.",
        )

    def _bounds(self, params: Params) -> tuple[float, float, float]:
        low = get_number(params, "min")
        high = get_number(params, "max", default=1.0)
        mode = get_number(params, "mode", default=(low + high) / 2)
        return low, mode, high

    def calculate_mean(self, params: Params) -> float:
        return sum(self._bounds(params)) / 3

    def calculate_std_dev(self, params: Params) -> float:
        a, c, b = self._bounds(params)
        variance = (a * a + b * b + c * c - a * b - a * c - b * c) / 18
        return math.sqrt(max(variance, 0.0))

    def calculate_mode(self, params: Params) -> float:
        return self._bounds(params)[1]

    def calculate_pdf(self, x: float, params: Params) -> float:
        low, mode, high = self._bounds(params)
        if x < low or x > high:
            return 0.0
        width = high - low
        if x < mode:
            return 2 * (x - low) / (width * (mode - low))
        if x == mode:
            return 2 / width
        return 2 * (high - x) / (width * (high - mode))

    def calculate_cdf(self, x: float, params: Params) -> float:
        low, mode, high = self._bounds(params)
        if x <= low:
            return 0.0
        if x >= high:
            return 1.0
        width = high - low
        if x <= mode:
            return (x - low) ** 2 / (width * (mode - low))
        return 1 - (high - x) ** 2 / (width * (high - mode))

    def calculate_quantile(self, p: float, params: Params) -> float:
        low, mode, high = self._bounds(params)
        width = high - low
        # CDF value at the mode selects the branch
        split = (mode - low) / width
        if p < split:
            return low + math.sqrt(p * width * (mode - low))
        return high - math.sqrt((1 - p) * width * (high - mode))

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        low, _, high = self._bounds(params)
        padding = (high - low) * 0.1
        return generate_range(low - padding, high + padding, count)

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        low, mode, high = self._bounds(params)
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        candidates += [
            (low, "Min"),
            (mode, "Mode"),
            (high, "Max"),
            (mean, "Mean"),
            (self.calculate_median(params), "Median"),
        ]
        if mean + std_dev <= high:
            candidates.append((mean + std_dev, "+1σ"))
        if mean - std_dev >= low:
            candidates.append((mean - std_dev, "-1σ"))
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        if current_value is not None:
            spread = max(1.0, 0.5 * abs(current_value))
            default_min, default_mode, default_max = (
                current_value - spread,
                current_value,
                current_value + spread,
            )
        else:
            default_min, default_mode, default_max = 0.0, 5.0, 10.0

        return [
            ParameterDescriptor(
                name="value",
                description="Default value",
                label="Value",
                tooltip="Default value",
                default_value=current_value if current_value is not None else default_mode,
            ),
            ParameterDescriptor(
                name="min",
                description="Minimum value",
                label="Minimum",
                tooltip="Smallest possible value",
                default_value=default_min,
            ),
            ParameterDescriptor(
                name="mode",
                description="Mode (most likely value)",
                label="Mode",
                tooltip="Most likely value",
                default_value=default_mode,
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
        low, mode, high = self._bounds(params)
        return rng.triangular(left=low, mode=mode, right=high, size=size)
