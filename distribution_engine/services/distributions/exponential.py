"""Exponential distribution with rate ``lambda``."""

from __future__ import annotations

import math

import numpy as np

from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import BaseDistribution, Params, validation_result
from distribution_engine.utils.params import get_number, get_param, is_number


class ExponentialDistribution(BaseDistribution):
    """Exponential distribution: mean = std dev = 1/lambda."""

    name = "exponential"
    display_name = "Exponential Distribution"
    description = "Models the time between independent events occurring at a constant average rate."
    applications = (
        "Used for modeling waiting times and the lifetime of components with constant failure rate."
    )
    examples = (
        "Time between failures for simple components, inter-arrival times for random events."
    )
    non_negative_support = True
    min_points_required = 4

    def validate(self, params: Params) -> ValidationResult:
        rate = get_param(params, "lambda")
        if rate is None:
            return ValidationResult.fail(
                "Lambda parameter is required",
                details="The exponential distribution requires a lambda (rate) parameter.",
            )
        if not is_number(rate) or rate <= 0:
            return ValidationResult.fail(
                "Lambda parameter must be positive",
                details="The exponential distribution's lambda parameter must be greater than zero.",
            )
        return ValidationResult.ok()

    def _rate(self, params: Params) -> float:
        return get_number(params, "lambda", default=1.0)

    def calculate_mean(self, params: Params) -> float:
        return 1 / self._rate(params)

    def calculate_std_dev(self, params: Params) -> float:
        return 1 / self._rate(params)

    def calculate_median(self, params: Params) -> float:
        return math.log(2) / self._rate(params)

    def calculate_mode(self, params: Params) -> float:
        return 0.0

    def calculate_pdf(self, x: float, params: Params) -> float:
        if x < 0:
            return 0.0
        rate = self._rate(params)
        return rate * math.exp(-rate * x)

    def calculate_cdf(self, x: float, params: Params) -> float:
        if x <= 0:
            return 0.0
        return 1 - math.exp(-self._rate(params) * x)

    def calculate_quantile(self, p: float, params: Params) -> float:
        if p <= 0:
            return 0.0
        if p >= 1:
            return math.inf
        return -math.log(1 - p) / self._rate(params)

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        mean = self.calculate_mean(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        candidates += [
            (0.0, "Peak"),
            (mean, "Mean"),
            (self.calculate_median(params), "Median"),
            (mean + self.calculate_std_dev(params), "+1σ"),
        ]
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        has_value = current_value is not None and current_value > 0
        return [
            ParameterDescriptor(
                name="value",
                description="Mean value",
                label="Value",
                tooltip="Mean value of the distribution (1/lambda)",
                min=0,
                default_value=current_value if has_value else 1,
            ),
            ParameterDescriptor(
                name="lambda",
                description="Rate parameter",
                label="Lambda",
                tooltip="Rate parameter of the exponential distribution",
                min=0.001,
                step=0.01,
                default_value=round(1 / current_value, 6) if has_value else 1,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        return rng.exponential(scale=1 / self._rate(params), size=size)
