"""Poisson distribution; the quantile is found by summing the PMF."""

from __future__ import annotations

import math

import numpy as np
from scipy import stats

from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import BaseDistribution, Params
from distribution_engine.services.numerics import summation_quantile
from distribution_engine.utils.params import get_number, get_param, is_number


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


class PoissonDistribution(BaseDistribution):
    """Poisson distribution of event counts with mean ``lambda``.

    The PMF is evaluated at ``round(x)`` and the CDF at ``floor(x)`` so the
    family can be plotted on a continuous grid.
    """

    name = "poisson"
    display_name = "Poisson Distribution"
    description = "Models the number of events occurring in a fixed time interval."
    applications = "Used for modeling the number of independent events occurring at a constant rate."
    examples = "Number of failures in a time period, number of maintenance calls per month."
    non_negative_support = True
    min_points_required = 4

    def validate(self, params: Params) -> ValidationResult:
        rate = get_param(params, "lambda")
        if rate is None:
            return ValidationResult.fail(
                "Lambda parameter is required",
                details="The Poisson distribution requires a lambda (mean) parameter.",
            )
        if not is_number(rate) or rate <= 0:
            return ValidationResult.fail(
                "Lambda parameter must be positive",
                details="The Poisson distribution's lambda parameter must be greater than zero.",
            )
        return ValidationResult.ok()

    def _rate(self, params: Params) -> float:
        return get_number(params, "lambda", default=1.0)

    def calculate_mean(self, params: Params) -> float:
        return self._rate(params)

    def calculate_std_dev(self, params: Params) -> float:
        return math.sqrt(self._rate(params))

    def calculate_mode(self, params: Params) -> float:
        return float(math.floor(self._rate(params)))

    def calculate_pdf(self, x: float, params: Params) -> float:
        if x < 0 or math.isinf(x):
            return 0.0
        return float(stats.poisson.pmf(round_half_up(x), self._rate(params)))

    def calculate_cdf(self, x: float, params: Params) -> float:
        if x < 0:
            return 0.0
        if math.isinf(x):
            return 1.0
        return float(stats.poisson.cdf(math.floor(x), self._rate(params)))

    def calculate_quantile(self, p: float, params: Params) -> float:
        if p >= 1:
            return math.inf
        rate = self._rate(params)
        return float(summation_quantile(math.exp(-rate), lambda k: rate / k, p))

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        # integer support from 0 to mean + 4 sigma
        rate = self._rate(params)
        upper = math.ceil(rate + 4 * math.sqrt(rate))
        return [float(k) for k in range(upper + 1)]

    def key_point_scale(self, params: Params) -> float:
        # distinct integers are always distinct markers
        return 1.0

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        rate = self._rate(params)
        mode = self.calculate_mode(params)
        std_dev = self.calculate_std_dev(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        candidates.append((mode, "Mode"))
        # integer lambda has two modes
        if rate == mode and mode >= 1:
            candidates.append((mode - 1, "Mode"))
        candidates += [
            (rate, "Mean"),
            (rate + std_dev, "+1σ"),
            (max(0.0, rate - std_dev), "-1σ"),
        ]
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        has_value = current_value is not None and current_value > 0
        default_lambda = current_value if has_value else 3.0
        return [
            ParameterDescriptor(
                name="value",
                description="Default value",
                label="Value",
                tooltip="Default value",
                min=0,
                default_value=current_value if has_value else default_lambda,
            ),
            ParameterDescriptor(
                name="lambda",
                description="Lambda (mean)",
                label="Lambda",
                tooltip="Mean number of events in the specified interval",
                min=0.001,
                step=0.1,
                default_value=default_lambda,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        return rng.poisson(lam=self._rate(params), size=size)
