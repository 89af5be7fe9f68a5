"""Normal distribution with the standard deviation given as a percentage of the mean."""

from __future__ import annotations

import numpy as np
from scipy import stats

from distribution_engine.core.config import settings
from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    require_positive,
    validation_result,
)
from distribution_engine.utils.params import get_number


def normal_sigma(mean: float, std_dev_percent: float) -> float:
    """Absolute sigma from a percent-of-mean standard deviation."""
    return abs(mean) * std_dev_percent / 100


class NormalDistribution(BaseDistribution):
    """Normal (Gaussian) distribution.

    ``value`` is the mean and ``stdDev`` is a percentage of it, so
    ``value=200, stdDev=10`` means sigma = 20.
    """

    name = "normal"
    display_name = "Normal Distribution"
    description = "Symmetrical bell curve representing values clustered around a mean."
    applications = (
        "Modeling natural phenomena, measurement errors, and averages of large samples "
        "regardless of the underlying distribution."
    )
    examples = "Average wind speeds, measurement errors, aggregated financial metrics."
    min_points_required = 5

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        require_positive(params, "stdDev", "Standard deviation", issues)
        return validation_result(
            issues, "The normal distribution requires a positive standard deviation."
        )

    def _loc_scale(self, params: Params) -> tuple[float, float]:
        mean = get_number(params, "value")
        sigma = normal_sigma(mean, get_number(params, "stdDev", default=10))
        return mean, max(sigma, settings.min_scale)

    def calculate_mean(self, params: Params) -> float:
        return get_number(params, "value")

    def calculate_std_dev(self, params: Params) -> float:
        return normal_sigma(get_number(params, "value"), get_number(params, "stdDev", default=10))

    def calculate_median(self, params: Params) -> float:
        return self.calculate_mean(params)

    def calculate_mode(self, params: Params) -> float:
        return self.calculate_mean(params)

    def calculate_pdf(self, x: float, params: Params) -> float:
        mean, sigma = self._loc_scale(params)
        return float(stats.norm.pdf(x, loc=mean, scale=sigma))

    def calculate_cdf(self, x: float, params: Params) -> float:
        mean, sigma = self._loc_scale(params)
        return float(stats.norm.cdf(x, loc=mean, scale=sigma))

    def calculate_quantile(self, p: float, params: Params) -> float:
        mean, sigma = self._loc_scale(params)
        return float(stats.norm.ppf(p, loc=mean, scale=sigma))

    def calculate_stats(self, params: Params) -> dict[str, float]:
        result = super().calculate_stats(params)
        result["std_dev_percent"] = get_number(params, "stdDev", default=10)
        return result

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        return [(mean, "Mean"), (mean + std_dev, "+1σ"), (mean - std_dev, "-1σ")]

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        return [
            ParameterDescriptor(
                name="value",
                description="Mean value of the distribution",
                label="Mean",
                tooltip="Center point of the normal distribution",
                default_value=current_value if current_value is not None else 0,
            ),
            ParameterDescriptor(
                name="stdDev",
                description="Standard deviation as percentage of mean",
                label="Std Dev (%)",
                tooltip="Standard deviation as percentage of the mean value",
                min=0.001,
                step=0.1,
                default_value=10,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        mean = self.calculate_mean(params)
        return rng.normal(loc=mean, scale=self.calculate_std_dev(params), size=size)
