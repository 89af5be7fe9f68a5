"""Lognormal distribution parameterized by log-mean and log-std."""

from __future__ import annotations

import math
import sys

import numpy as np
from scipy import stats

from distribution_engine.core.config import settings
from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    generate_range,
    validation_result,
)
from distribution_engine.utils.params import get_number, get_param, is_number


def safe_exp(x: float) -> float:
    """math.exp that saturates at inf for very large exponents."""
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def lognormal_range(mu: float, sigma: float, count: int | None = None) -> list[float]:
    """Grid over exp(mu +/- 4 sigma), capped at the largest finite float."""
    high = min(safe_exp(mu + 4 * sigma), sys.float_info.max)
    low = min(max(0.01, safe_exp(mu - 4 * sigma)), high)
    return generate_range(low, high, count)


def lognormal_pdf(x: float, mu: float, sigma: float) -> float:
    if x <= 0:
        return 0.0
    return float(stats.lognorm.pdf(x, s=max(sigma, settings.min_scale), scale=safe_exp(mu)))


def lognormal_cdf(x: float, mu: float, sigma: float) -> float:
    if x <= 0:
        return 0.0
    return float(stats.lognorm.cdf(x, s=max(sigma, settings.min_scale), scale=safe_exp(mu)))


def lognormal_quantile(p: float, mu: float, sigma: float) -> float:
    return float(stats.lognorm.ppf(p, s=max(sigma, settings.min_scale), scale=safe_exp(mu)))


def lognormal_moments(mu: float, sigma: float) -> dict[str, float]:
    """Mean, median, mode and variance of a lognormal with log-parameters mu, sigma."""
    sigma_sq = sigma * sigma
    variance = (safe_exp(sigma_sq) - 1) * safe_exp(2 * mu + sigma_sq)
    return {
        "mean": safe_exp(mu + sigma_sq / 2),
        "median": safe_exp(mu),
        "mode": safe_exp(mu - sigma_sq),
        "variance": variance,
        "std_dev": math.sqrt(variance),
    }


def lognormal_key_points(moments: dict[str, float], value: float | None) -> list[tuple[float, str]]:
    candidates = []
    if value is not None:
        candidates.append((value, "Value"))
    candidates.append((moments["mode"], "Mode"))
    candidates.append((moments["median"], "Median"))
    candidates.append((moments["mean"], "Mean"))
    candidates.append((moments["mean"] + moments["std_dev"], "+1σ"))
    candidates.append((max(0.001, moments["mean"] - moments["std_dev"]), "-1σ"))
    return candidates


class LogNormalDistribution(BaseDistribution):
    """Lognormal distribution.

    ``mu``/``μ`` is the mean of ln(X) and ``sigma``/``σ`` its standard deviation.
    When no log-mean is given, it is derived from ``value`` (the median).
    """

    name = "lognormal"
    display_name = "Lognormal Distribution"
    description = (
        "Right-skewed distribution for positive values, useful for modeling "
        "multiplicative processes."
    )
    applications = "Ideal for modeling prices, costs, or physical quantities that can't be negative."
    examples = "Repair costs, component lifetimes, project delays, market prices."
    non_negative_support = True
    min_points_required = 5

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        mu = get_param(params, "mu", get_param(params, "μ"))
        value = get_param(params, "value")
        if mu is None and value is None:
            issues.append("Mu (log-mean) value is required")
        elif mu is not None and not is_number(mu):
            issues.append("Mu (log-mean) must be a number")
        elif mu is None and not (is_number(value) and value > 0):
            issues.append("Median value must be positive when mu is not given")

        sigma = get_param(params, "sigma", get_param(params, "σ"))
        if sigma is None:
            issues.append("Sigma (log-std) is required")
        elif not is_number(sigma) or sigma <= 0:
            issues.append("Sigma (log-std) must be positive")

        return validation_result(
            issues,
            "The lognormal distribution requires a mu (log-mean) parameter and a "
            "positive sigma (log-std) parameter.",
        )

    def log_params(self, params: Params) -> tuple[float, float]:
        """Resolve (mu, sigma) from the parameter aliases."""
        value = get_number(params, "value")
        fallback_mu = math.log(value) if value > 0 else 0.0
        mu = get_number(params, "mu", "μ", default=fallback_mu)
        sigma = get_number(params, "sigma", "σ", default=0.5)
        return mu, sigma

    def calculate_mean(self, params: Params) -> float:
        mu, sigma = self.log_params(params)
        return safe_exp(mu + sigma * sigma / 2)

    def calculate_std_dev(self, params: Params) -> float:
        return lognormal_moments(*self.log_params(params))["std_dev"]

    def calculate_median(self, params: Params) -> float:
        mu, _ = self.log_params(params)
        return safe_exp(mu)

    def calculate_mode(self, params: Params) -> float:
        mu, sigma = self.log_params(params)
        return safe_exp(mu - sigma * sigma)

    def calculate_pdf(self, x: float, params: Params) -> float:
        return lognormal_pdf(x, *self.log_params(params))

    def calculate_cdf(self, x: float, params: Params) -> float:
        return lognormal_cdf(x, *self.log_params(params))

    def calculate_quantile(self, p: float, params: Params) -> float:
        return lognormal_quantile(p, *self.log_params(params))

    def calculate_stats(self, params: Params) -> dict[str, float]:
        mu, sigma = self.log_params(params)
        return {"mu": mu, "sigma": sigma, **lognormal_moments(mu, sigma)}

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        mu, sigma = self.log_params(params)
        return lognormal_range(mu, sigma, count)

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        value = get_param(params, "value")
        return lognormal_key_points(
            lognormal_moments(*self.log_params(params)), float(value) if is_number(value) else None
        )

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        has_value = current_value is not None and current_value > 0
        default_mu = math.log(current_value) if has_value else 0.0
        return [
            ParameterDescriptor(
                name="value",
                description="Median value",
                label="Median",
                tooltip="Median value of the distribution",
                default_value=current_value if has_value else 1,
            ),
            ParameterDescriptor(
                name="mu",
                description="Log-mean (mu)",
                label="Mu (Log-mean)",
                tooltip="Mean of the logarithm of the variable",
                step=0.01,
                default_value=round(default_mu, 4),
            ),
            ParameterDescriptor(
                name="sigma",
                description="Log-std (sigma)",
                label="Sigma (Log-std)",
                tooltip="Standard deviation of the logarithm of the variable",
                min=0,
                step=0.01,
                default_value=0.5,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        mu, sigma = self.log_params(params)
        return rng.lognormal(mean=mu, sigma=sigma, size=size)
