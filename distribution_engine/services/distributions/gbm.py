"""Geometric Brownian motion observed at a fixed horizon.

At time T the value is lognormal with

    mu    = ln(S0) + (drift - volatility**2 / 2) * T
    sigma = volatility * sqrt(T)

where drift and volatility are entered as percentages.
"""

from __future__ import annotations

import math

import numpy as np

from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    validation_result,
)
from distribution_engine.services.distributions.lognormal import (
    lognormal_cdf,
    lognormal_moments,
    lognormal_pdf,
    lognormal_quantile,
    lognormal_range,
    safe_exp,
)
from distribution_engine.utils.params import get_number, get_param, is_number

DEFAULT_INITIAL_VALUE = 100.0
DEFAULT_DRIFT = 5.0
DEFAULT_VOLATILITY = 20.0
DEFAULT_TIME_STEP = 1.0


class GBMDistribution(BaseDistribution):
    """Terminal distribution of a geometric Brownian motion."""

    name = "gbm"
    display_name = "Geometric Brownian Motion"
    description = "A continuous-time stochastic process used in financial modeling."
    applications = (
        "Modeling stock prices, asset values, and commodity prices that exhibit both drift "
        "and volatility."
    )
    examples = "Electricity price forecasting, asset value modeling, stock price simulation."
    non_negative_support = True
    min_points_required = 8

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        initial = get_param(params, "value")
        if initial is None:
            issues.append("Starting value is required")
        elif not is_number(initial) or initial <= 0:
            issues.append("Starting value must be positive")

        drift = get_param(params, "drift")
        if drift is not None and not is_number(drift):
            issues.append("Drift must be a number")

        volatility = get_param(params, "volatility")
        if volatility is None:
            issues.append("Volatility parameter is required")
        elif not is_number(volatility) or volatility < 0:
            issues.append("Volatility cannot be negative")

        time_step = get_param(params, "timeStep")
        if time_step is None:
            issues.append("Time step parameter is required")
        elif not is_number(time_step) or time_step <= 0:
            issues.append("Time step must be positive")

        return validation_result(
            issues,
            "The GBM distribution requires a positive initial value, a non-negative "
            "volatility, and a positive time step.",
        )

    def _inputs(self, params: Params) -> tuple[float, float, float, float]:
        """(S0, drift, volatility, T) with percentages converted to fractions."""
        return (
            get_number(params, "value", default=DEFAULT_INITIAL_VALUE),
            get_number(params, "drift") / 100,
            get_number(params, "volatility", default=DEFAULT_VOLATILITY) / 100,
            get_number(params, "timeStep", default=DEFAULT_TIME_STEP),
        )

    def log_params(self, params: Params) -> tuple[float, float]:
        """Lognormal (mu, sigma) of the value at the horizon."""
        initial, drift, volatility, horizon = self._inputs(params)
        mu = math.log(initial) + (drift - 0.5 * volatility * volatility) * horizon
        sigma = volatility * math.sqrt(horizon)
        return mu, sigma

    def calculate_mean(self, params: Params) -> float:
        initial, drift, _, horizon = self._inputs(params)
        return initial * safe_exp(drift * horizon)

    def calculate_std_dev(self, params: Params) -> float:
        initial, drift, volatility, horizon = self._inputs(params)
        variance = (
            initial * initial
            * safe_exp(2 * drift * horizon)
            * (safe_exp(volatility * volatility * horizon) - 1)
        )
        return math.sqrt(variance)

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
        initial, drift, volatility, horizon = self._inputs(params)
        mu, sigma = self.log_params(params)
        moments = lognormal_moments(mu, sigma)
        std_dev = self.calculate_std_dev(params)
        return {
            "initial_value": initial,
            "drift": drift * 100,
            "volatility": volatility * 100,
            "time_step": horizon,
            "mean": self.calculate_mean(params),
            "median": moments["median"],
            "mode": moments["mode"],
            "std_dev": std_dev,
            "variance": std_dev * std_dev,
        }

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        mu, sigma = self.log_params(params)
        if sigma <= 0:
            return super().default_x_values(params, count)
        return lognormal_range(mu, sigma, count)

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        initial = self._inputs(params)[0]
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        candidates = [
            (initial, "Initial"),
            (mean, "Mean"),
            (self.calculate_median(params), "Median"),
            (self.calculate_mode(params), "Mode"),
            (mean + std_dev, "+1σ"),
        ]
        minus = max(mean - std_dev, 0.01 * mean)
        if minus > 0.01 * initial:
            candidates.append((minus, "-1σ"))
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        has_value = current_value is not None and current_value > 0
        return [
            ParameterDescriptor(
                name="value",
                description="Initial value",
                label="Initial Value",
                tooltip="Starting value at time zero",
                min=0.001,
                step=1,
                default_value=current_value if has_value else DEFAULT_INITIAL_VALUE,
            ),
            ParameterDescriptor(
                name="drift",
                description="Drift rate (μ)",
                required=False,
                field_type="percentage",
                label="Drift (%)",
                tooltip="Annual growth rate in percent",
                step=0.1,
                default_value=DEFAULT_DRIFT,
            ),
            ParameterDescriptor(
                name="volatility",
                description="Volatility (σ)",
                field_type="percentage",
                label="Volatility (%)",
                tooltip="Annual volatility in percent",
                min=0,
                step=0.1,
                default_value=DEFAULT_VOLATILITY,
            ),
            ParameterDescriptor(
                name="timeStep",
                description="Time step",
                label="Time Step",
                tooltip="Number of time units to project forward",
                min=0.001,
                step=0.1,
                default_value=DEFAULT_TIME_STEP,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        mu, sigma = self.log_params(params)
        return rng.lognormal(mean=mu, sigma=sigma, size=size)
