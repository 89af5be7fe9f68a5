"""Gamma distribution; the quantile has no closed form and is found by bisection."""

from __future__ import annotations

import math

import numpy as np
from scipy import special, stats

from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    require_positive,
    validation_result,
)
from distribution_engine.services.numerics import bisect_quantile
from distribution_engine.utils.params import get_number, get_param, is_number


class GammaDistribution(BaseDistribution):
    """Gamma distribution with shape (α) and scale (β)."""

    name = "gamma"
    display_name = "Gamma Distribution"
    description = "Flexible two-parameter distribution for positive-valued random variables."
    applications = (
        "Used for modeling waiting times, rainfall amounts, and other quantities that are "
        "always positive and may be skewed."
    )
    examples = "Repair times, component lifetime, precipitation levels."
    non_negative_support = True
    min_points_required = 6

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        require_positive(params, "shape", "Shape parameter (α)", issues)
        require_positive(params, "scale", "Scale parameter (β)", issues)
        return validation_result(
            issues, "The gamma distribution requires positive shape (α) and scale (β) parameters."
        )

    def _shape_scale(self, params: Params) -> tuple[float, float]:
        return get_number(params, "shape", default=2.0), get_number(params, "scale", default=1.0)

    def calculate_mean(self, params: Params) -> float:
        shape, scale = self._shape_scale(params)
        return shape * scale

    def calculate_std_dev(self, params: Params) -> float:
        shape, scale = self._shape_scale(params)
        return math.sqrt(shape) * scale

    def calculate_mode(self, params: Params) -> float:
        shape, scale = self._shape_scale(params)
        return (shape - 1) * scale if shape >= 1 else 0.0

    def calculate_pdf(self, x: float, params: Params) -> float:
        if x <= 0:
            return 0.0
        shape, scale = self._shape_scale(params)
        return float(stats.gamma.pdf(x, a=shape, scale=scale))

    def calculate_cdf(self, x: float, params: Params) -> float:
        if x <= 0:
            return 0.0
        shape, scale = self._shape_scale(params)
        return float(special.gammainc(shape, x / scale))

    def calculate_quantile(self, p: float, params: Params) -> float:
        return bisect_quantile(
            lambda x: self.calculate_cdf(x, params), p, self.calculate_mean(params)
        )

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        shape, _ = self._shape_scale(params)
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        candidates.append((mean, "Mean"))
        if shape > 1:
            candidates.append((self.calculate_mode(params), "Mode"))
        candidates += [
            (mean + std_dev, "+1σ"),
            (max(0.001, mean - std_dev), "-1σ"),
        ]
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        default_shape = 2.0
        has_value = current_value is not None and current_value > 0
        default_scale = current_value / default_shape if has_value else 1.0
        return [
            ParameterDescriptor(
                name="value",
                description="Default value",
                label="Mean",
                tooltip="Default value (mean of the distribution)",
                min=0,
                default_value=current_value if has_value else default_shape * default_scale,
            ),
            ParameterDescriptor(
                name="scale",
                description="Scale Parameter (β)",
                label="Scale (β)",
                tooltip="Scale parameter of the Gamma distribution",
                min=0.001,
                step=0.1,
                default_value=default_scale,
            ),
            ParameterDescriptor(
                name="shape",
                description="Shape Parameter (α)",
                label="Shape (α)",
                tooltip="Shape parameter of the Gamma distribution",
                min=0.001,
                step=0.1,
                default_value=default_shape,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        shape, scale = self._shape_scale(params)
        return rng.gamma(shape=shape, scale=scale, size=size)
