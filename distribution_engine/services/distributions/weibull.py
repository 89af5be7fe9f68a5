"""Weibull distribution, the usual model for wind speeds and component lifetimes."""

from __future__ import annotations

import math

import numpy as np
from scipy import special, stats

from distribution_engine.models.distribution import ParameterDescriptor, ValidationResult
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    generate_range,
    require_positive,
    validation_result,
)
from distribution_engine.utils.params import get_number, get_param, is_number


class WeibullDistribution(BaseDistribution):
    """Weibull distribution with positive ``scale`` and ``shape``."""

    name = "weibull"
    display_name = "Weibull Distribution"
    description = "Versatile distribution commonly used in reliability and wind speed modeling."
    applications = "The standard for modeling wind speed distributions and component reliability."
    examples = "Wind speed distributions, component failure rates, turbine lifetime modeling."
    non_negative_support = True
    min_points_required = 6

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        require_positive(params, "scale", "Scale parameter", issues)
        require_positive(params, "shape", "Shape parameter", issues)
        return validation_result(
            issues, "The Weibull distribution requires positive scale and shape parameters."
        )

    def _scale_shape(self, params: Params) -> tuple[float, float]:
        return get_number(params, "scale", default=1.0), get_number(params, "shape", default=2.0)

    def calculate_mean(self, params: Params) -> float:
        scale, shape = self._scale_shape(params)
        return scale * float(special.gamma(1 + 1 / shape))

    def calculate_std_dev(self, params: Params) -> float:
        scale, shape = self._scale_shape(params)
        g1 = float(special.gamma(1 + 1 / shape))
        g2 = float(special.gamma(1 + 2 / shape))
        return math.sqrt(max(scale * scale * (g2 - g1 * g1), 0.0))

    def calculate_mode(self, params: Params) -> float:
        scale, shape = self._scale_shape(params)
        if shape <= 1:
            return 0.0
        return scale * ((shape - 1) / shape) ** (1 / shape)

    def calculate_pdf(self, x: float, params: Params) -> float:
        if x <= 0:
            return 0.0
        scale, shape = self._scale_shape(params)
        # log space keeps x ** (shape - 1) from overflowing at large x
        return float(np.exp(stats.weibull_min.logpdf(x, shape, scale=scale)))

    def calculate_cdf(self, x: float, params: Params) -> float:
        if x <= 0:
            return 0.0
        scale, shape = self._scale_shape(params)
        return float(stats.weibull_min.cdf(x, shape, scale=scale))

    def calculate_quantile(self, p: float, params: Params) -> float:
        if p <= 0:
            return 0.0
        if p >= 1:
            return math.inf
        scale, shape = self._scale_shape(params)
        return scale * (-math.log(1 - p)) ** (1 / shape)

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        # out to the 99th percentile
        return generate_range(0.0, self.calculate_quantile(0.99, params), count)

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        _, shape = self._scale_shape(params)
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        if shape > 1:
            candidates.append((self.calculate_mode(params), "Mode"))
        candidates += [
            (mean, "Mean"),
            (mean + std_dev, "+1σ"),
            (max(0.001, mean - std_dev), "-1σ"),
        ]
        return candidates

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        default_shape = 2.0
        if current_value is not None and current_value > 0:
            # mean of the default-shape weibull matches the current value
            default_scale = current_value / float(special.gamma(1 + 1 / default_shape))
        else:
            default_scale = 1.0

        return [
            ParameterDescriptor(
                name="scale",
                description="6-12 for wind speeds (m/s)",
                label="Scale (λ)",
                tooltip="Scale parameter of the Weibull distribution",
                min=0.001,
                step=0.1,
                default_value=round(default_scale, 4),
            ),
            ParameterDescriptor(
                name="shape",
                description=(
                    "1.5-2.5 for wind speeds (higher for less variability), "
                    "1.5-3.0 for component failures"
                ),
                label="Shape (k)",
                tooltip="Shape parameter of the Weibull distribution",
                min=0.001,
                step=0.1,
                default_value=default_shape,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        scale, shape = self._scale_shape(params)
        return scale * rng.weibull(shape, size=size)
