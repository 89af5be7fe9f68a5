"""Kaimal wind-turbulence model.

For the value axis the wind speed is approximated as
Normal(meanWindSpeed, meanWindSpeed * turbulenceIntensity / 100). The Kaimal
spectrum itself is exposed separately:

    S(f) = 4 f' / (1 + 6 f') ** (5/3),   f' = f * kaimalScale / u*
    u* = meanWindSpeed * 0.4 / ln(hubHeight / roughnessLength)
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from scipy import stats

from distribution_engine.core.config import KARMAN_CONSTANT, settings
from distribution_engine.models.distribution import (
    KeyPoint,
    ParameterDescriptor,
    SpectralDensityResult,
    ValidationResult,
)
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    validation_result,
)
from distribution_engine.utils.params import get_number, get_param, is_number

DEFAULT_WIND_SPEED = 10.0
DEFAULT_TURBULENCE_INTENSITY = 10.0
DEFAULT_ROUGHNESS_LENGTH = 0.03
DEFAULT_KAIMAL_SCALE = 8.1
DEFAULT_HUB_HEIGHT = 105.0


class KaimalDistribution(BaseDistribution):
    """Wind speed at hub height with Kaimal turbulence (IEC 61400-1)."""

    name = "kaimal"
    display_name = "Kaimal Distribution"
    description = "Models wind turbulence using the Kaimal spectrum (IEC 61400-1 standard)."
    applications = "Used in wind engineering for modeling turbulence intensity and load calculations."
    examples = "Wind turbulence modeling, load calculations for turbine components."
    non_negative_support = True
    min_points_required = 5

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        speed = get_param(params, "meanWindSpeed", get_param(params, "value"))
        if speed is None:
            issues.append("Mean wind speed is required")
        elif not is_number(speed) or speed <= 0:
            issues.append("Mean wind speed must be positive")

        intensity = get_param(params, "turbulenceIntensity")
        if intensity is None:
            issues.append("Turbulence intensity is required")
        elif not is_number(intensity) or intensity <= 0:
            issues.append("Turbulence intensity must be positive")

        roughness = get_param(params, "roughnessLength", DEFAULT_ROUGHNESS_LENGTH)
        hub_height = get_param(params, "hubHeight", DEFAULT_HUB_HEIGHT)
        if not is_number(roughness) or roughness <= 0:
            issues.append("Roughness length must be positive")
        elif not is_number(hub_height) or hub_height <= roughness:
            issues.append("Hub height must be greater than the roughness length")

        return validation_result(
            issues,
            "The Kaimal distribution requires positive mean wind speed and turbulence "
            "intensity parameters.",
        )

    def mean_wind_speed(self, params: Params) -> float:
        return get_number(params, "meanWindSpeed", "value", default=DEFAULT_WIND_SPEED)

    def calculate_mean(self, params: Params) -> float:
        return self.mean_wind_speed(params)

    def calculate_std_dev(self, params: Params) -> float:
        intensity = get_number(params, "turbulenceIntensity", default=DEFAULT_TURBULENCE_INTENSITY)
        return self.mean_wind_speed(params) * intensity / 100

    def calculate_median(self, params: Params) -> float:
        return self.mean_wind_speed(params)

    def calculate_mode(self, params: Params) -> float:
        return self.mean_wind_speed(params)

    def _scale(self, params: Params) -> float:
        return max(self.calculate_std_dev(params), settings.min_scale)

    def calculate_pdf(self, x: float, params: Params) -> float:
        return float(stats.norm.pdf(x, loc=self.mean_wind_speed(params), scale=self._scale(params)))

    def calculate_cdf(self, x: float, params: Params) -> float:
        return float(stats.norm.cdf(x, loc=self.mean_wind_speed(params), scale=self._scale(params)))

    def calculate_quantile(self, p: float, params: Params) -> float:
        x = float(stats.norm.ppf(p, loc=self.mean_wind_speed(params), scale=self._scale(params)))
        # wind speed cannot be negative
        return max(0.0, x)

    def friction_velocity(self, params: Params) -> float:
        """u* = U * kappa / ln(hubHeight / roughnessLength)."""
        roughness = get_number(params, "roughnessLength", default=DEFAULT_ROUGHNESS_LENGTH)
        hub_height = get_number(params, "hubHeight", default=DEFAULT_HUB_HEIGHT)
        return self.mean_wind_speed(params) * KARMAN_CONSTANT / math.log(hub_height / roughness)

    def calculate_spectral_density(self, params: Params, frequency: float) -> float:
        """Normalized Kaimal spectral density at ``frequency`` (Hz); 0 for f <= 0."""
        if frequency <= 0:
            return 0.0
        scale = get_number(params, "scale", default=DEFAULT_KAIMAL_SCALE)
        reduced = frequency * scale / self.friction_velocity(params)
        return 4 * reduced / (1 + 6 * reduced) ** (5 / 3)

    def peak_frequency(self, params: Params) -> float:
        scale = get_number(params, "scale", default=DEFAULT_KAIMAL_SCALE)
        return self.friction_velocity(params) / (scale * 6)

    def generate_spectral_density(
        self, params: Params, frequencies: Sequence[float] | None = None
    ) -> SpectralDensityResult:
        """Evaluate the spectrum over a frequency grid and mark its peak.

        Args:
            params: Kaimal parameters (already validated)
            frequencies: Frequencies in Hz; defaults to 100 points from 0.001 Hz in 0.05 Hz steps

        Returns:
            SpectralDensityResult with a 'Peak' key point
        """
        freqs = (
            [float(f) for f in frequencies]
            if frequencies is not None
            else [0.001 + i * 0.05 for i in range(settings.default_curve_points)]
        )
        peak = self.peak_frequency(params)
        return SpectralDensityResult(
            x_values=freqs,
            y_values=[self.calculate_spectral_density(params, f) for f in freqs],
            key_points=[
                KeyPoint(x=peak, y=self.calculate_spectral_density(params, peak), label="Peak")
            ],
            stats={
                "mean_wind_speed": self.mean_wind_speed(params),
                "roughness_length": get_number(params, "roughnessLength", default=DEFAULT_ROUGHNESS_LENGTH),
                "scale": get_number(params, "scale", default=DEFAULT_KAIMAL_SCALE),
                "hub_height": get_number(params, "hubHeight", default=DEFAULT_HUB_HEIGHT),
                "friction_velocity": self.friction_velocity(params),
                "peak_frequency": peak,
            },
        )

    def calculate_stats(self, params: Params) -> dict[str, float]:
        result = super().calculate_stats(params)
        result.update(
            {
                "mean_wind_speed": self.mean_wind_speed(params),
                "turbulence_intensity": get_number(
                    params, "turbulenceIntensity", default=DEFAULT_TURBULENCE_INTENSITY
                ),
                "roughness_length": get_number(params, "roughnessLength", default=DEFAULT_ROUGHNESS_LENGTH),
                "scale": get_number(params, "scale", default=DEFAULT_KAIMAL_SCALE),
            }
        )
        return result

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        mean = self.mean_wind_speed(params)
        std_dev = self.calculate_std_dev(params)
        return [
            (mean, "Mean Wind Speed"),
            (mean + std_dev, "+1σ"),
            (max(0.0, mean - std_dev), "-1σ"),
        ]

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        wind_speed = current_value if current_value is not None and current_value > 0 else DEFAULT_WIND_SPEED
        return [
            ParameterDescriptor(
                name="value",
                description="Mean wind speed",
                label="Mean",
                tooltip="Mean wind speed at hub height",
                min=0,
                step=0.1,
                default_value=wind_speed,
                addon_after="m/s",
            ),
            ParameterDescriptor(
                name="turbulenceIntensity",
                description="Turbulence Intensity",
                field_type="percentage",
                label="Turbulence Intensity",
                tooltip="Turbulence intensity as percentage of mean wind speed",
                min=0,
                max=30,
                step=0.1,
                default_value=DEFAULT_TURBULENCE_INTENSITY,
                addon_after="%",
            ),
            ParameterDescriptor(
                name="roughnessLength",
                description="Roughness Length",
                required=False,
                label="Roughness Length",
                tooltip="Surface roughness length in meters",
                min=0,
                step=0.01,
                default_value=DEFAULT_ROUGHNESS_LENGTH,
                addon_after="m",
            ),
            ParameterDescriptor(
                name="scale",
                description="Kaimal Scale",
                required=False,
                label="Kaimal Scale",
                tooltip="Scale parameter for the Kaimal spectrum",
                min=0,
                step=0.1,
                default_value=DEFAULT_KAIMAL_SCALE,
            ),
            ParameterDescriptor(
                name="hubHeight",
                description="Hub Height",
                required=False,
                label="Hub Height",
                tooltip="Hub height in meters",
                min=70,
                step=0.5,
                default_value=DEFAULT_HUB_HEIGHT,
                addon_after="m",
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        samples = rng.normal(
            loc=self.mean_wind_speed(params), scale=self.calculate_std_dev(params), size=size
        )
        return np.clip(samples, 0.0, None)
