"""Fixed (deterministic) value with optional compound annual drift."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from distribution_engine.models.distribution import (
    CurveResult,
    KeyPoint,
    ParameterDescriptor,
    PercentilePoint,
    TimeSeriesPoint,
    ValidationResult,
)
from distribution_engine.services.distributions.base import (
    BaseDistribution,
    Params,
    PercentileInput,
    require_number,
    to_percentile_request,
    validation_result,
)
from distribution_engine.utils.params import get_number


class FixedDistribution(BaseDistribution):
    """A constant value that may grow or decline at a fixed annual rate.

    Not a true random variable: the PDF is approximated by a narrow spike so it
    can be plotted, and the CDF is an exact step at ``value``.
    """

    name = "fixed"
    display_name = "Fixed Value"
    description = "A constant value with optional annual growth/decline rate."
    applications = (
        "Used for well-known constant values or when a single best estimate is "
        "preferred over a range of values."
    )
    examples = "Fixed operations and maintenance costs, known quantities, or deterministic projections."
    default_curve = "cdf"
    non_negative_support = False
    min_points_required = 1

    def validate(self, params: Params) -> ValidationResult:
        issues: list[str] = []
        require_number(params, "value", "Fixed value", issues)
        return validation_result(issues, "Please provide a fixed value for this distribution.")

    def calculate_mean(self, params: Params) -> float:
        return get_number(params, "value")

    def calculate_std_dev(self, params: Params) -> float:
        return 0.0

    def calculate_median(self, params: Params) -> float:
        return get_number(params, "value")

    def calculate_mode(self, params: Params) -> float:
        return get_number(params, "value")

    def calculate_pdf(self, x: float, params: Params) -> float:
        value = get_number(params, "value")
        half_width = max(abs(value) * 1e-4, 1e-4)
        return 1 / half_width if abs(x - value) < half_width else 0.0

    def calculate_cdf(self, x: float, params: Params) -> float:
        return 1.0 if x >= get_number(params, "value") else 0.0

    def calculate_quantile(self, p: float, params: Params) -> float:
        value = get_number(params, "value")
        # p = 0 sits just left of the step
        return value if p > 0 else value - 1e-10

    def calculate_future_value(self, params: Params, years: float) -> float:
        """Compound the value forward: ``value * (1 + drift/100) ** years``."""
        value = get_number(params, "value")
        drift = get_number(params, "drift") / 100
        return value * (1 + drift) ** years

    def generate_time_series(self, params: Params, years: int = 20) -> list[TimeSeriesPoint]:
        """Project the value for years 0..years inclusive."""
        return [
            TimeSeriesPoint(year=year, value=self.calculate_future_value(params, year))
            for year in range(years + 1)
        ]

    def calculate_stats(self, params: Params) -> dict[str, float]:
        value = get_number(params, "value")
        return {
            "value": value,
            "drift": get_number(params, "drift"),
            "mean": value,
            "median": value,
            "mode": value,
            "std_dev": 0.0,
            "variance": 0.0,
        }

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        return [(get_number(params, "value"), "Value")]

    def generate_pdf(
        self,
        params: Params,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult:
        """Plot the spike over the part of the grid near ``value``.

        Grid points further than ten visual widths away are dropped; if none
        remain, five points around the value are used instead.
        """
        value = get_number(params, "value")
        epsilon = abs(value) * 0.05 or 0.1
        xs = [float(x) for x in x_values] if x_values is not None else self.default_x_values(params)
        near = [x for x in xs if abs(x - value) < epsilon * 10]
        if not near:
            near = [value - epsilon, value - epsilon / 2, value, value + epsilon / 2, value + epsilon]

        visual_epsilon = epsilon / 5
        pdf_values = [1 / visual_epsilon if abs(x - value) < visual_epsilon else 0.0 for x in near]
        peak = pdf_values[near.index(value)] if value in near else 0.0

        return CurveResult(
            x_values=near,
            pdf_values=pdf_values,
            percentile_points=[
                PercentilePoint(percentile=to_percentile_request(item), x=value, y=peak)
                for item in percentiles or []
            ],
            key_points=[KeyPoint(x=value, y=peak, label="Value")],
            stats=self.calculate_stats(params),
        )

    def generate_cdf(
        self,
        params: Params,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult:
        """Plot the step, inserting points just either side of ``value`` if missing."""
        value = get_number(params, "value")
        epsilon = abs(value) * 0.001 or 0.001
        xs = [float(x) for x in x_values] if x_values is not None else self.default_x_values(params)
        if value not in xs:
            xs = sorted(xs + [value - epsilon, value, value + epsilon])

        return CurveResult(
            x_values=xs,
            cdf_values=[1.0 if x >= value else 0.0 for x in xs],
            # markers sit at the middle of the step
            percentile_points=[
                PercentilePoint(percentile=to_percentile_request(item), x=value, y=0.5)
                for item in percentiles or []
            ],
            key_points=[KeyPoint(x=value, y=0.5, label="Value")],
            stats=self.calculate_stats(params),
        )

    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        return [
            ParameterDescriptor(
                name="value",
                description="The exact value to use",
                label="Value",
                tooltip="Exact value to use (no randomness)",
                default_value=current_value if current_value is not None else 0,
            ),
            ParameterDescriptor(
                name="drift",
                description="Annual percentage change",
                required=False,
                field_type="percentage",
                label="Growth rate (%)",
                tooltip="Annual percentage growth or decline rate",
                min=-50,
                max=100,
                step=0.1,
                default_value=0,
            ),
        ]

    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        return np.full(size, get_number(params, "value"))
