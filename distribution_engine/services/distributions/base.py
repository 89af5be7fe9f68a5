"""Distribution contract and shared curve-generation template.

Every family implements the ``Distribution`` protocol by subclassing
``BaseDistribution`` and providing the closed-form (or numeric) math:

- ``validate`` is the only precondition check and never raises
- moments, ``calculate_pdf``, ``calculate_cdf`` and ``calculate_quantile``
  assume parameters already passed ``validate``
- ``generate_pdf`` / ``generate_cdf`` batch-evaluate a curve over an x-grid,
  add requested percentile points and de-duplicated key points
- ``get_metadata`` describes the family, biased by an optional current value
- ``sample`` draws Monte Carlo samples and raises ``DistributionError`` on
  invalid parameters
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Literal, Protocol, Union

import numpy as np

from distribution_engine.core.config import settings
from distribution_engine.core.exceptions import DistributionError
from distribution_engine.models.distribution import (
    CurveResult,
    DistributionMetadata,
    KeyPoint,
    ParameterDescriptor,
    PercentilePoint,
    PercentileRequest,
    ValidationResult,
)
from distribution_engine.utils.params import get_param, is_number

logger = logging.getLogger(__name__)

Params = Mapping[str, Any]
PercentileInput = Union[PercentileRequest, Mapping[str, Any], float, int]
CurveKind = Literal["pdf", "cdf"]


class Distribution(Protocol):
    """Protocol for distribution implementations.

    All distributions must implement this protocol to be registered
    in the distribution registry.
    """

    name: str
    display_name: str
    description: str

    def validate(self, params: Params) -> ValidationResult: ...

    def calculate_mean(self, params: Params) -> float: ...

    def calculate_std_dev(self, params: Params) -> float: ...

    def calculate_pdf(self, x: float, params: Params) -> float: ...

    def calculate_cdf(self, x: float, params: Params) -> float: ...

    def calculate_quantile(self, p: float, params: Params) -> float: ...

    def generate_pdf(
        self,
        params: Params,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult: ...

    def generate_cdf(
        self,
        params: Params,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult: ...

    def get_metadata(self, current_value: float | Params | None = None) -> DistributionMetadata: ...

    def sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        """Generate random samples from this distribution.

        Args:
            params: Dictionary of parameter values
            size: Number of samples to generate
            rng: NumPy random number generator for reproducibility

        Returns:
            Array of samples with shape (size,)

        Raises:
            DistributionError: If sampling fails due to invalid parameters
        """
        ...


def to_percentile_request(item: PercentileInput) -> PercentileRequest:
    """Coerce a percentile request given as a model, mapping or bare number."""
    if isinstance(item, PercentileRequest):
        return item
    if isinstance(item, Mapping):
        return PercentileRequest.model_validate(item)
    return PercentileRequest(value=float(item))


def resolve_current_value(current_value: float | Params | None) -> float | None:
    """Extract the numeric current value used to bias metadata defaults."""
    if current_value is None:
        return None
    if isinstance(current_value, Mapping):
        value = get_param(current_value, "value")
        return float(value) if is_number(value) else None
    return float(current_value) if is_number(current_value) else None


class BaseDistribution(ABC):
    """Base class for distribution implementations.

    Provides the curve-generation template and enforces the Distribution protocol.
    """

    name: str
    display_name: str
    description: str
    applications: str = ""
    examples: str = ""
    default_curve: CurveKind = "pdf"
    non_negative_support: bool = False
    min_points_required: int = 3

    @abstractmethod
    def validate(self, params: Params) -> ValidationResult:
        """Check parameters; never raises."""

    @abstractmethod
    def calculate_mean(self, params: Params) -> float:
        pass

    @abstractmethod
    def calculate_std_dev(self, params: Params) -> float:
        pass

    @abstractmethod
    def calculate_pdf(self, x: float, params: Params) -> float:
        """Density at ``x`` (probability mass for discrete families); 0 outside support."""

    @abstractmethod
    def calculate_cdf(self, x: float, params: Params) -> float:
        """P(X <= x), monotone non-decreasing in [0, 1]."""

    @abstractmethod
    def calculate_quantile(self, p: float, params: Params) -> float:
        """Inverse CDF for probability ``p`` in [0, 1]."""

    @abstractmethod
    def parameter_descriptors(self, current_value: float | None) -> list[ParameterDescriptor]:
        """Form fields for the family, with defaults biased by ``current_value``."""

    @abstractmethod
    def _sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        """Draw samples from already-validated parameters."""

    def calculate_median(self, params: Params) -> float:
        return self.calculate_quantile(0.5, params)

    def calculate_mode(self, params: Params) -> float | None:
        """Mode of the distribution, or None when it has no single mode."""
        return None

    def calculate_stats(self, params: Params) -> dict[str, float]:
        """Summary statistics reported alongside generated curves."""
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        stats = {
            "mean": mean,
            "median": self.calculate_median(params),
            "std_dev": std_dev,
            "variance": std_dev * std_dev,
        }
        mode = self.calculate_mode(params)
        if mode is not None:
            stats["mode"] = mode
        return stats

    def get_metadata(self, current_value: float | Params | None = None) -> DistributionMetadata:
        """Get distribution metadata as DistributionMetadata.

        Args:
            current_value: Optional number (or parameters mapping with a ``value``)
                used to derive parameter defaults

        Returns:
            Freshly built metadata; nothing is cached
        """
        return DistributionMetadata(
            name=self.display_name,
            description=self.description,
            applications=self.applications,
            examples=self.examples,
            default_curve=self.default_curve,
            non_negative_support=self.non_negative_support,
            min_points_required=self.min_points_required,
            parameters=self.parameter_descriptors(resolve_current_value(current_value)),
        )

    def sample(self, params: Params, size: int, rng: np.random.Generator) -> np.ndarray:
        """Generate samples after validating parameters.

        Raises:
            DistributionError: If parameters are invalid or sampling fails
        """
        self._require_valid(params)
        try:
            return np.asarray(self._sample(params, size, rng), dtype=float)
        except (ValueError, OverflowError) as e:
            raise DistributionError(self.name, f"Sampling failed: {str(e)}")

    def _require_valid(self, params: Params) -> None:
        result = self.validate(params)
        if not result.is_valid:
            raise DistributionError(self.name, "; ".join(result.message) or "invalid parameters")

    # Curve generation

    def default_x_values(self, params: Params, count: int | None = None) -> list[float]:
        """Evenly spaced grid over mean +/- 4 standard deviations.

        The lower end is clamped at 0 for non-negative families.
        """
        count = count or settings.default_curve_points
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        if not 0 < std_dev < math.inf:
            std_dev = abs(mean) * 0.1 or 1.0
        low, high = mean - 4 * std_dev, mean + 4 * std_dev
        if self.non_negative_support and low < 0:
            low = 0.0
        return generate_range(low, high, count)

    def generate_pdf(
        self,
        params: Params,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult:
        """Generate the PDF curve, percentile points and key points for plotting.

        Args:
            params: Distribution parameters (already validated)
            x_values: Evaluation grid; defaults to ``default_x_values``
            percentiles: Percentile requests on the 0-100 scale

        Returns:
            CurveResult with ``pdf_values`` populated
        """
        return self._generate_curve(params, x_values, percentiles, "pdf")

    def generate_cdf(
        self,
        params: Params,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult:
        """Generate the CDF curve; percentile points sit at ``y = p``."""
        return self._generate_curve(params, x_values, percentiles, "cdf")

    def _generate_curve(
        self,
        params: Params,
        x_values: Sequence[float] | None,
        percentiles: Iterable[PercentileInput] | None,
        kind: CurveKind,
    ) -> CurveResult:
        xs = [float(x) for x in x_values] if x_values is not None else self.default_x_values(params)
        evaluate = self._curve_function(params, kind)
        values = [evaluate(x) for x in xs]

        percentile_points = self._percentile_points(params, percentiles, kind)
        key_points = self._key_points(params, kind)
        logger.debug(
            f"Generated {kind} for {self.name}: {len(xs)} points, "
            f"{len(percentile_points)} percentiles, {len(key_points)} key points"
        )

        return CurveResult(
            x_values=xs,
            pdf_values=values if kind == "pdf" else None,
            cdf_values=values if kind == "cdf" else None,
            percentile_points=percentile_points,
            key_points=key_points,
            stats=self.calculate_stats(params),
        )

    def _curve_function(self, params: Params, kind: CurveKind) -> Callable[[float], float]:
        if kind == "pdf":
            return lambda x: self.calculate_pdf(x, params)
        return lambda x: self.calculate_cdf(x, params)

    def _percentile_points(
        self, params: Params, percentiles: Iterable[PercentileInput] | None, kind: CurveKind
    ) -> list[PercentilePoint]:
        points = []
        for item in percentiles or []:
            request = to_percentile_request(item)
            p = request.value / 100
            x = self.calculate_quantile(p, params)
            if not math.isfinite(x):
                logger.debug(f"Skipping percentile {request.value} for {self.name}: quantile is {x}")
                continue
            y = self.calculate_pdf(x, params) if kind == "pdf" else p
            points.append(PercentilePoint(percentile=request, x=x, y=y))
        return points

    def key_point_candidates(self, params: Params) -> list[tuple[float, str]]:
        """Candidate (x, label) markers in priority order.

        Default set: the configured value, mean, median, mode and mean +/- 1 sigma.
        """
        mean = self.calculate_mean(params)
        std_dev = self.calculate_std_dev(params)
        candidates = []
        value = get_param(params, "value")
        if is_number(value):
            candidates.append((float(value), "Value"))
        candidates.append((mean, "Mean"))
        candidates.append((self.calculate_median(params), "Median"))
        mode = self.calculate_mode(params)
        if mode is not None:
            candidates.append((mode, "Mode"))
        if std_dev > 0:
            candidates.append((mean + std_dev, "+1σ"))
            minus = mean - std_dev
            if self.non_negative_support:
                minus = max(minus, 0.001)
            candidates.append((minus, "-1σ"))
        return candidates

    def key_point_scale(self, params: Params) -> float:
        """Scale used to decide whether two markers are distinct."""
        std_dev = self.calculate_std_dev(params)
        if 0 < std_dev < math.inf:
            return std_dev
        mean = abs(self.calculate_mean(params))
        return mean if 0 < mean < math.inf else 1.0

    def _key_points(self, params: Params, kind: CurveKind) -> list[KeyPoint]:
        evaluate = self._curve_function(params, kind)
        threshold = settings.key_point_epsilon * self.key_point_scale(params)
        emitted: list[KeyPoint] = []
        for x, label in self.key_point_candidates(params):
            if not math.isfinite(x):
                continue
            if any(abs(x - point.x) <= threshold for point in emitted):
                continue
            emitted.append(KeyPoint(x=x, y=evaluate(x), label=label))
        return emitted


def generate_range(low: float, high: float, count: int | None = None) -> list[float]:
    """Evenly spaced values from ``low`` to ``high`` inclusive."""
    count = count or settings.default_curve_points
    if count < 2:
        return [low]
    return np.linspace(low, high, count).tolist()


def require_positive(params: Params, key: str, label: str, issues: list[str]) -> None:
    """Append 'required' / 'must be positive' messages for ``key``."""
    value = get_param(params, key)
    if value is None:
        issues.append(f"{label} is required")
    elif not is_number(value):
        issues.append(f"{label} must be a number")
    elif value <= 0:
        issues.append(f"{label} must be positive")


def require_number(params: Params, key: str, label: str, issues: list[str]) -> None:
    """Append 'required' / 'must be a number' messages for ``key``."""
    value = get_param(params, key)
    if value is None:
        issues.append(f"{label} is required")
    elif not is_number(value):
        issues.append(f"{label} must be a number")


def validation_result(issues: list[str], details: str) -> ValidationResult:
    if issues:
        return ValidationResult.fail(*issues, details=details)
    return ValidationResult.ok()

