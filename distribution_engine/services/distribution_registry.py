"""Distribution registry.

This module maps distribution type names to their implementations. The
registry is built once from a fixed set of distributions and is read-only
afterwards, so a single instance can be shared freely.

Lookups by type are case-insensitive. ``get`` returns None for unknown types
and the convenience delegations fall back to displayable defaults, so UI code
always has something to show. ``get_distribution`` is the strict variant used
where an unknown type is a caller error (sampling).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import numpy as np

from distribution_engine.core.exceptions import DistributionError
from distribution_engine.models.distribution import (
    CurveResult,
    DistributionMetadata,
    ValidationResult,
)
from distribution_engine.services.distributions import BUILTIN_DISTRIBUTIONS
from distribution_engine.services.distributions.base import Distribution, PercentileInput
from distribution_engine.utils.params import get_param, is_number

logger = logging.getLogger(__name__)

DEFAULT_MIN_REQUIRED_POINTS = 3


def _value_fallback(params: Mapping[str, Any] | None) -> float:
    value = get_param(params, "value")
    return float(value) if is_number(value) else 0.0


class DistributionRegistry:
    """Registry of available distributions.

    Provides lookups by type name plus delegations that degrade gracefully
    for unknown types.
    """

    def __init__(self, distributions: Iterable[Distribution] = ()):
        """Build the registry.

        Args:
            distributions: Distribution instances to register

        Raises:
            ValueError: If two distributions share the same name
        """
        registered: dict[str, Distribution] = {}
        for dist in distributions:
            key = dist.name.lower()
            if key in registered:
                raise ValueError(f"Distribution '{dist.name}' is already registered")
            registered[key] = dist
        self._distributions: Mapping[str, Distribution] = MappingProxyType(registered)

    def get(self, distribution_type: str | None) -> Distribution | None:
        """Get a distribution by type, ignoring case.

        Returns:
            The implementation, or None when the type is empty or unknown
        """
        if not distribution_type or not isinstance(distribution_type, str):
            return None
        dist = self._distributions.get(distribution_type.lower())
        if dist is None:
            logger.debug(f"Unknown distribution type: {distribution_type}")
        return dist

    def get_distribution(self, distribution_type: str) -> Distribution:
        """Get a distribution by type.

        Args:
            distribution_type: Name of the distribution to retrieve

        Returns:
            The requested distribution

        Raises:
            DistributionError: If distribution is not found
        """
        dist = self.get(distribution_type)
        if dist is None:
            available = list(self._distributions.keys())
            raise DistributionError(
                str(distribution_type),
                f"Unknown distribution '{distribution_type}'. Available: {available}",
            )
        return dist

    def is_registered(self, distribution_type: str) -> bool:
        return self.get(distribution_type) is not None

    def get_distribution_types(self) -> list[str]:
        """Registered type names in registration order."""
        return list(self._distributions.keys())

    def get_metadata(
        self, distribution_type: str, current_value: float | Mapping[str, Any] | None = None
    ) -> DistributionMetadata | None:
        dist = self.get(distribution_type)
        return dist.get_metadata(current_value) if dist else None

    def get_all_metadata(
        self, current_value: float | Mapping[str, Any] | None = None
    ) -> dict[str, DistributionMetadata]:
        """Metadata for every registered distribution, keyed by type."""
        return {name: dist.get_metadata(current_value) for name, dist in self._distributions.items()}

    def calculate_mean(self, distribution_type: str, params: Mapping[str, Any]) -> float:
        """Mean of the distribution, or ``params['value']`` (else 0) for unknown types."""
        dist = self.get(distribution_type)
        if dist is None:
            return _value_fallback(params)
        return dist.calculate_mean(params)

    def calculate_std_dev(self, distribution_type: str, params: Mapping[str, Any]) -> float:
        """Standard deviation, or 0 for unknown types."""
        dist = self.get(distribution_type)
        if dist is None:
            return 0.0
        return dist.calculate_std_dev(params)

    def calculate_percentile(
        self, distribution_type: str, params: Mapping[str, Any], percentile: float
    ) -> float:
        """Value at ``percentile`` (0-100 scale).

        Falls back to ``params['value']`` (else 0) for unknown types.
        """
        dist = self.get(distribution_type)
        if dist is None:
            return _value_fallback(params)
        return dist.calculate_quantile(percentile / 100, params)

    def get_min_required_points(self, distribution_type: str) -> int:
        metadata = self.get_metadata(distribution_type)
        return metadata.min_points_required if metadata else DEFAULT_MIN_REQUIRED_POINTS

    def is_non_negative(self, distribution_type: str) -> bool:
        metadata = self.get_metadata(distribution_type)
        return metadata.non_negative_support if metadata else False

    def get_default_curve(self, distribution_type: str) -> str:
        metadata = self.get_metadata(distribution_type)
        return metadata.default_curve if metadata else "pdf"

    def validate_distribution(
        self, distribution_type: str, params: Mapping[str, Any] | None
    ) -> ValidationResult:
        """Validate parameters for a type; unknown types and missing params are invalid."""
        dist = self.get(distribution_type)
        if dist is None:
            return ValidationResult.fail(f"Unknown distribution type: {distribution_type}")
        if params is None:
            return ValidationResult.fail("Parameters are required")
        return dist.validate(params)

    def generate_curve(
        self,
        distribution_type: str,
        params: Mapping[str, Any],
        curve: str | None = None,
        x_values: Sequence[float] | None = None,
        percentiles: Iterable[PercentileInput] | None = None,
    ) -> CurveResult | None:
        """Generate the family's default (or the requested) curve.

        Returns:
            CurveResult, or None when the type is unknown or parameters are invalid
        """
        dist = self.get(distribution_type)
        if dist is None:
            return None
        result = dist.validate(params)
        if not result.is_valid:
            logger.debug(f"Not generating curve for {distribution_type}: {result.message}")
            return None
        kind = curve or dist.get_metadata().default_curve
        if kind == "cdf":
            return dist.generate_cdf(params, x_values, percentiles)
        return dist.generate_pdf(params, x_values, percentiles)

    def sample(
        self,
        distribution_type: str,
        params: Mapping[str, Any],
        size: int,
        rng: np.random.Generator | None = None,
    ) -> np.ndarray:
        """Draw Monte Carlo samples.

        Raises:
            DistributionError: If the type is unknown or parameters are invalid
        """
        dist = self.get_distribution(distribution_type)
        return dist.sample(params, size, rng if rng is not None else np.random.default_rng())


# Global registry instance
_global_registry = DistributionRegistry(dist_class() for dist_class in BUILTIN_DISTRIBUTIONS)


def get_distribution_registry() -> DistributionRegistry:
    """Get the global distribution registry.

    Returns:
        The global DistributionRegistry instance
    """
    return _global_registry
