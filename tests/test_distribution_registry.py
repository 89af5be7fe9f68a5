"""Tests for distribution registry."""

import numpy as np
import pytest

from distribution_engine.core.config import DISTRIBUTION_TYPES
from distribution_engine.core.exceptions import DistributionError
from distribution_engine.services.distribution_registry import (
    DistributionRegistry,
    get_distribution_registry,
)
from distribution_engine.services.distributions import (
    FixedDistribution,
    NormalDistribution,
    UniformDistribution,
)

MIN_POINTS = {
    "fixed": 1,
    "normal": 5,
    "lognormal": 5,
    "triangular": 3,
    "uniform": 2,
    "weibull": 6,
    "exponential": 4,
    "poisson": 4,
    "gamma": 6,
    "kaimal": 5,
    "gbm": 8,
}


def _defaults(metadata):
    return {p.name: p.default_value for p in metadata.parameters}


class TestDistributionRegistry:
    """Test the DistributionRegistry class."""

    def test_register_and_get_distribution(self):
        """Test building a registry and retrieving distributions."""
        registry = DistributionRegistry([NormalDistribution()])
        retrieved = registry.get_distribution("normal")

        assert retrieved.name == "normal"
        assert retrieved.display_name == "Normal Distribution"

    def test_duplicate_registration_raises_error(self):
        """Test that registering the same type twice raises error."""
        with pytest.raises(ValueError, match="already registered"):
            DistributionRegistry([NormalDistribution(), NormalDistribution()])

    def test_get_nonexistent_distribution_raises_error(self):
        """Test that the strict lookup raises for unknown types."""
        registry = DistributionRegistry([NormalDistribution()])

        with pytest.raises(DistributionError, match="Unknown distribution"):
            registry.get_distribution("nonexistent")

    def test_get_is_case_insensitive(self):
        """Test that lookups ignore case."""
        registry = get_distribution_registry()

        assert registry.get("NORMAL") is registry.get("normal")
        assert registry.get("GbM").name == "gbm"

    def test_get_returns_none_for_unknown(self):
        """Test that the lenient lookup returns None."""
        registry = get_distribution_registry()

        assert registry.get("nonexistent") is None
        assert registry.get("") is None
        assert registry.get(None) is None

    def test_registry_is_read_only(self):
        """Test that the registered mapping cannot be modified."""
        registry = DistributionRegistry([UniformDistribution()])

        with pytest.raises(TypeError):
            registry._distributions["normal"] = NormalDistribution()

    def test_is_registered(self):
        """Test checking if distribution is registered."""
        registry = DistributionRegistry([NormalDistribution()])

        assert registry.is_registered("normal") is True
        assert registry.is_registered("Normal") is True
        assert registry.is_registered("nonexistent") is False

    def test_global_registry_has_builtin_distributions(self):
        """Test that the global registry has all built-in distributions in order."""
        registry = get_distribution_registry()

        assert registry.get_distribution_types() == list(DISTRIBUTION_TYPES)
        assert registry is get_distribution_registry()


class TestRegistryFallbacks:
    """Test the graceful defaults for unknown types."""

    def test_mean_falls_back_to_value(self):
        """Test unknown types report params['value'] as mean."""
        registry = get_distribution_registry()

        assert registry.calculate_mean("nonexistent", {"value": 7}) == 7
        assert registry.calculate_mean("nonexistent", {"value": "abc"}) == 0
        assert registry.calculate_mean("nonexistent", {}) == 0

    def test_std_dev_falls_back_to_zero(self):
        """Test unknown types report a zero standard deviation."""
        assert get_distribution_registry().calculate_std_dev("nonexistent", {"value": 7}) == 0

    def test_percentile_falls_back_to_value(self):
        """Test unknown types report params['value'] at every percentile."""
        assert get_distribution_registry().calculate_percentile("nonexistent", {"value": 3}, 90) == 3

    def test_metadata_readers_fall_back(self):
        """Test min points, support and default curve defaults."""
        registry = get_distribution_registry()

        assert registry.get_metadata("nonexistent") is None
        assert registry.get_min_required_points("nonexistent") == 3
        assert registry.is_non_negative("nonexistent") is False
        assert registry.get_default_curve("nonexistent") == "pdf"


class TestRegistryDelegation:
    """Test delegations to the registered families."""

    def test_calculate_percentile_uses_0_100_scale(self):
        """Test that percentiles are given on the 0-100 scale."""
        registry = get_distribution_registry()

        assert registry.calculate_percentile("uniform", {"min": 0, "max": 10}, 25) == pytest.approx(2.5)

    def test_calculate_mean_and_std_dev(self):
        """Test moment delegation."""
        registry = get_distribution_registry()
        params = {"value": 200, "stdDev": 10}

        assert registry.calculate_mean("normal", params) == 200
        assert registry.calculate_std_dev("normal", params) == pytest.approx(20)

    @pytest.mark.parametrize("dist_type", sorted(MIN_POINTS))
    def test_min_required_points(self, dist_type):
        """Test the per-family fitting thresholds."""
        assert get_distribution_registry().get_min_required_points(dist_type) == MIN_POINTS[dist_type]

    def test_non_negative_families(self):
        """Test which families have support x >= 0."""
        registry = get_distribution_registry()
        non_negative = {t for t in DISTRIBUTION_TYPES if registry.is_non_negative(t)}

        assert non_negative == {"lognormal", "weibull", "exponential", "poisson", "gamma", "kaimal", "gbm"}

    def test_default_curves(self):
        """Test that only fixed defaults to the CDF view."""
        registry = get_distribution_registry()

        assert registry.get_default_curve("fixed") == "cdf"
        assert all(registry.get_default_curve(t) == "pdf" for t in DISTRIBUTION_TYPES if t != "fixed")

    def test_get_all_metadata(self):
        """Test metadata for every family, biased by a current value."""
        metadata = get_distribution_registry().get_all_metadata(100)

        assert set(metadata) == set(DISTRIBUTION_TYPES)
        assert metadata["normal"].parameters[0].default_value == 100
        assert all(m.parameters for m in metadata.values())

    def test_metadata_is_rebuilt_per_call(self):
        """Test that metadata is not cached between current values."""
        registry = get_distribution_registry()

        first = registry.get_metadata("uniform", 10)
        second = registry.get_metadata("uniform", 50)

        assert _defaults(first) == {"value": 10, "min": 9, "max": 11}
        assert _defaults(second) == {"value": 50, "min": 45, "max": 55}

    def test_validate_distribution(self):
        """Test per-type validation through the registry."""
        registry = get_distribution_registry()

        assert registry.validate_distribution("normal", {"value": 1, "stdDev": 5}).is_valid
        unknown = registry.validate_distribution("nonexistent", {})
        assert unknown.is_valid is False
        assert unknown.message == ["Unknown distribution type: nonexistent"]
        assert registry.validate_distribution("normal", None).message == ["Parameters are required"]

    def test_generate_curve_uses_default_curve(self):
        """Test that fixed yields a CDF and normal a PDF by default."""
        registry = get_distribution_registry()

        fixed = registry.generate_curve("fixed", {"value": 5})
        normal = registry.generate_curve("normal", {"value": 5, "stdDev": 10})

        assert fixed.cdf_values is not None and fixed.pdf_values is None
        assert normal.pdf_values is not None and normal.cdf_values is None
        assert registry.generate_curve("normal", {"value": 5, "stdDev": 10}, curve="cdf").cdf_values

    def test_generate_curve_returns_none_when_unusable(self):
        """Test unknown types and invalid parameters produce no curve."""
        registry = get_distribution_registry()

        assert registry.generate_curve("nonexistent", {"value": 5}) is None
        assert registry.generate_curve("normal", {"value": 5, "stdDev": -1}) is None


class TestRegistrySampling:
    """Test Monte Carlo sampling through the registry."""

    def test_sample_normal(self):
        """Test normal samples match the requested moments."""
        registry = get_distribution_registry()
        rng = np.random.default_rng(42)

        samples = registry.sample("normal", {"value": 100, "stdDev": 10}, 10000, rng)

        assert samples.shape == (10000,)
        assert np.mean(samples) == pytest.approx(100, abs=1)
        assert np.std(samples) == pytest.approx(10, rel=0.05)

    def test_sample_is_reproducible(self):
        """Test that the same seed gives the same samples."""
        registry = get_distribution_registry()
        params = {"shape": 2, "scale": 3}

        first = registry.sample("gamma", params, 100, np.random.default_rng(1))
        second = registry.sample("gamma", params, 100, np.random.default_rng(1))

        np.testing.assert_array_equal(first, second)

    def test_sample_fixed(self):
        """Test fixed samples are constant."""
        samples = get_distribution_registry().sample("fixed", {"value": 3.5}, 10)

        assert np.all(samples == 3.5)

    def test_sample_unknown_type_raises(self):
        """Test that sampling an unknown type raises."""
        with pytest.raises(DistributionError, match="Unknown distribution"):
            get_distribution_registry().sample("nonexistent", {}, 10)

    def test_sample_invalid_params_raises(self):
        """Test that sampling with invalid parameters raises."""
        with pytest.raises(DistributionError, match="Standard deviation must be positive"):
            get_distribution_registry().sample("normal", {"value": 1, "stdDev": -1}, 10)


class TestDistributionError:
    """Test the error payload."""

    def test_to_dict(self):
        """Test the serialized error shape."""
        error = DistributionError("normal", "bad sigma")

        assert error.to_dict() == {
            "error": {
                "code": "DISTRIBUTION_ERROR",
                "message": "Distribution 'normal' error: bad sigma",
                "phase": "sample",
                "details": {"distribution_type": "normal", "error": "bad sigma"},
            }
        }

    def test_fixed_sample_error_message(self):
        """Test the family name is carried in the message."""
        with pytest.raises(DistributionError) as exc_info:
            FixedDistribution().sample({"value": "abc"}, 3, np.random.default_rng(0))

        assert exc_info.value.details["distribution_type"] == "fixed"
        assert "Fixed value must be a number" in exc_info.value.message
