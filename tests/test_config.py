"""Tests for engine settings."""

from distribution_engine.core.config import DISTRIBUTION_TYPES, EngineSettings, settings


class TestEngineSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self):
        """Test the numeric defaults used across the engine."""
        assert settings.default_curve_points == 100
        assert settings.default_primary_percentile == 50
        assert settings.quantile_max_iterations == 20
        assert settings.quantile_tolerance == 1e-4
        assert settings.poisson_max_k == 100

    def test_environment_override(self, monkeypatch):
        """Test DE_-prefixed environment variables override defaults."""
        monkeypatch.setenv("DE_DEFAULT_CURVE_POINTS", "250")
        monkeypatch.setenv("DE_QUANTILE_TOLERANCE", "1e-6")

        overridden = EngineSettings()

        assert overridden.default_curve_points == 250
        assert overridden.quantile_tolerance == 1e-6

    def test_distribution_types(self):
        """Test the registered type keys."""
        assert len(DISTRIBUTION_TYPES) == 11
        assert DISTRIBUTION_TYPES[0] == "fixed"
        assert DISTRIBUTION_TYPES[-1] == "gbm"
