"""Engine configuration and constants."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Curve generation
    default_curve_points: int = 100
    default_primary_percentile: float = 50
    key_point_epsilon: float = 0.001

    # Numeric quantile inversion (gamma bisection, poisson summation)
    quantile_max_iterations: int = 20
    quantile_tolerance: float = 1e-4
    quantile_upper_multiplier: float = 10
    poisson_max_k: int = 100

    # Percentile bands
    percentile_pair_base_opacity: float = 0.3
    percentile_pair_opacity_step: float = 0.1

    # Floor applied to scales that collapse to zero (normal at mean 0, gbm at zero volatility)
    min_scale: float = 1e-12

    class Config:
        env_file = ".env"
        env_prefix = "DE_"
        extra = "ignore"


settings = EngineSettings()


# Registered distribution type keys
DISTRIBUTION_TYPES = (
    "fixed",
    "normal",
    "lognormal",
    "triangular",
    "uniform",
    "weibull",
    "exponential",
    "poisson",
    "gamma",
    "kaimal",
    "gbm",
)

# Von Karman constant used for the kaimal friction velocity
KARMAN_CONSTANT = 0.4

# Families whose data must be strictly positive to be fitted
POSITIVE_DATA_TYPES = {"lognormal", "exponential", "weibull", "gamma"}
