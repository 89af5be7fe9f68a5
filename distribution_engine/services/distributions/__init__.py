"""Built-in distribution families."""

from __future__ import annotations

from distribution_engine.services.distributions.base import BaseDistribution, Distribution
from distribution_engine.services.distributions.exponential import ExponentialDistribution
from distribution_engine.services.distributions.fixed import FixedDistribution
from distribution_engine.services.distributions.gamma import GammaDistribution
from distribution_engine.services.distributions.gbm import GBMDistribution
from distribution_engine.services.distributions.kaimal import KaimalDistribution
from distribution_engine.services.distributions.lognormal import LogNormalDistribution
from distribution_engine.services.distributions.normal import NormalDistribution
from distribution_engine.services.distributions.poisson import PoissonDistribution
from distribution_engine.services.distributions.triangular import TriangularDistribution
from distribution_engine.services.distributions.uniform import UniformDistribution
from distribution_engine.services.distributions.weibull import WeibullDistribution

BUILTIN_DISTRIBUTIONS: tuple[type[BaseDistribution], ...] = (
    FixedDistribution,
    NormalDistribution,
    LogNormalDistribution,
    TriangularDistribution,
    UniformDistribution,
    WeibullDistribution,
    ExponentialDistribution,
    PoissonDistribution,
    GammaDistribution,
    KaimalDistribution,
    GBMDistribution,
)

__all__ = [
    "BUILTIN_DISTRIBUTIONS",
    "BaseDistribution",
    "Distribution",
    "ExponentialDistribution",
    "FixedDistribution",
    "GammaDistribution",
    "GBMDistribution",
    "KaimalDistribution",
    "LogNormalDistribution",
    "NormalDistribution",
    "PoissonDistribution",
    "TriangularDistribution",
    "UniformDistribution",
    "WeibullDistribution",
]
