"""Core module - configuration and exceptions."""

from __future__ import annotations

from distribution_engine.core.config import (
    DISTRIBUTION_TYPES,
    KARMAN_CONSTANT,
    POSITIVE_DATA_TYPES,
    settings,
)
from distribution_engine.core.exceptions import (
    DistributionEngineError,
    DistributionError,
    SampleError,
    SensitivityDataError,
)

__all__ = [
    "settings",
    "DISTRIBUTION_TYPES",
    "KARMAN_CONSTANT",
    "POSITIVE_DATA_TYPES",
    "DistributionEngineError",
    "SampleError",
    "DistributionError",
    "SensitivityDataError",
]
