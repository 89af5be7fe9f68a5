"""Custom exceptions for the distribution engine.

Validation failures are reported as ``ValidationResult`` values and never
raised. The exceptions below cover the remaining cases: sampling with bad
parameters, strict lookups of unknown types and malformed sensitivity data.
"""

from __future__ import annotations

from typing import Any


class DistributionEngineError(Exception):
    """Base exception for all distribution engine errors."""

    code: str = "UNKNOWN_ERROR"
    phase: str = "unknown"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to error response dict."""
        error = {
            "code": self.code,
            "message": self.message,
            "phase": self.phase,
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}


class SampleError(DistributionEngineError):
    """Error during sampling."""

    code = "SAMPLE_ERROR"
    phase = "sample"


class DistributionError(SampleError):
    """Error with distribution configuration or sampling."""

    code = "DISTRIBUTION_ERROR"

    def __init__(self, distribution_type: str, error_msg: str):
        super().__init__(
            message=f"Distribution '{distribution_type}' error: {error_msg}",
            details={"distribution_type": distribution_type, "error": error_msg},
        )


class SensitivityDataError(DistributionEngineError):
    """Sensitivity cube data is missing or malformed."""

    code = "SENSITIVITY_DATA_ERROR"
    phase = "interpolate"

    def __init__(self, reason: str, percentile: float | None = None):
        details: dict[str, Any] = {"reason": reason}
        if percentile is not None:
            details["percentile"] = percentile
        super().__init__(message=f"Invalid sensitivity data: {reason}", details=details)
