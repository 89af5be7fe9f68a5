"""Distribution-related models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ParameterDescriptor(BaseModel):
    """Information about a distribution parameter, used to render its form field."""

    name: str = Field(..., description="Parameter key in the parameters mapping")
    description: str = Field("", description="Parameter description")
    required: bool = Field(True, description="Whether the parameter is required")
    field_type: Literal["number", "percentage"] = Field("number", description="Input field type")
    default_value: float | None = Field(None, description="Default value")
    min: float | None = Field(None, description="Minimum value (if applicable)")
    max: float | None = Field(None, description="Maximum value (if applicable)")
    step: float | None = Field(None, description="Input step (if applicable)")
    label: str | None = Field(None, description="Form label")
    tooltip: str | None = Field(None, description="Form tooltip")
    addon_after: str | None = Field(None, description="Unit suffix shown after the input")


class DistributionMetadata(BaseModel):
    """Self-description of a distribution family.

    Recomputed on every call; defaults may be biased by an optional current value.
    """

    name: str = Field(..., description="Display name (e.g., 'Normal Distribution')")
    description: str = Field(..., description="Distribution description")
    applications: str = Field("", description="Typical applications")
    examples: str = Field("", description="Example uses")
    default_curve: Literal["pdf", "cdf"] = Field("pdf", description="Curve shown by default")
    non_negative_support: bool = Field(False, description="Whether the support is x >= 0")
    min_points_required: int = Field(..., description="Data points needed to fit the family")
    parameters: list[ParameterDescriptor] = Field(..., description="List of parameters")


class ValidationResult(BaseModel):
    """Outcome of a parameter or spec validation."""

    is_valid: bool = Field(..., description="Whether the input passed validation")
    message: list[str] = Field(default_factory=list, description="Validation error messages")
    details: str | None = Field(None, description="Additional context for the messages")
    warning: list[str] = Field(default_factory=list, description="Non-fatal advisories")

    @classmethod
    def ok(cls, warning: list[str] | None = None) -> ValidationResult:
        return cls(is_valid=True, warning=warning or [])

    @classmethod
    def fail(cls, *messages: str, details: str | None = None) -> ValidationResult:
        return cls(is_valid=False, message=list(messages), details=details)


class PercentileRequest(BaseModel):
    """A requested percentile on the 0-100 scale."""

    value: float = Field(..., description="Percentile value (0-100)")
    description: str = Field("", description="Label (e.g., 'primary', 'low')")


class PercentilePoint(BaseModel):
    """A curve point evaluated at a requested percentile."""

    percentile: PercentileRequest = Field(..., description="The requested percentile")
    x: float = Field(..., description="Quantile at the requested percentile")
    y: float = Field(..., description="Curve value at x")


class KeyPoint(BaseModel):
    """A labeled plot marker (value, mean, median, mode, +/-1 sigma)."""

    x: float = Field(..., description="Marker x position")
    y: float = Field(..., description="Marker y position")
    label: str = Field(..., description="Marker label")


class CurveResult(BaseModel):
    """Batch-evaluated PDF or CDF over an x-grid."""

    x_values: list[float] = Field(..., description="Evaluation grid")
    pdf_values: list[float] | None = Field(None, description="Density at each x (PDF curves)")
    cdf_values: list[float] | None = Field(None, description="Cumulative probability at each x (CDF curves)")
    percentile_points: list[PercentilePoint] = Field(default_factory=list, description="Requested percentiles")
    key_points: list[KeyPoint] = Field(default_factory=list, description="Plot markers")
    stats: dict[str, float] = Field(default_factory=dict, description="Summary statistics")

    @property
    def curve_values(self) -> list[float]:
        return self.pdf_values if self.pdf_values is not None else (self.cdf_values or [])


class SpectralDensityResult(BaseModel):
    """Kaimal spectrum evaluated over a frequency grid."""

    x_values: list[float] = Field(..., description="Frequencies (Hz)")
    y_values: list[float] = Field(..., description="Normalized spectral density at each frequency")
    key_points: list[KeyPoint] = Field(default_factory=list, description="Plot markers")
    stats: dict[str, float] = Field(default_factory=dict, description="Spectrum statistics")


class TimeSeriesPoint(BaseModel):
    """A single (year, value) observation."""

    year: int = Field(..., description="Projection year")
    value: float = Field(..., description="Value in that year")


class PercentilePair(BaseModel):
    """Two percentiles drawn as one shaded band around the primary percentile.

    Either side may be None when the band is open towards the primary.
    """

    lower: PercentilePoint | None = Field(None, description="Lower bound of the band")
    upper: PercentilePoint | None = Field(None, description="Upper bound of the band")
    opacity: float = Field(..., description="Band fill opacity (not clamped)")
    name: str = Field(..., description="Band label (e.g., 'P10-P90')")


class PercentileOrganization(BaseModel):
    """Percentile points grouped into a primary line, bands and leftovers."""

    primary: PercentilePoint | None = Field(None, description="Primary percentile point")
    percentile_pairs: list[PercentilePair] = Field(default_factory=list, description="Symmetric bands")
    singles: list[PercentilePoint] = Field(default_factory=list, description="Unpaired points")


class ModeTransitionResult(BaseModel):
    """Result of switching a spec between single-value and time-series modes."""

    is_valid: bool = Field(True, description="Whether the transition could be performed")
    message: str | None = Field(None, description="Advisory message when a value was repaired")
    distribution: dict[str, Any] = Field(..., description="The transitioned spec (a new mapping)")
