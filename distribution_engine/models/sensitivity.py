"""Sensitivity cube models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MatrixMetadata(BaseModel):
    """Metadata attached to a correlation matrix."""

    enabled_metrics: list[str] = Field(
        default_factory=list, alias="enabledMetrics", description="Metrics present in the matrix"
    )

    model_config = {"populate_by_name": True}


class PercentileMatrix(BaseModel):
    """Correlation matrix computed at one percentile of the simulation output."""

    percentile: float = Field(..., description="Percentile the matrix was computed at (0-100)")
    correlation_matrix: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        alias="correlationMatrix",
        description="Nested mapping metric -> metric -> correlation coefficient",
    )
    matrix_metadata: MatrixMetadata = Field(
        default_factory=MatrixMetadata, alias="matrixMetadata", description="Matrix metadata"
    )

    model_config = {"populate_by_name": True}

    def correlation(self, metric_a: str, metric_b: str) -> float | None:
        """Look up a coefficient in either orientation; a metric correlates 1.0 with itself."""
        if metric_a == metric_b:
            return 1.0
        value = self.correlation_matrix.get(metric_a, {}).get(metric_b)
        if value is None:
            value = self.correlation_matrix.get(metric_b, {}).get(metric_a)
        return value


class SensitivityData(BaseModel):
    """Precomputed correlation matrices and metric values across percentiles."""

    percentile_matrices: list[PercentileMatrix] = Field(
        default_factory=list, alias="percentileMatrices", description="Matrices by percentile"
    )
    metric_values: dict[str, dict[float, float]] = Field(
        default_factory=dict,
        alias="metricValues",
        description="Metric -> percentile -> metric value at that percentile",
    )

    model_config = {"populate_by_name": True}

    def sorted_matrices(self) -> list[PercentileMatrix]:
        return sorted(self.percentile_matrices, key=lambda m: m.percentile)


class MetricImpact(BaseModel):
    """Projected effect of a target-metric change on another metric."""

    before: float = Field(..., description="Metric value at the baseline percentile")
    after: float = Field(..., description="Projected metric value")
    pct_change: float = Field(..., description="Relative change in percent")
