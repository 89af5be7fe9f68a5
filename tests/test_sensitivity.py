"""Tests for sensitivity cube interpolation."""

import pytest

from distribution_engine.core.exceptions import SensitivityDataError
from distribution_engine.models.sensitivity import SensitivityData
from distribution_engine.services.sensitivity import (
    interpolate_correlation,
    interpolate_metric_impact,
)


def make_data():
    metadata = {"enabledMetrics": ["npv", "irr", "capex"]}
    return {
        "percentileMatrices": [
            {
                "percentile": 50,
                "correlationMatrix": {"npv": {"irr": 0.6, "capex": -0.3}},
                "matrixMetadata": metadata,
            },
            {
                "percentile": 10,
                "correlationMatrix": {"npv": {"irr": 0.2, "capex": -0.5}},
                "matrixMetadata": metadata,
            },
            {
                "percentile": 90,
                "correlationMatrix": {"npv": {"irr": 0.8}},
                "matrixMetadata": metadata,
            },
        ],
        "metricValues": {
            "npv": {50: 100.0},
            "irr": {50: 0.1},
            "capex": {50: 200.0},
        },
    }


class TestInterpolateCorrelation:
    """Test correlation interpolation between computed percentiles."""

    def test_linear_between_matrices(self):
        """Test halfway between P10 and P50."""
        assert interpolate_correlation(make_data(), 30, "npv", "irr") == pytest.approx(0.4)

    def test_symmetric_lookup(self):
        """Test the pair can be given in either order."""
        data = make_data()

        assert interpolate_correlation(data, 30, "irr", "npv") == interpolate_correlation(data, 30, "npv", "irr")

    def test_exact_percentile(self):
        """Test a computed percentile returns its coefficient."""
        assert interpolate_correlation(make_data(), 50, "npv", "irr") == pytest.approx(0.6)

    def test_clamped_outside_range(self):
        """Test targets outside the computed range take the edge values."""
        data = make_data()

        assert interpolate_correlation(data, 5, "npv", "irr") == 0.2
        assert interpolate_correlation(data, 95, "npv", "irr") == 0.8

    def test_rounded_to_four_decimals(self):
        """Test the result is rounded."""
        data = {
            "percentileMatrices": [
                {"percentile": 10, "correlationMatrix": {"a": {"b": 0.11111}}},
                {"percentile": 40, "correlationMatrix": {"a": {"b": 0.22222}}},
            ]
        }

        assert interpolate_correlation(data, 20, "a", "b") == 0.1481

    def test_same_metric(self):
        """Test a metric correlates perfectly with itself."""
        assert interpolate_correlation(make_data(), 30, "npv", "npv") == 1.0

    def test_missing_pair(self):
        """Test a pair missing from a bounding matrix gives None."""
        assert interpolate_correlation(make_data(), 70, "npv", "capex") is None

    def test_unsupported_method(self):
        """Test only linear interpolation is supported."""
        assert interpolate_correlation(make_data(), 30, "npv", "irr", method="cubic") is None

    def test_no_data(self):
        """Test missing data gives None."""
        assert interpolate_correlation(None, 30, "npv", "irr") is None
        assert interpolate_correlation({"percentileMatrices": []}, 30, "npv", "irr") is None

    def test_accepts_model(self):
        """Test a SensitivityData model is accepted as-is."""
        data = SensitivityData.model_validate(make_data())

        assert interpolate_correlation(data, 70, "npv", "irr") == pytest.approx(0.7)


class TestInterpolateMetricImpact:
    """Test projecting a metric change through the correlations."""

    def test_impacts(self):
        """Test a 10% npv increase propagates with the P50 correlations."""
        impacts = interpolate_metric_impact(make_data(), "npv", 110, 50)

        assert set(impacts) == {"irr", "capex"}
        assert impacts["irr"].before == pytest.approx(0.1)
        assert impacts["irr"].after == pytest.approx(0.106)
        assert impacts["irr"].pct_change == pytest.approx(6.0)
        assert impacts["capex"].after == pytest.approx(194.0)
        assert impacts["capex"].pct_change == pytest.approx(-3.0)

    def test_selected_metrics(self):
        """Test only the requested metrics are projected."""
        impacts = interpolate_metric_impact(make_data(), "npv", 110, 50, impact_metrics=["irr"])

        assert list(impacts) == ["irr"]

    def test_zero_baseline(self):
        """Test a zero baseline gives no impacts."""
        data = make_data()
        data["metricValues"]["npv"][50] = 0.0

        assert interpolate_metric_impact(data, "npv", 10, 50) == {}

    def test_missing_baseline_percentile(self):
        """Test an unknown baseline percentile raises."""
        with pytest.raises(SensitivityDataError, match="Baseline percentile 25 not found"):
            interpolate_metric_impact(make_data(), "npv", 110, 25)

    def test_missing_target_value(self):
        """Test a metric without a baseline value raises."""
        with pytest.raises(SensitivityDataError, match="No baseline value for metric 'opex'"):
            interpolate_metric_impact(make_data(), "opex", 110, 50)

    def test_no_matrices(self):
        """Test empty data raises."""
        with pytest.raises(SensitivityDataError) as exc_info:
            interpolate_metric_impact({"percentileMatrices": []}, "npv", 110, 50)

        assert exc_info.value.to_dict()["error"]["code"] == "SENSITIVITY_DATA_ERROR"
