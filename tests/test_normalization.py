"""Tests for distribution spec normalization and mode transitions."""

import copy

import pytest

from distribution_engine.services.normalization import (
    get_appropriate_value,
    initialize_time_series_if_empty,
    normalize_distribution,
    validate_time_series_mode_transition,
)


def make_spec(value=100, points=None, ts_mode=False, dist_type="normal"):
    return {
        "type": dist_type,
        "parameters": {"value": value, "stdDev": 10},
        "timeSeriesMode": ts_mode,
        "timeSeriesParameters": {"value": points if points is not None else []},
    }


class TestNormalizeDistribution:
    """Test spec normalization."""

    def test_none_gives_defaults(self):
        """Test that a missing spec becomes a fixed spec at 0."""
        normalized = normalize_distribution(None)

        assert normalized == {
            "type": "fixed",
            "parameters": {"value": 0},
            "timeSeriesParameters": {"value": []},
            "timeSeriesMode": False,
        }

    def test_non_numeric_value_replaced(self):
        """Test that a non-numeric value becomes 0."""
        normalized = normalize_distribution({"type": "normal", "parameters": {"value": "abc", "stdDev": 5}})

        assert normalized["parameters"] == {"value": 0, "stdDev": 5}

    def test_extra_fields_preserved(self):
        """Test that unrelated fields survive normalization."""
        spec = make_spec()
        spec["metadata"] = {"percentileDirection": "ascending"}

        assert normalize_distribution(spec)["metadata"] == {"percentileDirection": "ascending"}

    def test_input_not_mutated(self):
        """Test that the caller's spec is untouched."""
        spec = {"type": "", "parameters": {"value": None}, "timeSeriesParameters": {"value": "bad"}}
        original = copy.deepcopy(spec)

        normalized = normalize_distribution(spec)
        normalized["parameters"]["value"] = 99

        assert spec == original

    def test_idempotent(self):
        """Test that normalizing twice equals normalizing once."""
        once = normalize_distribution({"parameters": {"value": "x"}, "timeSeriesMode": 1})

        assert normalize_distribution(once) == once
        assert once["timeSeriesMode"] is True


class TestModeTransition:
    """Test single-value / time-series mode transitions."""

    def test_to_time_series_seeds_series(self):
        """Test that an empty series is seeded from the current value."""
        result = validate_time_series_mode_transition(make_spec(value=100), True)

        assert result.is_valid is True
        assert result.message is None
        assert result.distribution["timeSeriesMode"] is True
        assert result.distribution["timeSeriesParameters"]["value"] == [{"year": 0, "value": 100}]

    def test_to_time_series_keeps_existing_series(self):
        """Test that an existing series is kept."""
        points = [{"year": 0, "value": 5}, {"year": 1, "value": 6}]

        result = validate_time_series_mode_transition(make_spec(points=points), True)

        assert result.distribution["timeSeriesParameters"]["value"] == points

    def test_to_time_series_repairs_value(self):
        """Test that a non-numeric value is replaced by the default."""
        result = validate_time_series_mode_transition(make_spec(value="abc"), True, default_value=5)

        assert result.message == "Invalid parameter value, using default"
        assert result.distribution["parameters"]["value"] == 5
        assert result.distribution["timeSeriesParameters"]["value"] == [{"year": 0, "value": 5}]

    def test_to_single_recovers_latest_point(self):
        """Test that a missing value is taken from the latest year."""
        points = [{"year": 2020, "value": 10}, {"year": 2022, "value": 30}, {"year": 2021, "value": 20}]

        result = validate_time_series_mode_transition(make_spec(value=None, points=points, ts_mode=True), False)

        assert result.message == "Using time series data for parameter value"
        assert result.distribution["parameters"]["value"] == 30
        assert result.distribution["timeSeriesMode"] is False

    def test_to_single_without_series_uses_default(self):
        """Test the default is used when nothing is recoverable."""
        result = validate_time_series_mode_transition(
            make_spec(value=None, ts_mode=True), False, default_value=7
        )

        assert result.message == "No usable time series data, using default"
        assert result.distribution["parameters"]["value"] == 7

    def test_to_single_keeps_valid_value(self):
        """Test that a numeric value is kept when leaving time-series mode."""
        points = [{"year": 0, "value": 1}]

        result = validate_time_series_mode_transition(make_spec(value=42, points=points, ts_mode=True), False)

        assert result.message is None
        assert result.distribution["parameters"]["value"] == 42
        assert result.distribution["timeSeriesParameters"]["value"] == points

    def test_same_mode_only_sets_flag(self):
        """Test that transitioning to the current mode changes nothing else."""
        spec = make_spec(value=12)

        result = validate_time_series_mode_transition(spec, False)

        assert result.message is None
        assert result.distribution == normalize_distribution(spec)

    @pytest.mark.parametrize("target_mode", [True, False])
    def test_idempotent(self, target_mode):
        """Test that repeating a transition is a no-op."""
        spec = make_spec(value="bad", points=[{"year": 3, "value": 9}], ts_mode=not target_mode)

        first = validate_time_series_mode_transition(spec, target_mode, default_value=2)
        second = validate_time_series_mode_transition(first.distribution, target_mode, default_value=2)

        assert second.distribution == first.distribution
        assert second.message is None

    def test_input_not_mutated(self):
        """Test that the caller's spec is untouched."""
        spec = make_spec(value=None, points=[{"year": 1, "value": 4}], ts_mode=True)
        original = copy.deepcopy(spec)

        validate_time_series_mode_transition(spec, False)

        assert spec == original


class TestGetAppropriateValue:
    """Test picking the best single value in either mode."""

    def test_time_series_mode_uses_latest_point(self):
        """Test the most recent point wins in time-series mode."""
        points = [{"year": 1, "value": 10}, {"year": 3, "value": 30}, {"year": 2, "value": 20}]

        assert get_appropriate_value(make_spec(value=5, points=points, ts_mode=True)) == 30

    def test_time_series_mode_averages_when_latest_unusable(self):
        """Test the average of numeric points when the latest point has no number."""
        points = [{"year": 1, "value": 10}, {"year": 2, "value": 20}, {"year": 3, "value": "x"}]

        assert get_appropriate_value(make_spec(value=5, points=points, ts_mode=True)) == 15

    def test_time_series_mode_falls_back_to_value(self):
        """Test an empty series falls back to parameters.value."""
        assert get_appropriate_value(make_spec(value=5, ts_mode=True)) == 5

    def test_single_mode_prefers_value(self):
        """Test parameters.value wins in single-value mode."""
        points = [{"year": 1, "value": 10}]

        assert get_appropriate_value(make_spec(value=5, points=points)) == 5

    def test_single_mode_uses_series_when_value_missing(self):
        """Test the series is used when the value is not numeric."""
        points = [{"year": 1, "value": 10}, {"year": 4, "value": 40}]

        assert get_appropriate_value(make_spec(value=None, points=points)) == 40

    def test_default(self):
        """Test the default when nothing is usable."""
        assert get_appropriate_value(None, default_value=3) == 3
        assert get_appropriate_value(make_spec(value="abc"), default_value=3) == 3


class TestInitializeTimeSeries:
    """Test seeding empty series."""

    def test_seeds_in_time_series_mode(self):
        """Test an empty series is seeded from the value."""
        result = initialize_time_series_if_empty(make_spec(value=8, ts_mode=True))

        assert result["timeSeriesParameters"]["value"] == [{"year": 0, "value": 8}]

    def test_untouched_in_single_mode(self):
        """Test nothing is seeded in single-value mode."""
        result = initialize_time_series_if_empty(make_spec(value=8))

        assert result["timeSeriesParameters"]["value"] == []

    def test_existing_series_kept(self):
        """Test a non-empty series is left alone."""
        points = [{"year": 5, "value": 1}]

        result = initialize_time_series_if_empty(make_spec(value=8, points=points, ts_mode=True))

        assert result["timeSeriesParameters"]["value"] == points
