"""Tests for distribution spec validation."""

from distribution_engine.services.distribution_registry import DistributionRegistry
from distribution_engine.services.distributions import UniformDistribution
from distribution_engine.services.validator import check_data_compatibility, validate_distribution


def ts_points(*values):
    return [{"year": i, "value": v} for i, v in enumerate(values)]


class TestValidateDistribution:
    """Test spec-level validation."""

    def test_valid_spec(self):
        """Test a complete single-value spec passes."""
        result = validate_distribution({"type": "normal", "parameters": {"value": 10, "stdDev": 5}})

        assert result.is_valid is True
        assert result.message == []
        assert result.warning == []

    def test_missing_spec(self):
        """Test a missing spec fails."""
        result = validate_distribution(None)

        assert result.is_valid is False
        assert result.message == ["Distribution object is required"]

    def test_missing_type(self):
        """Test a spec without a type fails."""
        result = validate_distribution({"parameters": {"value": 1}})

        assert result.message == ["Distribution type is required"]

    def test_unknown_type(self):
        """Test an unregistered type fails."""
        result = validate_distribution({"type": "cauchy", "parameters": {}})

        assert result.message == ["Unknown distribution type: cauchy"]
        assert "not supported" in result.details

    def test_type_is_case_insensitive(self):
        """Test that type names ignore case."""
        result = validate_distribution({"type": "NORMAL", "parameters": {"value": 10, "stdDev": 5}})

        assert result.is_valid is True

    def test_missing_parameters(self):
        """Test a spec without parameters fails."""
        result = validate_distribution({"type": "normal"})

        assert result.message == ["Parameters are required"]

    def test_empty_parameters_reach_family_validation(self):
        """Test an empty mapping is passed to the family rather than rejected."""
        result = validate_distribution({"type": "uniform", "parameters": {}})

        assert result.message == ["Minimum value is required", "Maximum value is required"]

    def test_family_errors_pass_through(self):
        """Test family validation messages are returned unchanged."""
        result = validate_distribution({"type": "normal", "parameters": {"value": 10, "stdDev": -1}})

        assert result.is_valid is False
        assert result.message == ["Standard deviation must be positive"]

    def test_custom_registry(self):
        """Test types are resolved against the given registry."""
        registry = DistributionRegistry([UniformDistribution()])
        spec = {"type": "normal", "parameters": {"value": 10, "stdDev": 5}}

        assert validate_distribution(spec, registry=registry).message == ["Unknown distribution type: normal"]


class TestTimeSeriesValidation:
    """Test validation of time-series mode specs."""

    def make_spec(self, dist_type="normal", parameters=None, ts_parameters=None):
        return {
            "type": dist_type,
            "parameters": parameters or {"value": 10, "stdDev": 5},
            "timeSeriesMode": True,
            "timeSeriesParameters": ts_parameters,
        }

    def test_missing_time_series_parameters(self):
        """Test time-series mode requires time-series parameters."""
        result = validate_distribution(self.make_spec())

        assert result.message == ["Time series parameters are required in time series mode"]

    def test_series_must_be_list(self):
        """Test the series must be an array."""
        result = validate_distribution(self.make_spec(ts_parameters={"value": "1,2,3"}))

        assert result.message == ["Time series data must be an array"]

    def test_invalid_points(self):
        """Test points need both year and value."""
        result = validate_distribution(self.make_spec(ts_parameters={"value": [{"year": 0}, {"value": 1}]}))

        assert result.message == ["Time series contains invalid data points"]
        assert result.details.startswith("2 data points")

    def test_too_few_points_is_a_warning(self):
        """Test a short series stays valid with a warning."""
        result = validate_distribution(self.make_spec(ts_parameters={"value": ts_points(10, 11)}))

        assert result.is_valid is True
        assert result.warning == ["Time series has fewer than recommended 5 data points"]

    def test_enough_points_no_warning(self):
        """Test a symmetric series of sufficient length has no warnings."""
        result = validate_distribution(self.make_spec(ts_parameters={"value": ts_points(9, 10, 10, 10, 11)}))

        assert result.is_valid is True
        assert result.warning == []

    def test_non_positive_values_warn_for_positive_families(self):
        """Test non-positive data for lognormal is reported as a warning."""
        spec = self.make_spec(
            dist_type="lognormal",
            parameters={"mu": 1, "sigma": 0.5},
            ts_parameters={"value": ts_points(1, 2, -3, 4, 5)},
        )

        result = validate_distribution(spec)

        assert result.is_valid is True
        assert result.warning == ["lognormal distribution requires all values to be positive"]

    def test_warnings_accumulate(self):
        """Test length and compatibility warnings are both reported."""
        spec = self.make_spec(
            dist_type="weibull",
            parameters={"scale": 8, "shape": 2},
            ts_parameters={"value": ts_points(0, 1)},
        )

        result = validate_distribution(spec)

        assert result.warning == [
            "Time series has fewer than recommended 6 data points",
            "weibull distribution requires all values to be positive",
        ]

    def test_skewed_normal_data_warns(self):
        """Test strongly skewed data suggests another family."""
        result = validate_distribution(self.make_spec(ts_parameters={"value": ts_points(1, 1, 1, 1, 10)}))

        assert result.is_valid is True
        assert len(result.warning) == 1
        assert "skewed" in result.warning[0]

    def test_time_series_checks_can_be_skipped(self):
        """Test validate_time_series=False ignores the series."""
        result = validate_distribution(self.make_spec(), validate_time_series=False)

        assert result.is_valid is True


class TestCheckDataCompatibility:
    """Test data/family compatibility checks."""

    def test_no_points(self):
        """Test empty data has nothing to report."""
        assert check_data_compatibility("lognormal", []) is None

    def test_positive_family_with_positive_data(self):
        """Test strictly positive data suits positive-only families."""
        assert check_data_compatibility("gamma", ts_points(1, 2, 3)) is None

    def test_positive_family_with_zero(self):
        """Test zero is not allowed for positive-only families."""
        result = check_data_compatibility("exponential", ts_points(0, 2, 3))

        assert result.is_valid is False
        assert result.message == ["exponential distribution requires all values to be positive"]

    def test_normal_symmetric(self):
        """Test symmetric data suits normal."""
        assert check_data_compatibility("normal", ts_points(9, 10, 11)) is None

    def test_normal_needs_more_than_two_points(self):
        """Test the skew check needs at least three points."""
        assert check_data_compatibility("normal", ts_points(1, 100)) is None

    def test_normal_skewed(self):
        """Test the mean/median gap triggers a warning."""
        result = check_data_compatibility("normal", ts_points(1, 1, 1, 1, 10))

        assert result.is_valid is True
        assert result.warning == [
            "Data appears skewed. Consider using lognormal or weibull distribution instead."
        ]

    def test_other_families_unchecked(self):
        """Test families without data constraints report nothing."""
        assert check_data_compatibility("uniform", ts_points(-5, 0, 100)) is None
