"""
Tests for flight log reading and validation.
"""

import json

import pytest
from traqa.ingest import (
    FlightRecord,
    FlightSample,
    InvalidFlightDataError,
    read_flight_record,
    parse_sample,
    ensure_record,
)
from traqa.ingest.constants import DEFAULT_NETWORK_QUALITY, DEFAULT_MINIMUM_VOLTAGE


class TestParseSample:
    """Tests for single telemetry points."""

    def test_defaults_applied(self, make_point):
        """Test optional fields receive their defaults."""
        sample = parse_sample(make_point(1, 2, 3, 0.5), 0)

        assert sample.position == (1.0, 2.0, 3.0)
        assert sample.time == 0.5
        assert sample.phase == "transit"
        assert sample.target is None
        assert sample.error is None
        assert sample.network_quality == DEFAULT_NETWORK_QUALITY
        assert sample.stabilized is False

    def test_optional_fields(self, make_point):
        """Test target, error and network quality parsing."""
        sample = parse_sample(
            make_point(0, 0, 0, 1, phase="waypoint", target=[1, 1, 1],
                       error=0.02, networkQuality=55, stabilized=True),
            3,
        )

        assert sample.is_waypoint
        assert sample.target == (1.0, 1.0, 1.0)
        assert sample.error == 0.02
        assert sample.network_quality == 55.0
        assert sample.stabilized is True

    def test_snake_case_network_quality(self, make_point):
        """Test the alternative network quality key."""
        sample = parse_sample(make_point(0, 0, 0, 0, network_quality=42), 0)
        assert sample.network_quality == 42.0

    @pytest.mark.parametrize("missing", ["x", "y", "z", "time", "phase"])
    def test_missing_required_field(self, make_point, missing):
        """Test every required field is enforced."""
        point = make_point(0, 0, 0, 0)
        del point[missing]

        with pytest.raises(InvalidFlightDataError, match=missing):
            parse_sample(point, 7)

    def test_invalid_values(self, make_point):
        """Test non-numeric coordinates and unknown phases."""
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point("1", 0, 0, 0), 0)
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point(True, 0, 0, 0), 0)
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point(0, 0, 0, 0, phase="landing"), 0)
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point(0, 0, 0, 0, target={"x": 1, "y": 2}), 0)
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point(0, 0, 0, 0, error="big"), 0)
        with pytest.raises(InvalidFlightDataError):
            parse_sample([0, 0, 0, 0], 0)

    @pytest.mark.parametrize("field", ["x", "y", "z", "time", "error", "networkQuality"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_rejected(self, make_point, field, value):
        """Test NaN and infinite values are rejected like non-numeric ones."""
        point = make_point(0, 0, 0, 0, error=0.01, networkQuality=90)
        point[field] = value

        with pytest.raises(InvalidFlightDataError, match=field):
            parse_sample(point, 0)

    def test_non_finite_target_rejected(self, make_point):
        """Test target coordinates must be finite."""
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point(0, 0, 0, 0, target=[0, float("nan"), 0]), 0)

    def test_stabilized_must_be_boolean(self, make_point):
        """Test string flags are not silently treated as true."""
        with pytest.raises(InvalidFlightDataError, match="stabilized"):
            parse_sample(make_point(0, 0, 0, 0, stabilized="false"), 0)
        with pytest.raises(InvalidFlightDataError):
            parse_sample(make_point(0, 0, 0, 0, stabilized=1), 0)

        assert parse_sample(make_point(0, 0, 0, 0, stabilized=None), 0).stabilized is False
        assert parse_sample(make_point(0, 0, 0, 0, stabilized=False), 0).stabilized is False


class TestReadFlightRecord:
    """Tests for complete flight logs."""

    def test_minimal_log(self, make_point):
        """Test a log with only position data."""
        record = read_flight_record({"position_data": [make_point(0, 0, 0, 0)]})

        assert isinstance(record, FlightRecord)
        assert len(record.samples) == 1
        assert record.ideal_route == ()
        assert record.battery is None
        assert record.command_stats is None
        assert record.response_time == 0.0
        assert record.duration == 0.0

    def test_full_log(self, degraded_log):
        """Test battery, command statistics and route parsing."""
        record = read_flight_record(degraded_log)

        assert len(record.samples) == 11
        assert record.ideal_route[1] == (5.0, 0.0, 5.0)
        assert record.battery.start_voltage == 4.2
        assert record.command_stats.sent == 9
        assert record.command_stats.total_attempts == 10
        assert record.response_time == 1.0
        assert record.duration == 10.0
        assert len(record.errors()) == 11

    def test_alternative_keys(self, make_point):
        """Test samples/ideal_route and camelCase sections."""
        record = read_flight_record({
            "samples": [make_point(0, 0, 0, 0), make_point(1, 0, 0, 1)],
            "ideal_route": [[0, 0, 0], [1, 0, 0]],
            "battery": {"startVoltage": 4.0},
            "commandStats": {"sent": 3, "totalAttempts": 4},
            "flightName": "Morning survey",
        })

        assert len(record.ideal_route) == 2
        assert record.battery.minimum_required == DEFAULT_MINIMUM_VOLTAGE
        assert record.command_stats.total_attempts == 4
        assert record.name == "Morning survey"

    @pytest.mark.parametrize("data", [
        None,
        [],
        {},
        {"position_data": []},
        {"position_data": "not a list"},
    ])
    def test_structurally_invalid(self, data):
        """Test logs without usable position data are rejected."""
        with pytest.raises(InvalidFlightDataError):
            read_flight_record(data)

    def test_invalid_sequence(self, make_point):
        """Test the route must be an array of points."""
        with pytest.raises(InvalidFlightDataError):
            read_flight_record({"position_data": [make_point(0, 0, 0, 0)], "sequence": 5})
        with pytest.raises(InvalidFlightDataError):
            read_flight_record({"position_data": [make_point(0, 0, 0, 0)], "sequence": [[1, 2]]})

    def test_non_finite_json_constants(self):
        """Test NaN and Infinity decoded by the json module are rejected."""
        decoded = json.loads(
            '{"position_data": [{"x": 0, "y": 0, "z": 0, "time": 0,'
            ' "phase": "transit", "error": NaN}]}'
        )
        with pytest.raises(InvalidFlightDataError):
            read_flight_record(decoded)

        decoded = json.loads(
            '{"position_data": [{"x": 0, "y": 0, "z": 0, "time": 0,'
            ' "phase": "transit", "networkQuality": Infinity}]}'
        )
        with pytest.raises(InvalidFlightDataError):
            read_flight_record(decoded)

    @pytest.mark.parametrize("extra", [
        {"battery": {"start_voltage": float("nan")}},
        {"battery": {"start_voltage": 4.2, "minimum_required": float("inf")}},
        {"command_stats": {"sent": float("inf"), "total_attempts": 10}},
        {"response_time": float("nan")},
    ])
    def test_non_finite_flight_fields_rejected(self, make_point, extra):
        """Test battery, command and response time values must be finite."""
        data = {"position_data": [make_point(0, 0, 0, 0)]}
        data.update(extra)

        with pytest.raises(InvalidFlightDataError):
            read_flight_record(data)

    def test_out_of_order_time_accepted(self, make_point):
        """Test non-monotonic timestamps are accepted."""
        record = read_flight_record({
            "position_data": [make_point(0, 0, 0, 2), make_point(1, 0, 0, 1)],
        })
        assert len(record.samples) == 2

    def test_invalid_error_is_subclass_of_value_error(self):
        """Test callers can catch ValueError."""
        assert issubclass(InvalidFlightDataError, ValueError)


class TestEnsureRecord:
    """Tests for record normalization."""

    def test_record_passthrough(self, perfect_log):
        """Test an existing record is returned unchanged."""
        record = read_flight_record(perfect_log)
        assert ensure_record(record) is record

    def test_empty_record_rejected(self):
        """Test a record without samples is rejected."""
        with pytest.raises(InvalidFlightDataError):
            ensure_record(FlightRecord(samples=()))

    def test_sample_is_immutable(self):
        """Test samples cannot be modified."""
        sample = FlightSample(position=(0.0, 0.0, 0.0), time=0.0, phase="transit")
        with pytest.raises(AttributeError):
            sample.time = 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
