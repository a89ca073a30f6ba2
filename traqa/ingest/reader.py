"""
Flight Log Reader
Validates a decoded flight log mapping and converts it into a FlightRecord.

Structural problems are reported before any analysis runs. Everything
else (missing targets, errors, battery or command data) is accepted and
left to the analyzers to degrade gracefully.
"""

import logging
from math import isfinite
from numbers import Real
from typing import Any, Mapping, Optional, Sequence

from .constants import (
    DEFAULT_NETWORK_QUALITY,
    DEFAULT_MINIMUM_VOLTAGE,
    REQUIRED_SAMPLE_FIELDS,
    ROUTE_KEYS,
    SAMPLES_KEYS,
    VALID_PHASES,
)
from .models import BatteryInfo, CommandStats, FlightRecord, FlightSample, Vector3

logger = logging.getLogger(__name__)


class InvalidFlightDataError(ValueError):
    """Raised when a flight log is structurally unusable."""


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and isfinite(value)


def _first_present(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _parse_vector(value: Any, label: str) -> Vector3:
    """Accept {x, y, z} mappings or 3-element sequences."""
    if isinstance(value, Mapping):
        coords = [value.get('x'), value.get('y'), value.get('z')]
    elif isinstance(value, (list, tuple)) and len(value) == 3:
        coords = list(value)
    else:
        raise InvalidFlightDataError(f"{label} must be an (x, y, z) point")

    if not all(_is_number(c) for c in coords):
        raise InvalidFlightDataError(f"{label} has non-numeric or non-finite coordinates")

    return (float(coords[0]), float(coords[1]), float(coords[2]))


def parse_sample(point: Mapping[str, Any], index: int) -> FlightSample:
    """
    Convert one decoded telemetry point into a FlightSample.

    Args:
        point: Mapping with x, y, z, time and optional telemetry fields
        index: Position of the point in the log (for error messages)

    Returns:
        FlightSample with defaults applied

    Raises:
        InvalidFlightDataError: If a required field is missing or malformed
    """
    if not isinstance(point, Mapping):
        raise InvalidFlightDataError(f"Sample {index} is not an object")

    for key in REQUIRED_SAMPLE_FIELDS:
        if point.get(key) is None:
            raise InvalidFlightDataError(f"Missing field '{key}' in sample {index}")
        if not _is_number(point[key]):
            raise InvalidFlightDataError(f"Field '{key}' in sample {index} is not a finite number")

    phase = point.get('phase')
    if phase is None:
        raise InvalidFlightDataError(f"Missing field 'phase' in sample {index}")
    if phase not in VALID_PHASES:
        raise InvalidFlightDataError(f"Unknown phase '{phase}' in sample {index}")

    target = point.get('target')
    error = point.get('error')
    if error is not None and not _is_number(error):
        raise InvalidFlightDataError(f"Field 'error' in sample {index} is not a finite number")

    quality = point.get('networkQuality', point.get('network_quality'))
    if quality is None:
        quality = DEFAULT_NETWORK_QUALITY
    elif not _is_number(quality):
        raise InvalidFlightDataError(f"Field 'networkQuality' in sample {index} is not a finite number")

    stabilized = point.get('stabilized')
    if stabilized is None:
        stabilized = False
    elif not isinstance(stabilized, bool):
        raise InvalidFlightDataError(f"Field 'stabilized' in sample {index} is not a boolean")

    return FlightSample(
        position=(float(point['x']), float(point['y']), float(point['z'])),
        time=float(point['time']),
        phase=phase,
        target=_parse_vector(target, f"Target of sample {index}") if target is not None else None,
        error=float(error) if error is not None else None,
        network_quality=float(quality),
        stabilized=stabilized,
    )


def _optional_number(value: Any, label: str, default: float) -> float:
    """Finite number or ``default`` when absent."""
    if value is None:
        return default
    if not _is_number(value):
        raise InvalidFlightDataError(f"{label} is not a finite number")
    return float(value)


def _parse_command_stats(data: Optional[Mapping[str, Any]]) -> Optional[CommandStats]:
    if not data:
        return None
    attempts = data.get('total_attempts', data.get('totalAttempts'))
    return CommandStats(
        sent=int(_optional_number(data.get('sent'), "Command count 'sent'", 0)),
        dropped=int(_optional_number(data.get('dropped'), "Command count 'dropped'", 0)),
        total_attempts=int(_optional_number(attempts, "Command count 'total_attempts'", 0)),
    )


def _parse_battery(data: Optional[Mapping[str, Any]]) -> Optional[BatteryInfo]:
    if not data:
        return None
    start = data.get('start_voltage', data.get('startVoltage'))
    minimum = data.get('minimum_required', data.get('minimumRequired'))
    return BatteryInfo(
        start_voltage=_optional_number(start, "Battery start voltage", 0.0),
        minimum_required=_optional_number(
            minimum, "Battery minimum voltage", DEFAULT_MINIMUM_VOLTAGE
        ),
    )


def read_flight_record(data: Mapping[str, Any]) -> FlightRecord:
    """
    Validate a decoded flight log and build a FlightRecord.

    The log uses the ground station's JSON layout: ``position_data`` (or
    ``samples``) holds the telemetry points and ``sequence`` (or
    ``ideal_route``) the planned waypoints.

    Args:
        data: Decoded flight log

    Returns:
        Immutable FlightRecord

    Raises:
        InvalidFlightDataError: If the log is structurally invalid
    """
    if not isinstance(data, Mapping):
        raise InvalidFlightDataError("Flight log must be an object")

    points = _first_present(data, SAMPLES_KEYS)
    if not isinstance(points, (list, tuple)) or len(points) == 0:
        raise InvalidFlightDataError("Position data must be a non-empty array")

    route = _first_present(data, ROUTE_KEYS)
    if route is None:
        route = []
    if not isinstance(route, (list, tuple)):
        raise InvalidFlightDataError("Sequence must be an array")

    samples = tuple(parse_sample(point, i) for i, point in enumerate(points))
    ideal_route = tuple(
        _parse_vector(waypoint, f"Waypoint {i}") for i, waypoint in enumerate(route)
    )

    for i in range(1, len(samples)):
        if samples[i].time < samples[i - 1].time:
            # Out-of-order pairs are skipped by the analyzers, not rejected
            logger.warning(f"Sample {i} has a timestamp earlier than its predecessor")
            break

    record = FlightRecord(
        samples=samples,
        ideal_route=ideal_route,
        command_stats=_parse_command_stats(data.get('command_stats', data.get('commandStats'))),
        battery=_parse_battery(data.get('battery')),
        response_time=_optional_number(
            data.get('response_time', data.get('responseTime')), "Response time", 0.0
        ),
        timestamp=data.get('timestamp'),
        name=data.get('flightName', data.get('name')),
    )

    logger.debug(f"Read flight record with {len(samples)} samples, {len(ideal_route)} waypoints")
    return record


def ensure_record(data: Any) -> FlightRecord:
    """Return ``data`` unchanged if it is a FlightRecord, otherwise read it."""
    if isinstance(data, FlightRecord):
        if not data.samples:
            raise InvalidFlightDataError("Flight record has no samples")
        return data
    return read_flight_record(data)

