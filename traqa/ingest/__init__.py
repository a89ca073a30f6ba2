"""
TRAQA Ingestion Component

Validation and typed representation of decoded UAV flight logs.

Main Classes:
    - FlightRecord: Immutable flight log (samples, ideal route, extras)
    - FlightSample: One telemetry point with defaults applied
    - InvalidFlightDataError: Raised for structurally invalid logs

Example:
    >>> from traqa.ingest import read_flight_record
    >>> record = read_flight_record(json.load(open('flight.json')))
    >>> len(record.samples)
    120
"""

from .models import (
    FlightSample,
    FlightRecord,
    CommandStats,
    BatteryInfo,
    TurnEvent,
    DegradationEvent,
    RecoveryEvent,
    TrajectoryReport,
)
from .reader import InvalidFlightDataError, read_flight_record, parse_sample, ensure_record

# Utilities
from . import constants

__all__ = [
    # Data model
    "FlightSample",
    "FlightRecord",
    "CommandStats",
    "BatteryInfo",
    "TurnEvent",
    "DegradationEvent",
    "RecoveryEvent",
    "TrajectoryReport",
    # Reading
    "InvalidFlightDataError",
    "read_flight_record",
    "parse_sample",
    "ensure_record",
    # Modules
    "constants",
]
