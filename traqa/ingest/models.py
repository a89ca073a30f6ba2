"""
Flight Data Model
Typed, immutable representation of a decoded flight log.

Optional telemetry fields receive their defaults once, when the reader
builds these objects; analyzers never re-apply them.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import (
    DEFAULT_NETWORK_QUALITY,
    DEFAULT_MINIMUM_VOLTAGE,
    PHASE_WAYPOINT,
    PHASE_TRANSIT,
)

Vector3 = Tuple[float, float, float]


@dataclass(frozen=True)
class FlightSample:
    """One telemetry point of a flight."""

    position: Vector3
    time: float
    phase: str
    target: Optional[Vector3] = None
    error: Optional[float] = None
    network_quality: float = DEFAULT_NETWORK_QUALITY
    stabilized: bool = False

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def z(self) -> float:
        return self.position[2]

    @property
    def is_waypoint(self) -> bool:
        return self.phase == PHASE_WAYPOINT

    @property
    def is_transit(self) -> bool:
        return self.phase == PHASE_TRANSIT


@dataclass(frozen=True)
class CommandStats:
    """Uplink command counters reported by the ground station."""

    sent: int = 0
    dropped: int = 0
    total_attempts: int = 0


@dataclass(frozen=True)
class BatteryInfo:
    """Battery voltages at takeoff."""

    start_voltage: float = 0.0
    minimum_required: float = DEFAULT_MINIMUM_VOLTAGE


@dataclass(frozen=True)
class FlightRecord:
    """
    Complete flight log handed to the analysis engine.

    Attributes:
        samples: Telemetry samples ordered by non-decreasing time
        ideal_route: Planned waypoint sequence
        command_stats: Optional command counters
        battery: Optional battery voltages
        response_time: Reported mission response time in seconds
        timestamp: Collaborator-supplied label, not used by the metrics
        name: Collaborator-supplied flight name
    """

    samples: Tuple[FlightSample, ...]
    ideal_route: Tuple[Vector3, ...] = ()
    command_stats: Optional[CommandStats] = None
    battery: Optional[BatteryInfo] = None
    response_time: float = 0.0
    timestamp: Optional[Any] = None
    name: Optional[str] = None

    @property
    def positions(self) -> Tuple[Vector3, ...]:
        return tuple(sample.position for sample in self.samples)

    @property
    def duration(self) -> float:
        """Elapsed time between first and last sample in seconds."""
        if len(self.samples) < 2:
            return 0.0
        return self.samples[-1].time - self.samples[0].time

    def errors(self) -> Tuple[float, ...]:
        """Positional errors of the samples that report one."""
        return tuple(s.error for s in self.samples if s.error is not None)

    def network_qualities(self) -> Tuple[float, ...]:
        return tuple(s.network_quality for s in self.samples)


@dataclass(frozen=True)
class TurnEvent:
    """A detected heading change at an interior sample."""

    index: int
    position: Vector3
    bearing_change_degrees: float
    sharpness_radians: float
    phase: str
    classification: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'position': list(self.position),
            'bearingChangeDegrees': self.bearing_change_degrees,
            'sharpnessRadians': self.sharpness_radians,
            'phase': self.phase,
            'type': self.classification,
        }


@dataclass(frozen=True)
class DegradationEvent:
    """A network-quality dip that lasted at least the minimum duration."""

    start_index: int
    end_index: int
    start_time: float
    end_time: float
    duration: float
    min_quality: float
    start_position: Vector3
    end_position: Vector3
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'startIndex': self.start_index,
            'endIndex': self.end_index,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'duration': self.duration,
            'minQuality': self.min_quality,
            'startPosition': list(self.start_position),
            'endPosition': list(self.end_position),
            'severity': self.severity,
        }


@dataclass(frozen=True)
class RecoveryEvent:
    """Network quality crossing back above the degradation threshold."""

    index: int
    time: float
    from_quality: float
    to_quality: float
    position: Vector3

    @property
    def improvement(self) -> float:
        return self.to_quality - self.from_quality

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'time': self.time,
            'fromQuality': self.from_quality,
            'toQuality': self.to_quality,
            'improvement': self.improvement,
            'position': list(self.position),
        }


def freeze(value: Any) -> Any:
    """Read-only deep view: mappings become MappingProxyType, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Fresh plain dicts and lists from a frozen value."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class TrajectoryReport:
    """
    Result of one flight analysis.

    The report is a pure function of its FlightRecord: it carries no
    identifiers or timestamps, so analyzing the same record twice yields
    equal reports. Its sections are stored as read-only views; ``to_dict``
    hands out an independent copy.
    """

    summary: Mapping[str, Any]
    detailed: Mapping[str, Any]
    recommendations: Tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'summary', freeze(self.summary))
        object.__setattr__(self, 'detailed', freeze(self.detailed))
        object.__setattr__(self, 'recommendations', freeze(self.recommendations))

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form consumed by persistence and export collaborators."""
        return {
            'summary': thaw(self.summary),
            'detailed': thaw(self.detailed),
            'recommendations': thaw(self.recommendations),
        }
