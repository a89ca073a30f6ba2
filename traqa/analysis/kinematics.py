"""
Kinematics Analyzer
Derives velocity, acceleration and altitude profiles from timed positions.
"""

import logging
from typing import Any, Dict, List, Sequence

from ..ingest.models import FlightSample
from ..utils import distance3d
from .constants import ACTIVE_VELOCITY_THRESHOLD, VERTICAL_MOVEMENT_THRESHOLD
from .statistics import mean, stddev, safe_min, safe_max

logger = logging.getLogger(__name__)


def velocity_between(a: FlightSample, b: FlightSample) -> float:
    """Average speed from ``a`` to ``b``; 0 when time does not advance."""
    delta_time = b.time - a.time
    if delta_time <= 0:
        return 0.0
    return distance3d(a.position, b.position) / delta_time


def active_flight_time(samples: Sequence[FlightSample]) -> float:
    """
    Time spent moving faster than the idle threshold.

    Args:
        samples: Flight samples ordered by time

    Returns:
        Sum of pair durations whose speed exceeds 0.05 m/s
    """
    active_time = 0.0

    for i in range(1, len(samples)):
        delta_time = samples[i].time - samples[i - 1].time
        if velocity_between(samples[i - 1], samples[i]) > ACTIVE_VELOCITY_THRESHOLD:
            active_time += delta_time

    return active_time


def smoothness_index(velocities: Sequence[float]) -> float:
    """
    Smoothness of a velocity profile.

    1 means constant speed; the index drops toward 0 as the mean absolute
    change between consecutive velocities approaches the mean velocity.
    """
    if len(velocities) < 2:
        return 1.0

    velocity_changes = [
        abs(velocities[i] - velocities[i - 1]) for i in range(1, len(velocities))
    ]

    avg_velocity = mean(velocities)
    if avg_velocity <= 0:
        return 1.0

    return max(0.0, 1 - mean(velocity_changes) / avg_velocity)


class KinematicsAnalyzer:
    """
    Velocity and acceleration analysis of a flight.

    Pairs of samples whose timestamps do not advance are skipped one by one;
    they never abort the analysis.
    """

    def analyze_velocity(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Analyze velocity and acceleration.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Velocity statistics, profiles and smoothness index
        """
        velocities: List[float] = []
        accelerations: List[float] = []

        for i in range(1, len(samples)):
            delta_time = samples[i].time - samples[i - 1].time
            if delta_time <= 0:
                continue

            velocity = distance3d(samples[i - 1].position, samples[i].position) / delta_time
            velocities.append(velocity)

            if len(velocities) > 1:
                accelerations.append((velocity - velocities[-2]) / delta_time)

        skipped = max(0, len(samples) - 1 - len(velocities))
        if skipped:
            logger.debug(f"Skipped {skipped} sample pairs with non-increasing time")

        return {
            'averageVelocity': mean(velocities),
            'maxVelocity': safe_max(velocities),
            'minVelocity': safe_min(velocities),
            'velocityVariation': stddev(velocities),
            'averageAcceleration': mean(accelerations),
            'maxAcceleration': safe_max(accelerations),
            'velocityProfile': velocities,
            'accelerationProfile': accelerations,
            'smoothnessIndex': smoothness_index(velocities),
            'activeFlightTime': active_flight_time(samples),
        }

    def analyze_altitude(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Analyze the altitude profile.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Altitude range, stability and count of vertical movements
        """
        altitudes = [s.z for s in samples]
        altitude_changes = [altitudes[i] - altitudes[i - 1] for i in range(1, len(altitudes))]

        min_altitude = safe_min(altitudes)
        max_altitude = safe_max(altitudes)

        return {
            'minAltitude': min_altitude,
            'maxAltitude': max_altitude,
            'averageAltitude': mean(altitudes),
            'altitudeRange': max_altitude - min_altitude,
            'altitudeStability': stddev(altitudes),
            'verticalMovements': len(
                [c for c in altitude_changes if abs(c) > VERTICAL_MOVEMENT_THRESHOLD]
            ),
            'altitudeProfile': altitudes,
        }
