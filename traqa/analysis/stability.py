"""
Stability & Phase Analysis
Stabilization rate, jitter and per-phase behaviour of a flight.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..ingest.constants import PHASE_WAYPOINT, PHASE_TRANSIT
from ..ingest.models import FlightSample
from .constants import (
    STABILITY_ERROR_WEIGHT,
    STABILITY_STABILIZATION_WEIGHT,
    STABILITY_JITTER_WEIGHT,
    WAYPOINT_DWELL_GAP_S,
)
from .kinematics import velocity_between
from .statistics import mean, stddev, safe_max

logger = logging.getLogger(__name__)


def _errors(samples: Sequence[FlightSample]) -> List[float]:
    return [s.error for s in samples if s.error is not None]


def stabilization_ratio(samples: Sequence[FlightSample]) -> float:
    """Fraction of samples flagged as stabilized."""
    if len(samples) == 0:
        return 0.0
    return len([s for s in samples if s.stabilized]) / len(samples)


def jitter_series(samples: Sequence[FlightSample]) -> List[float]:
    """
    Short-timescale acceleration magnitudes.

    For every sample from the third on, the change between the two preceding
    pair velocities divided by the latest pair duration.
    """
    accelerations = []

    for i in range(2, len(samples)):
        vel1 = velocity_between(samples[i - 2], samples[i - 1])
        vel2 = velocity_between(samples[i - 1], samples[i])

        delta_time = samples[i].time - samples[i - 1].time
        if delta_time > 0:
            accelerations.append(abs(vel2 - vel1) / delta_time)

    return accelerations


class StabilityAnalyzer:
    """
    Stability metrics, composite stability score and phase breakdown.
    """

    def calculate_jitter(self, samples: Sequence[FlightSample]) -> Dict[str, float]:
        """Aggregate jitter as average, maximum and standard deviation (jitterIndex)."""
        accelerations = jitter_series(samples)

        return {
            'averageJitter': mean(accelerations),
            'maxJitter': safe_max(accelerations),
            'jitterIndex': stddev(accelerations),
        }

    def phase_stability(
        self, samples: Sequence[FlightSample], phase: str
    ) -> Optional[Dict[str, Any]]:
        """
        Stabilization rate and average error of one phase.

        Returns:
            Phase statistics, or None when the flight has no samples in that phase
        """
        phase_samples = [s for s in samples if s.phase == phase]
        if not phase_samples:
            return None

        return {
            'stabilizationRate': stabilization_ratio(phase_samples),
            'averageError': mean(_errors(phase_samples)),
            'count': len(phase_samples),
        }

    def stability_score(self, samples: Sequence[FlightSample]) -> float:
        """
        Composite stability score on a 0-100 scale.

        Weighted blend of the error score (1 - mean error), the stabilization
        ratio and the jitter score (1 - jitterIndex), each floored at 0.
        """
        error_score = max(0.0, 1 - mean(_errors(samples)))
        stabilization_score = stabilization_ratio(samples)
        jitter_score = max(0.0, 1 - self.calculate_jitter(samples)['jitterIndex'])

        return (
            error_score * STABILITY_ERROR_WEIGHT
            + stabilization_score * STABILITY_STABILIZATION_WEIGHT
            + jitter_score * STABILITY_JITTER_WEIGHT
        ) * 100

    def analyze_stability(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Complete stability analysis.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Stabilization ratio, jitter metrics, per-phase stability and score
        """
        return {
            'stabilizationRatio': stabilization_ratio(samples),
            'jitterMetrics': self.calculate_jitter(samples),
            'waypointStability': self.phase_stability(samples, PHASE_WAYPOINT),
            'transitStability': self.phase_stability(samples, PHASE_TRANSIT),
            'overallStabilityScore': self.stability_score(samples),
        }

    # --- Phase breakdown ---

    def analyze_phases(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Waypoint-holding and transit behaviour plus phase transitions.

        Args:
            samples: Flight samples ordered by time

        Returns:
            waypointAnalysis, transitAnalysis (None when the phase is absent)
            and phaseTransitions
        """
        waypoints = [s for s in samples if s.phase == PHASE_WAYPOINT]
        transits = [s for s in samples if s.phase == PHASE_TRANSIT]

        waypoint_analysis = None
        if waypoints:
            waypoint_analysis = {
                'count': len(waypoints),
                'averageError': mean(_errors(waypoints)),
                'averageDwellTime': self._waypoint_dwell_time(waypoints),
                'stabilizationRate': stabilization_ratio(waypoints),
            }

        transit_analysis = None
        if transits:
            transit_analysis = {
                'count': len(transits),
                'averageError': mean(_errors(transits)),
                'averageSpeed': self._transit_speed(transits),
                'smoothnessIndex': self._transit_smoothness(transits),
            }

        return {
            'waypointAnalysis': waypoint_analysis,
            'transitAnalysis': transit_analysis,
            'phaseTransitions': self._phase_transitions(samples),
        }

    def _waypoint_dwell_time(self, waypoints: Sequence[FlightSample]) -> float:
        """Mean time between successive waypoint visits separated by > 1s gaps."""
        if len(waypoints) < 2:
            return 0.0

        dwell_times = []
        visit_start = waypoints[0].time

        for sample in waypoints[1:]:
            if sample.time - visit_start > WAYPOINT_DWELL_GAP_S:
                dwell_times.append(sample.time - visit_start)
                visit_start = sample.time

        return mean(dwell_times)

    def _transit_speed(self, transits: Sequence[FlightSample]) -> float:
        if len(transits) < 2:
            return 0.0

        speeds = [velocity_between(transits[i - 1], transits[i]) for i in range(1, len(transits))]
        return mean([s for s in speeds if s > 0])

    def _transit_smoothness(self, transits: Sequence[FlightSample]) -> float:
        if len(transits) < 3:
            return 1.0
        return max(0.0, 1 - mean(jitter_series(transits)))

    def _phase_transitions(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        transitions = []

        for i in range(1, len(samples)):
            if samples[i].phase != samples[i - 1].phase:
                transitions.append({
                    'index': i,
                    'from': samples[i - 1].phase,
                    'to': samples[i].phase,
                    'position': list(samples[i].position),
                    'time': samples[i].time,
                })

        transition_errors = [
            samples[t['index']].error
            for t in transitions
            if samples[t['index']].error is not None
        ]

        return {
            'totalTransitions': len(transitions),
            'transitions': transitions,
            'averageTransitionError': mean(transition_errors),
        }
