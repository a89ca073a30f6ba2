"""
Path & Turn Analysis
Compares the flown path with its targets and the planned route, and
detects heading changes along the way.

Deviation and efficiency use full 3D distances. Turn detection works on
horizontal headings only, so climbs and descents never count as turns.
"""

import logging
from math import degrees
from typing import Any, Dict, List, Optional, Sequence

from ..ingest.models import FlightSample, TurnEvent, Vector3
from ..utils import distance3d, path_length, bearing, wrap_angle
from .constants import (
    HIGH_DEVIATION_THRESHOLD,
    TURN_THRESHOLD_RAD,
    SHARP_TURN_THRESHOLD_DEG,
)
from .statistics import mean, stddev, trend, safe_min, safe_max

logger = logging.getLogger(__name__)

TURN_SHARP = "sharp"
TURN_GENTLE = "gentle"


class PathAnalyzer:
    """
    Deviation, turn and efficiency analysis of a flown path.
    """

    def analyze_deviation(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Measure how far the vehicle was from its commanded target.

        Only samples carrying a target contribute.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Deviation statistics, trend and high-deviation points
        """
        deviations: List[float] = []
        deviation_points: List[Dict[str, Any]] = []

        for index, sample in enumerate(samples):
            if sample.target is None:
                continue

            deviation = distance3d(sample.position, sample.target)
            deviations.append(deviation)

            if deviation > HIGH_DEVIATION_THRESHOLD:
                deviation_points.append({
                    'index': index,
                    'position': list(sample.position),
                    'target': list(sample.target),
                    'deviation': deviation,
                    'phase': sample.phase,
                })

        return {
            'averageDeviation': mean(deviations),
            'maxDeviation': safe_max(deviations),
            'minDeviation': safe_min(deviations),
            'deviationStdDev': stddev(deviations),
            'highDeviationPoints': deviation_points,
            'deviationTrend': trend(deviations),
        }

    def detect_turns(self, samples: Sequence[FlightSample]) -> List[TurnEvent]:
        """
        Detect heading changes larger than ~15 degrees.

        Args:
            samples: Flight samples ordered by time

        Returns:
            TurnEvent per interior sample whose heading change exceeds the threshold
        """
        return [turn for turn, _ in self._bearing_changes(samples) if turn is not None]

    def analyze_turns(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Analyze turn geometry.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Turn counts, turn rates, turn list and path smoothness
        """
        changes = self._bearing_changes(samples)
        bearing_changes = [change for _, change in changes]
        turns = [turn for turn, _ in changes if turn is not None]
        turn_rates = [abs(change) for change in bearing_changes]

        return {
            'totalTurns': len(turns),
            'sharpTurns': len([t for t in turns if t.classification == TURN_SHARP]),
            'averageTurnRate': mean(turn_rates),
            'maxTurnRate': safe_max(turn_rates),
            'turns': [t.to_dict() for t in turns],
            'pathSmoothness': 1 / (1 + stddev(bearing_changes)),
        }

    def _bearing_changes(self, samples: Sequence[FlightSample]) -> List[tuple]:
        """Pairs of (TurnEvent or None, wrapped bearing change) per interior sample."""
        changes = []

        for i in range(1, len(samples) - 1):
            prev, curr, nxt = samples[i - 1], samples[i], samples[i + 1]

            change = wrap_angle(
                bearing(curr.position, nxt.position) - bearing(prev.position, curr.position)
            )

            turn: Optional[TurnEvent] = None
            if abs(change) > TURN_THRESHOLD_RAD:
                change_deg = degrees(change)
                turn = TurnEvent(
                    index=i,
                    position=curr.position,
                    bearing_change_degrees=change_deg,
                    sharpness_radians=abs(change),
                    phase=curr.phase,
                    classification=TURN_SHARP if abs(change_deg) > SHARP_TURN_THRESHOLD_DEG else TURN_GENTLE,
                )

            changes.append((turn, change))

        return changes

    def analyze_efficiency(
        self,
        samples: Sequence[FlightSample],
        ideal_route: Sequence[Vector3],
    ) -> Dict[str, Any]:
        """
        Compare flown distance with the planned route length.

        Args:
            samples: Flight samples ordered by time
            ideal_route: Planned waypoint sequence

        Returns:
            Distances, efficiency ratio and path optimality. The ratio is None
            (with insufficientMotion set) when the vehicle did not move.
        """
        actual_distance = path_length([s.position for s in samples])
        ideal_distance = path_length(ideal_route)

        insufficient_motion = actual_distance <= 0
        if insufficient_motion:
            logger.warning("No motion recorded; efficiency ratio cannot be evaluated")

        return {
            'actualDistance': actual_distance,
            'idealDistance': ideal_distance,
            'efficiencyRatio': None if insufficient_motion else ideal_distance / actual_distance,
            'excessDistance': actual_distance - ideal_distance,
            'pathOptimality': self._path_optimality(samples, ideal_route),
            'insufficientMotion': insufficient_motion,
        }

    def _path_optimality(
        self,
        samples: Sequence[FlightSample],
        ideal_route: Sequence[Vector3],
    ) -> float:
        """
        Average ratio of direct leg length to flown leg length.

        A leg's flown length is the path through the samples whose target is
        the leg's end waypoint.
        """
        total_optimality = 0.0
        legs = 0

        for i in range(1, len(ideal_route)):
            target = tuple(ideal_route[i])
            leg_positions = [s.position for s in samples if s.target == target]
            if not leg_positions:
                continue

            actual_path = path_length(leg_positions)
            if actual_path > 0:
                total_optimality += distance3d(ideal_route[i - 1], target) / actual_path
                legs += 1

        return total_optimality / legs if legs > 0 else 1.0
