"""
Tests for deviation, turn and efficiency analysis.
"""

from math import atan, degrees, pi, sqrt

import pytest
from traqa.ingest.models import FlightSample
from traqa.analysis.path_analyzer import PathAnalyzer, TURN_SHARP, TURN_GENTLE


def sample(x, y, t, target=None, phase="transit", z=0.0):
    return FlightSample(
        position=(float(x), float(y), float(z)),
        time=float(t),
        phase=phase,
        target=target,
    )


def path(points):
    return [sample(x, y, t) for t, (x, y) in enumerate(points)]


@pytest.fixture
def analyzer():
    return PathAnalyzer()


class TestDeviation:
    """Tests for target deviation analysis."""

    def test_only_targeted_samples_count(self, analyzer):
        """Test samples without a target are ignored."""
        samples = [
            sample(0, 0, 0, target=(0.0, 0.0, 0.0)),
            sample(1, 0, 1),
            sample(2, 0, 2, target=(2.0, 0.2, 0.0), phase="waypoint"),
        ]
        result = analyzer.analyze_deviation(samples)

        assert result["averageDeviation"] == pytest.approx(0.1)
        assert result["maxDeviation"] == pytest.approx(0.2)
        assert result["minDeviation"] == 0.0
        assert len(result["highDeviationPoints"]) == 1

        point = result["highDeviationPoints"][0]
        assert point["index"] == 2
        assert point["phase"] == "waypoint"
        assert point["deviation"] == pytest.approx(0.2)

    def test_no_targets(self, analyzer):
        """Test a flight without any targets."""
        result = analyzer.analyze_deviation(path([(0, 0), (1, 0)]))

        assert result["averageDeviation"] == 0.0
        assert result["highDeviationPoints"] == []
        assert result["deviationTrend"] == "stable"

    def test_deviation_trend(self, analyzer):
        """Test growing deviation is reported as a trend."""
        samples = [
            sample(0, d, i, target=(0.0, 0.0, 0.0))
            for i, d in enumerate([0.01, 0.01, 0.05, 0.05])
        ]
        assert analyzer.analyze_deviation(samples)["deviationTrend"] == "improving"


class TestTurns:
    """Tests for turn detection."""

    def test_straight_line(self, analyzer):
        """Test a straight path has no turns and full smoothness."""
        result = analyzer.analyze_turns(path([(0, 0), (1, 0), (2, 0), (3, 0)]))

        assert result["totalTurns"] == 0
        assert result["sharpTurns"] == 0
        assert result["pathSmoothness"] == 1.0

    def test_right_angle_turn(self, analyzer):
        """Test a 90 degree corner is one sharp turn."""
        result = analyzer.analyze_turns(path([(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]))

        assert result["totalTurns"] == 1
        assert result["sharpTurns"] == 1
        turn = result["turns"][0]
        assert turn["index"] == 2
        assert turn["bearingChangeDegrees"] == pytest.approx(90.0)
        assert turn["sharpnessRadians"] == pytest.approx(pi / 2)
        assert turn["type"] == TURN_SHARP
        assert result["averageTurnRate"] == pytest.approx(pi / 6)
        assert result["maxTurnRate"] == pytest.approx(pi / 2)
        assert 0.0 < result["pathSmoothness"] < 1.0

    def test_gentle_turn(self, analyzer):
        """Test a ~27 degree heading change is a gentle turn."""
        turns = analyzer.detect_turns(path([(0, 0), (2, 0), (4, 1)]))

        assert len(turns) == 1
        assert turns[0].classification == TURN_GENTLE

    def test_small_heading_change_ignored(self, analyzer):
        """Test heading changes below ~15 degrees are not turns."""
        assert analyzer.detect_turns(path([(0, 0), (10, 0), (20, 1)])) == []

    def test_wraparound(self, analyzer):
        """Test heading change across the +/-pi boundary is wrapped."""
        # ~11 degrees through due west
        assert analyzer.detect_turns(path([(10, 0), (0, 1), (-10, 0)])) == []

        turns = analyzer.detect_turns(path([(10, 0), (0, 3), (-10, 0)]))
        assert len(turns) == 1
        assert turns[0].bearing_change_degrees == pytest.approx(degrees(2 * atan(0.3)))

    def test_climb_is_not_a_turn(self, analyzer):
        """Test altitude changes do not register as turns."""
        samples = [sample(0, 0, 0), sample(1, 0, 1, z=5), sample(2, 0, 2, z=0)]
        assert analyzer.detect_turns(samples) == []

    def test_short_paths(self, analyzer):
        """Test paths with fewer than three samples."""
        result = analyzer.analyze_turns(path([(0, 0), (1, 0)]))

        assert result["totalTurns"] == 0
        assert result["averageTurnRate"] == 0.0
        assert result["pathSmoothness"] == 1.0


class TestEfficiency:
    """Tests for trajectory efficiency."""

    def test_direct_flight(self, analyzer):
        """Test flying exactly the planned route."""
        samples = path([(0, 0), (1, 0), (2, 0)])
        result = analyzer.analyze_efficiency(samples, [(0.0, 0.0, 0.0), (2.0, 0.0, 0.0)])

        assert result["actualDistance"] == pytest.approx(2.0)
        assert result["idealDistance"] == pytest.approx(2.0)
        assert result["efficiencyRatio"] == pytest.approx(1.0)
        assert result["excessDistance"] == pytest.approx(0.0)
        assert result["insufficientMotion"] is False

    def test_detour(self, analyzer):
        """Test a detour lowers the ratio."""
        target = (2.0, 0.0, 0.0)
        samples = [
            sample(0, 0, 0, target=target),
            sample(1, 1, 1, target=target),
            sample(2, 0, 2, target=target),
        ]
        result = analyzer.analyze_efficiency(samples, [(0.0, 0.0, 0.0), target])

        assert result["efficiencyRatio"] == pytest.approx(1 / sqrt(2))
        assert result["pathOptimality"] == pytest.approx(1 / sqrt(2))
        assert result["excessDistance"] == pytest.approx(2 * sqrt(2) - 2)

    def test_no_motion(self, analyzer):
        """Test a hovering vehicle has no efficiency ratio."""
        samples = [sample(1, 1, t) for t in range(4)]
        result = analyzer.analyze_efficiency(samples, [(0.0, 0.0, 0.0), (5.0, 0.0, 0.0)])

        assert result["efficiencyRatio"] is None
        assert result["insufficientMotion"] is True
        assert result["actualDistance"] == 0.0

    def test_optimality_without_matching_targets(self, analyzer):
        """Test legs with no matching samples fall back to full optimality."""
        result = analyzer.analyze_efficiency(path([(0, 0), (3, 0)]), [])

        assert result["idealDistance"] == 0.0
        assert result["efficiencyRatio"] == 0.0
        assert result["pathOptimality"] == 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
