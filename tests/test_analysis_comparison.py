"""
Tests for multi-flight comparison and trends.
"""

import pytest
from traqa.analysis import FlightAnalyzer
from traqa.analysis.comparison import compare_flights, performance_trend, rank_flights


@pytest.fixture
def flights(perfect_log, degraded_log):
    analyzer = FlightAnalyzer()
    return [
        ("degraded", analyzer.analyze(degraded_log)),
        ("perfect", analyzer.analyze(perfect_log)),
    ]


class TestCompareFlights:
    """Tests for compare_flights."""

    def test_rows_and_ranges(self, flights):
        """Test per-flight rows and metric ranges."""
        result = compare_flights(flights)

        assert [row["name"] for row in result["flights"]] == ["degraded", "perfect"]
        quality = result["metrics"]["qualityRange"]
        assert quality["max"] == 100
        assert quality["min"] < 100
        assert quality["min"] <= quality["average"] <= quality["max"]
        assert result["metrics"]["errorRange"]["min"] == 0.0

    def test_insights(self, flights):
        """Test best flight and performance gap insights."""
        insights = compare_flights(flights)["insights"]

        assert insights[0]["type"] == "best_performance"
        assert insights[0]["flight"] == "perfect"
        assert insights[1]["type"] == "performance_gap"
        assert insights[1]["improvementPotential"] in ("high", "medium")

    def test_single_flight(self, flights):
        """Test a single flight has no gap."""
        result = compare_flights(flights[:1])
        assert "0.0%" in result["insights"][1]["message"]

    def test_empty(self):
        """Test comparing no flights is an error."""
        with pytest.raises(ValueError):
            compare_flights([])


class TestRankFlights:
    """Tests for rank_flights."""

    def test_ranking(self, flights):
        """Test flights are ordered best first."""
        ranking = rank_flights(flights)

        assert [entry["name"] for entry in ranking] == ["perfect", "degraded"]
        assert [entry["rank"] for entry in ranking] == [1, 2]
        assert ranking[0]["grade"] == "A"


class TestPerformanceTrend:
    """Tests for performance_trend."""

    def test_improving(self):
        """Test a rising series."""
        result = performance_trend([("2024-01", 80), ("2024-02", 85), ("2024-03", 90)])

        assert result["trend"] == "improving"
        assert result["overallChange"] == pytest.approx(12.5)
        assert result["totalDataPoints"] == 3
        assert result["averageValue"] == pytest.approx(85.0)
        assert result["bestPeriod"] == {"period": "2024-03", "value": 90}
        assert result["worstPeriod"] == {"period": "2024-01", "value": 80}

    def test_declining_and_stable(self):
        """Test the 5% band around zero change."""
        assert performance_trend([("a", 100), ("b", 90)])["trend"] == "declining"
        assert performance_trend([("a", 100), ("b", 103)])["trend"] == "stable"

    def test_zero_start(self):
        """Test a series starting at zero has no relative change."""
        result = performance_trend([("a", 0), ("b", 50)])

        assert result["overallChange"] is None
        assert result["trend"] == "improving"

    def test_insufficient_data(self):
        """Test fewer than two points."""
        assert "message" in performance_trend([("a", 80)])
        assert "message" in performance_trend([])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
