"""
Flight Comparison
Compares several analyzed flights and summarizes score series over time.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..ingest.models import TrajectoryReport
from .constants import IMPROVEMENT_SCORE_THRESHOLD, SERIES_TREND_THRESHOLD_PCT
from .statistics import mean


def _range(values: Sequence[float]) -> Dict[str, float]:
    return {
        'min': min(values),
        'max': max(values),
        'average': mean(values),
    }


def compare_flights(
    flights: Sequence[Tuple[str, TrajectoryReport]],
) -> Dict[str, Any]:
    """
    Compare analyzed flights.

    Args:
        flights: (name, report) pairs

    Returns:
        Per-flight rows, ranges of quality / error / stability scores and
        insights naming the best flight and the best-to-worst gap

    Raises:
        ValueError: If no flights are given
    """
    if not flights:
        raise ValueError("Cannot compare an empty list of flights")

    rows = []
    for name, report in flights:
        detailed = report.detailed
        rows.append({
            'name': name,
            'qualityScore': report.summary['overallScore'],
            'averageError': detailed['flightStatistics']['positionAccuracy']['overall']['average'],
            'stabilityScore': detailed['stabilityMetrics']['overallStabilityScore'],
            'efficiencyRatio': detailed['trajectoryEfficiency']['efficiencyRatio'],
            'networkImpact': detailed['networkPerformance']['impactAssessment']['performanceImpact'],
        })

    # max/min return the first of equal scores
    best = max(rows, key=lambda r: r['qualityScore'])
    worst = min(rows, key=lambda r: r['qualityScore'])

    return {
        'flights': rows,
        'metrics': {
            'qualityRange': _range([r['qualityScore'] for r in rows]),
            'errorRange': _range([r['averageError'] for r in rows]),
            'stabilityRange': _range([r['stabilityScore'] for r in rows]),
        },
        'insights': [
            {
                'type': 'best_performance',
                'message': f"{best['name']} achieved the highest quality score of {best['qualityScore']}%",
                'flight': best['name'],
            },
            {
                'type': 'performance_gap',
                'message': f"Performance gap of {best['qualityScore'] - worst['qualityScore']:.1f}%"
                           f" between best and worst flights",
                'improvementPotential': (
                    'high' if worst['qualityScore'] < IMPROVEMENT_SCORE_THRESHOLD else 'medium'
                ),
            },
        ],
    }


def performance_trend(
    series: Sequence[Tuple[str, float]],
) -> Dict[str, Any]:
    """
    Summarize a chronological series of metric values.

    Args:
        series: (period label, value) pairs in chronological order

    Returns:
        Overall change, trend label, average and best/worst periods; a
        message only when fewer than two values are given
    """
    if len(series) < 2:
        return {'message': 'Insufficient data for trend analysis'}

    first_value = series[0][1]
    last_value = series[-1][1]
    change: Optional[float] = (
        (last_value - first_value) / first_value * 100 if first_value != 0 else None
    )

    if change is None:
        trend = 'stable' if last_value == first_value else (
            'improving' if last_value > first_value else 'declining'
        )
    elif change > SERIES_TREND_THRESHOLD_PCT:
        trend = 'improving'
    elif change < -SERIES_TREND_THRESHOLD_PCT:
        trend = 'declining'
    else:
        trend = 'stable'

    best = max(series, key=lambda item: item[1])
    worst = min(series, key=lambda item: item[1])

    return {
        'totalDataPoints': len(series),
        'overallChange': change,
        'trend': trend,
        'averageValue': mean([value for _, value in series]),
        'bestPeriod': {'period': best[0], 'value': best[1]},
        'worstPeriod': {'period': worst[0], 'value': worst[1]},
    }


def rank_flights(flights: Sequence[Tuple[str, TrajectoryReport]]) -> List[Dict[str, Any]]:
    """Flights ordered by overall score, best first."""
    ranked = sorted(flights, key=lambda item: item[1].summary['overallScore'], reverse=True)
    return [
        {
            'rank': i,
            'name': name,
            'overallScore': report.summary['overallScore'],
            'grade': report.summary['grade'],
        }
        for i, (name, report) in enumerate(ranked, 1)
    ]
