"""
Quality Scorer
Combines sub-analysis results into a weighted flight-quality score,
letter grade and recommendation list.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..ingest.models import FlightSample
from .constants import (
    ACCURACY_WEIGHT,
    STABILITY_WEIGHT,
    EFFICIENCY_WEIGHT,
    ADAPTABILITY_WEIGHT,
    ACCURACY_ERROR_PENALTY,
    ADAPTABILITY_QUALITY_STDDEV,
    IMPROVEMENT_SCORE_THRESHOLD,
    GRADE_THRESHOLDS,
    LOW_STABILIZATION_RATIO,
    STRONG_NEGATIVE_CORRELATION,
    LOW_EFFICIENCY_RATIO,
    SHARP_TURN_FRACTION,
)
from .statistics import mean, stddev

logger = logging.getLogger(__name__)

IMPROVEMENT_HINTS = {
    'accuracy': 'Improve positioning accuracy through sensor calibration or GPS enhancement',
    'stability': 'Enhance flight stability through PID controller tuning',
    'efficiency': 'Optimize flight path planning and waypoint management',
    'adaptability': 'Implement adaptive algorithms for network condition changes',
}


def accuracy_score(errors: Sequence[float]) -> float:
    """100 minus 1000 points per meter of mean error, floored at 0; 100 without errors."""
    if len(errors) == 0:
        return 100.0
    return max(0.0, 100 - mean(errors) * ACCURACY_ERROR_PENALTY)


def efficiency_score(efficiency_ratio: Optional[float]) -> float:
    """Efficiency ratio as a 0-100 score; neutral 100 when it cannot be evaluated."""
    if efficiency_ratio is None:
        return 100.0
    return min(100.0, max(0.0, efficiency_ratio * 100))


def adaptability_score(samples: Sequence[FlightSample]) -> float:
    """
    How well accuracy held up while link quality varied.

    Only judged when network quality varied noticeably (stddev > 20);
    otherwise the flight scores 100.
    """
    quality_variation = stddev([s.network_quality for s in samples])
    if quality_variation <= ADAPTABILITY_QUALITY_STDDEV:
        return 100.0

    error_variation = stddev([s.error for s in samples if s.error is not None])
    return max(0.0, 100 - error_variation * 100)


def assign_grade(score: float) -> str:
    """Letter grade for an overall score."""
    for grade, minimum in GRADE_THRESHOLDS:
        if score >= minimum:
            return grade
    return "F"


class QualityScorer:
    """
    Weighted flight-quality assessment and recommendation rules.
    """

    def assess(
        self,
        samples: Sequence[FlightSample],
        stability_metrics: Dict[str, Any],
        trajectory_efficiency: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Score a flight.

        Args:
            samples: Flight samples
            stability_metrics: Stability analysis (needs overallStabilityScore)
            trajectory_efficiency: Efficiency analysis (needs efficiencyRatio)

        Returns:
            Overall score, per-component breakdown, grade, improvement hints
            and the components that used a neutral substitute
        """
        errors = [s.error for s in samples if s.error is not None]
        efficiency_ratio = trajectory_efficiency.get('efficiencyRatio')

        scores = {
            'accuracy': accuracy_score(errors),
            'stability': stability_metrics['overallStabilityScore'],
            'efficiency': efficiency_score(efficiency_ratio),
            'adaptability': adaptability_score(samples),
        }

        estimated = []
        if not errors:
            estimated.append('accuracy')
        if efficiency_ratio is None:
            estimated.append('efficiency')
        if estimated:
            logger.warning(f"Quality components scored with neutral defaults: {', '.join(estimated)}")

        overall = (
            scores['accuracy'] * ACCURACY_WEIGHT
            + scores['stability'] * STABILITY_WEIGHT
            + scores['efficiency'] * EFFICIENCY_WEIGHT
            + scores['adaptability'] * ADAPTABILITY_WEIGHT
        )

        return {
            'overallScore': round(overall),
            'breakdown': {name: round(value) for name, value in scores.items()},
            'grade': assign_grade(overall),
            'improvements': self.suggest_improvements(scores),
            'estimatedComponents': estimated,
        }

    def suggest_improvements(self, scores: Dict[str, float]) -> List[str]:
        """One hint per component score below 70."""
        return [
            IMPROVEMENT_HINTS[name]
            for name in ('accuracy', 'stability', 'efficiency', 'adaptability')
            if scores[name] < IMPROVEMENT_SCORE_THRESHOLD
        ]

    # --- Recommendation rules ---

    def recommendations(
        self,
        detailed: Dict[str, Any],
        assessment: Dict[str, Any],
    ) -> List[Dict[str, Any]]:
        """
        Build the ordered recommendation list.

        Rules are evaluated independently and appended in priority order:
        stability, network correlation, efficiency, turn smoothness,
        network performance, then per-component improvement hints.

        Args:
            detailed: Detailed analysis sections
            assessment: Result of ``assess``

        Returns:
            List of {category, severity, message, metric?} dictionaries
        """
        recommendations: List[Dict[str, Any]] = []

        for rule in (
            self._stability_rule,
            self._network_rule,
            self._efficiency_rule,
            self._smoothness_rule,
        ):
            recommendation = rule(detailed)
            if recommendation is not None:
                recommendations.append(recommendation)

        for item in detailed.get('networkPerformance', {}).get('recommendations', []):
            recommendations.append({
                'category': item['category'],
                'severity': item['severity'],
                'message': item['message'],
                'metric': item.get('metric'),
            })

        for improvement in assessment['improvements']:
            recommendations.append({
                'category': 'Performance',
                'severity': 'medium',
                'message': improvement,
            })

        return recommendations

    def _stability_rule(self, detailed: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ratio = detailed['stabilityMetrics']['stabilizationRatio']
        if ratio >= LOW_STABILIZATION_RATIO:
            return None
        return {
            'category': 'Stability',
            'severity': 'high',
            'message': 'Low stabilization rate detected. Consider tuning PID controllers.',
            'metric': f"Stabilization: {ratio * 100:.1f}%",
        }

    def _network_rule(self, detailed: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        corr = detailed['networkCorrelation']['networkErrorCorrelation']
        if corr >= STRONG_NEGATIVE_CORRELATION:
            return None
        return {
            'category': 'Network',
            'severity': 'medium',
            'message': 'Strong correlation between network degradation and flight errors.',
            'metric': f"Correlation: {corr:.3f}",
        }

    def _efficiency_rule(self, detailed: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ratio = detailed['trajectoryEfficiency']['efficiencyRatio']
        if ratio is None or ratio >= LOW_EFFICIENCY_RATIO:
            return None
        return {
            'category': 'Efficiency',
            'severity': 'medium',
            'message': 'Path efficiency could be improved. Consider optimizing waypoint planning.',
            'metric': f"Efficiency: {ratio * 100:.1f}%",
        }

    def _smoothness_rule(self, detailed: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        turns = detailed['turnAnalysis']
        if turns['sharpTurns'] <= turns['totalTurns'] * SHARP_TURN_FRACTION:
            return None
        return {
            'category': 'Smoothness',
            'severity': 'low',
            'message': 'Multiple sharp turns detected. Consider smoother trajectory planning.',
            'metric': f"Sharp turns: {turns['sharpTurns']}/{turns['totalTurns']}",
        }
