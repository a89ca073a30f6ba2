"""
Network-Quality Correlation
Relates link quality to positioning error and detects degradation and
recovery events.

Degradation detection is a two-state machine. ``Idle`` means no window is
open; ``Degrading`` holds the single active window. A window opens on the
first sample below the quality threshold and closes on the first sample
back at or above it. Only windows lasting at least the minimum duration
become events; shorter dips are dropped, and a window still open when the
flight ends has no closing sample and is dropped too.
"""

import logging
from dataclasses import dataclass
from math import floor
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..ingest.models import DegradationEvent, FlightSample, RecoveryEvent, Vector3
from .constants import (
    NETWORK_QUALITY_THRESHOLD,
    DEGRADATION_MIN_DURATION_S,
    SEVERE_QUALITY_THRESHOLD,
    MODERATE_QUALITY_THRESHOLD,
    IMPACT_WINDOW_SIZE,
    CRITICAL_ERROR_FACTOR,
    HIGH_QUALITY_THRESHOLD,
    IMPACT_HIGH_QUALITY,
    IMPACT_LOW_QUALITY,
    NETWORK_BANDS,
)
from .statistics import mean, correlation, describe, safe_min, safe_max

logger = logging.getLogger(__name__)

SEVERITY_SEVERE = "severe"
SEVERITY_MODERATE = "moderate"
SEVERITY_MILD = "mild"


def classify_severity(min_quality: float) -> str:
    """Severity of a degradation window from its lowest quality."""
    if min_quality < SEVERE_QUALITY_THRESHOLD:
        return SEVERITY_SEVERE
    if min_quality < MODERATE_QUALITY_THRESHOLD:
        return SEVERITY_MODERATE
    return SEVERITY_MILD


def _error_pairs(samples: Sequence[FlightSample]) -> Tuple[List[float], List[float]]:
    """Aligned (quality, error) series over the samples that report an error."""
    qualities = []
    errors = []
    for s in samples:
        if s.error is not None:
            qualities.append(s.network_quality)
            errors.append(s.error)
    return qualities, errors


def _mean_error(samples: Sequence[FlightSample]) -> float:
    return mean([s.error for s in samples if s.error is not None])


# --- Degradation state machine ---


@dataclass(frozen=True)
class Idle:
    """No degradation window is open."""


@dataclass(frozen=True)
class Degrading:
    """An open degradation window."""

    start_index: int
    start_time: float
    start_position: Vector3
    min_quality: float

    def lowered_to(self, quality: float) -> "Degrading":
        return Degrading(self.start_index, self.start_time, self.start_position, quality)


DetectorState = Union[Idle, Degrading]


class DegradationDetector:
    """
    Hysteresis detector for network degradation windows.

    Feed samples in time order with ``step``; closed windows long enough to
    count are collected in ``events``.
    """

    def __init__(
        self,
        threshold: float = NETWORK_QUALITY_THRESHOLD,
        min_duration: float = DEGRADATION_MIN_DURATION_S,
    ) -> None:
        self.threshold = threshold
        self.min_duration = min_duration
        self.state: DetectorState = Idle()
        self.events: List[DegradationEvent] = []

    def step(self, index: int, sample: FlightSample) -> None:
        quality = sample.network_quality

        if isinstance(self.state, Idle):
            if quality < self.threshold:
                self.state = Degrading(index, sample.time, sample.position, quality)
            return

        if quality >= self.threshold:
            window = self.state
            self.state = Idle()
            duration = sample.time - window.start_time

            if duration >= self.min_duration:
                self.events.append(DegradationEvent(
                    start_index=window.start_index,
                    end_index=index,
                    start_time=window.start_time,
                    end_time=sample.time,
                    duration=duration,
                    min_quality=window.min_quality,
                    start_position=window.start_position,
                    end_position=sample.position,
                    severity=classify_severity(window.min_quality),
                ))
            else:
                logger.debug(f"Dropped {duration:.2f}s degradation starting at sample {window.start_index}")
        elif quality < self.state.min_quality:
            self.state = self.state.lowered_to(quality)

    def run(self, samples: Sequence[FlightSample]) -> List[DegradationEvent]:
        for index, sample in enumerate(samples):
            self.step(index, sample)
        return self.events


def detect_degradation(samples: Sequence[FlightSample]) -> List[DegradationEvent]:
    """Degradation events of a flight, in time order."""
    return DegradationDetector().run(samples)


def detect_recoveries(samples: Sequence[FlightSample]) -> List[RecoveryEvent]:
    """Every adjacent crossing from below to at-or-above the quality threshold."""
    recoveries = []

    for i in range(1, len(samples)):
        prev, curr = samples[i - 1], samples[i]
        if prev.network_quality < NETWORK_QUALITY_THRESHOLD <= curr.network_quality:
            recoveries.append(RecoveryEvent(
                index=i,
                time=curr.time,
                from_quality=prev.network_quality,
                to_quality=curr.network_quality,
                position=curr.position,
            ))

    return recoveries


class NetworkAnalyzer:
    """
    Network-quality correlation, segmentation and event analysis.
    """

    def analyze_correlation(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Correlate network quality with positional error.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Overall correlation, quality range, band segmentation and
            degradation impact
        """
        qualities = [s.network_quality for s in samples]

        return {
            'networkErrorCorrelation': correlation(*_error_pairs(samples)),
            'averageNetworkQuality': mean(qualities),
            'networkQualityRange': {
                'min': safe_min(qualities),
                'max': safe_max(qualities),
            },
            'networkSegments': self.segment_by_quality(samples),
            'degradationImpact': self.degradation_impact(samples),
        }

    def segment_by_quality(self, samples: Sequence[FlightSample]) -> Dict[str, Dict[str, Any]]:
        """Sample count and mean error per quality band."""
        bands: Dict[str, List[FlightSample]] = {name: [] for name in NETWORK_BANDS}

        for sample in samples:
            for name, lower in NETWORK_BANDS.items():
                if sample.network_quality >= lower:
                    bands[name].append(sample)
                    break

        return {
            name: {'count': len(members), 'avgError': _mean_error(members)}
            for name, members in bands.items()
        }

    def degradation_impact(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Sliding-window correlation, critical threshold and performance drop.
        """
        correlations = []
        for i in range(len(samples) - IMPACT_WINDOW_SIZE + 1):
            window = samples[i:i + IMPACT_WINDOW_SIZE]
            correlations.append(correlation(*_error_pairs(window)))

        performance_drop = self.performance_drop(samples)

        return {
            'impactCorrelation': mean(correlations),
            'criticalThreshold': self.critical_threshold(samples),
            'performanceDrop': performance_drop if performance_drop is not None else 0.0,
            'performanceDropComputable': performance_drop is not None,
        }

    def critical_threshold(self, samples: Sequence[FlightSample]) -> Optional[int]:
        """
        Highest quality decile where the error clearly exceeds the baseline.

        The 90-100 decile is the baseline. Lower deciles are scanned from
        high to low and the first whose mean error exceeds 1.5x the baseline
        is returned.

        Returns:
            Decile lower bound, 100 when no decile exceeds the baseline, or
            None when the flight has no samples in the baseline decile
        """
        bins: Dict[int, List[float]] = {}
        for sample in samples:
            if sample.error is None:
                continue
            decile = min(int(floor(sample.network_quality / 10)) * 10, 90)
            bins.setdefault(decile, []).append(sample.error)

        if 90 not in bins:
            return None

        baseline_error = mean(bins[90])

        for decile in sorted(bins, reverse=True):
            if decile == 90:
                continue
            if mean(bins[decile]) > baseline_error * CRITICAL_ERROR_FACTOR:
                return decile

        return 100

    def performance_drop(self, samples: Sequence[FlightSample]) -> Optional[float]:
        """
        Percent increase of mean error from high-quality to degraded samples.

        Returns:
            Relative increase in percent, or None when either group is empty
            or the high-quality error is 0
        """
        high = [s for s in samples if s.network_quality >= HIGH_QUALITY_THRESHOLD]
        low = [s for s in samples if s.network_quality < NETWORK_QUALITY_THRESHOLD]

        high_error = _mean_error(high)
        if not high or not low or high_error == 0:
            return None

        return (_mean_error(low) - high_error) / high_error * 100

    # --- Network performance ---

    def analyze_performance(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """
        Degradation and recovery events with their impact.

        Args:
            samples: Flight samples ordered by time

        Returns:
            Quality statistics, degradation events, recovery metrics, impact
            assessment and network recommendations
        """
        quality_stats = describe([s.network_quality for s in samples])
        degradation_events = detect_degradation(samples)

        if degradation_events:
            logger.info(f"Detected {len(degradation_events)} network degradation events")

        return {
            'qualityStats': quality_stats,
            'degradationEvents': [e.to_dict() for e in degradation_events],
            'recoveryMetrics': self.recovery_metrics(samples),
            'impactAssessment': self.impact_assessment(samples),
            'recommendations': self.recommendations(quality_stats, degradation_events),
        }

    def recovery_metrics(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """Recovery events and the mean time from last good sample to recovery."""
        recoveries = detect_recoveries(samples)

        recovery_times = []
        for recovery in recoveries:
            for i in range(recovery.index - 1, -1, -1):
                if samples[i].network_quality >= NETWORK_QUALITY_THRESHOLD:
                    recovery_times.append(recovery.time - samples[i].time)
                    break

        return {
            'totalRecoveries': len(recoveries),
            'averageRecoveryTime': mean(recovery_times),
            'recoveryEvents': [r.to_dict() for r in recoveries],
        }

    def impact_assessment(self, samples: Sequence[FlightSample]) -> Dict[str, Any]:
        """Compare accuracy under good (>= 80%) and poor (< 50%) link quality."""
        high = [s for s in samples if s.network_quality >= IMPACT_HIGH_QUALITY]
        low = [s for s in samples if s.network_quality < IMPACT_LOW_QUALITY]

        high_error = _mean_error(high)
        low_error = _mean_error(low)
        computable = high_error > 0 and low_error > 0
        total = len(samples)

        return {
            'highQualityPerformance': {
                'count': len(high),
                'averageError': high_error,
                'percentage': len(high) / total * 100 if total else 0.0,
            },
            'lowQualityPerformance': {
                'count': len(low),
                'averageError': low_error,
                'percentage': len(low) / total * 100 if total else 0.0,
            },
            'performanceImpact': (low_error - high_error) / high_error * 100 if computable else 0.0,
            'impactComputable': computable,
        }

    def recommendations(
        self,
        quality_stats: Dict[str, float],
        degradation_events: Sequence[DegradationEvent],
    ) -> List[Dict[str, Any]]:
        """Network-specific recommendations."""
        recommendations = []

        if quality_stats['average'] < NETWORK_QUALITY_THRESHOLD:
            recommendations.append({
                'category': 'Network',
                'type': 'network_quality',
                'severity': 'high',
                'message': 'Overall network quality is below optimal threshold. '
                           'Consider optimizing antenna placement or upgrading communication hardware.',
                'metric': f"Average quality: {quality_stats['average']:.1f}%",
            })

        severe = [e for e in degradation_events if e.severity == SEVERITY_SEVERE]
        if severe:
            recommendations.append({
                'category': 'Network',
                'type': 'degradation',
                'severity': 'high',
                'message': f"{len(severe)} severe network degradation events detected. "
                           'Investigate environmental factors or interference sources.',
                'metric': f"Severe events: {len(severe)}/{len(degradation_events)}",
            })

        return recommendations
