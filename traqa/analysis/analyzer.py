"""
Main Flight Analyzer
Coordinates all analysis components.
"""

import concurrent.futures
import logging
from typing import Any, Callable, Dict, Optional, Union, Mapping

from ..config import Config
from ..ingest.models import FlightRecord, TrajectoryReport
from ..ingest.reader import ensure_record
from .kinematics import KinematicsAnalyzer
from .path_analyzer import PathAnalyzer
from .stability import StabilityAnalyzer
from .network import NetworkAnalyzer
from .performance import PerformanceAnalyzer
from .scorer import QualityScorer
from .reporter import ReportBuilder

logger = logging.getLogger(__name__)

FlightInput = Union[FlightRecord, Mapping[str, Any]]


class FlightAnalyzer:
    """
    Main analyzer coordinating all analysis components.

    Every sub-analyzer reads the same immutable FlightRecord, so they can
    run in any order or concurrently; scoring waits for all of them.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize flight analyzer.

        Args:
            config: Runtime configuration (defaults are used when omitted)
        """
        self.config = config or Config()

        # Initialize components
        self.kinematics = KinematicsAnalyzer()
        self.path_analyzer = PathAnalyzer()
        self.stability = StabilityAnalyzer()
        self.network = NetworkAnalyzer()
        self.performance = PerformanceAnalyzer()
        self.scorer = QualityScorer()
        self.builder = ReportBuilder()

    def _tasks(self, record: FlightRecord) -> Dict[str, Callable[[], Dict[str, Any]]]:
        samples = record.samples
        return {
            'pathDeviation': lambda: self.path_analyzer.analyze_deviation(samples),
            'velocityAnalysis': lambda: self.kinematics.analyze_velocity(samples),
            'altitudeProfile': lambda: self.kinematics.analyze_altitude(samples),
            'turnAnalysis': lambda: self.path_analyzer.analyze_turns(samples),
            'stabilityMetrics': lambda: self.stability.analyze_stability(samples),
            'phaseAnalysis': lambda: self.stability.analyze_phases(samples),
            'networkCorrelation': lambda: self.network.analyze_correlation(samples),
            'networkPerformance': lambda: self.network.analyze_performance(samples),
            'trajectoryEfficiency': lambda: self.path_analyzer.analyze_efficiency(
                samples, record.ideal_route
            ),
            'performanceMetrics': lambda: self.performance.analyze(record),
            'flightStatistics': lambda: self.performance.flight_statistics(record),
        }

    def _run_tasks(self, tasks: Dict[str, Callable[[], Dict[str, Any]]]) -> Dict[str, Any]:
        """Run sub-analyses sequentially or on a thread pool; keys keep task order."""
        if not self.config.analysis_parallel:
            results = {}
            for name, task in tasks.items():
                logger.debug(f"Running {name}")
                results[name] = task()
            return results

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.config.analysis_max_workers
        ) as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            return {name: future.result() for name, future in futures.items()}

    def analyze(self, flight: FlightInput) -> TrajectoryReport:
        """
        Run the complete analysis suite on one flight.

        Args:
            flight: FlightRecord or decoded flight log mapping

        Returns:
            TrajectoryReport with summary, detailed sections and recommendations

        Raises:
            InvalidFlightDataError: If the flight log is structurally invalid
        """
        record = ensure_record(flight)

        detailed = self._run_tasks(self._tasks(record))

        assessment = self.scorer.assess(
            record.samples,
            detailed['stabilityMetrics'],
            detailed['trajectoryEfficiency'],
        )
        detailed['qualityAssessment'] = assessment

        recommendations = self.scorer.recommendations(detailed, assessment)
        report = self.builder.build(record, detailed, recommendations)

        logger.info(
            f"Analyzed {len(record.samples)} samples: score {assessment['overallScore']}"
            f" (grade {assessment['grade']}), {len(recommendations)} recommendations"
        )
        return report

    def assess_quality(self, flight: FlightInput, report: TrajectoryReport) -> Dict[str, Any]:
        """
        Rebuild the quality assessment from a stored report.

        Uses the report's stability and efficiency sections instead of
        recomputing them, plus the record's samples for accuracy and
        network adaptability.

        Args:
            flight: FlightRecord or decoded flight log mapping
            report: Report previously returned by ``analyze``

        Returns:
            Quality assessment dictionary
        """
        record = ensure_record(flight)
        return self.scorer.assess(
            record.samples,
            report.detailed['stabilityMetrics'],
            report.detailed['trajectoryEfficiency'],
        )


def analyze(flight: FlightInput, config: Optional[Config] = None) -> TrajectoryReport:
    """Analyze one flight with a fresh FlightAnalyzer."""
    return FlightAnalyzer(config).analyze(flight)


def assess_quality(flight: FlightInput, report: TrajectoryReport) -> Dict[str, Any]:
    """Quality assessment of a flight from a previously computed report."""
    return FlightAnalyzer().assess_quality(flight, report)
