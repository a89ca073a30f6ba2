"""
Report Builder & Generator
Packages analysis results into a TrajectoryReport and renders reports
to files for the command-line tools.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..ingest.models import FlightRecord, TrajectoryReport
from ..utils import format_duration, format_percentage

logger = logging.getLogger(__name__)


class ReportBuilder:
    """
    Assembles the summary, detailed sections and recommendations of a report.
    """

    def build(
        self,
        record: FlightRecord,
        detailed: Dict[str, Any],
        recommendations: List[Dict[str, Any]],
    ) -> TrajectoryReport:
        """
        Build the final report.

        Args:
            record: Analyzed flight record
            detailed: All sub-analysis sections, including qualityAssessment
            recommendations: Ordered recommendation list

        Returns:
            TrajectoryReport
        """
        detailed = dict(detailed)
        detailed['dataQuality'] = self.data_quality(record, detailed)

        return TrajectoryReport(
            summary=self.summary(detailed),
            detailed=detailed,
            recommendations=tuple(recommendations),
        )

    def summary(self, detailed: Dict[str, Any]) -> Dict[str, Any]:
        """Compact scalar highlights of a report."""
        assessment = detailed['qualityAssessment']
        efficiency_ratio = detailed['trajectoryEfficiency']['efficiencyRatio']

        return {
            'overallScore': assessment['overallScore'],
            'grade': assessment['grade'],
            'stabilityScore': round(detailed['stabilityMetrics']['overallStabilityScore'], 1),
            'efficiencyRatio': round(efficiency_ratio, 3) if efficiency_ratio is not None else None,
            'pathSmoothness': round(detailed['turnAnalysis']['pathSmoothness'], 3),
            'networkImpact': round(detailed['networkCorrelation']['networkErrorCorrelation'], 3),
            'averageDeviation': round(detailed['pathDeviation']['averageDeviation'], 4),
            'totalTurns': detailed['turnAnalysis']['totalTurns'],
            'degradationEvents': len(detailed['networkPerformance']['degradationEvents']),
        }

    def data_quality(self, record: FlightRecord, detailed: Dict[str, Any]) -> Dict[str, Any]:
        """
        Completeness of the input and the metrics that rely on substitutes.

        A metric is listed as estimated when its inputs were missing and a
        neutral default stood in for them.
        """
        samples = record.samples
        with_target = len([s for s in samples if s.target is not None])
        with_error = len([s for s in samples if s.error is not None])

        estimated = []
        if detailed['performanceMetrics']['energyEfficiency']['estimated']:
            estimated.append('energyEfficiency')
        if detailed['performanceMetrics']['communicationEfficiency']['estimated']:
            estimated.append('communicationEfficiency')
        if with_target == 0:
            estimated.append('pathDeviation')
        if detailed['trajectoryEfficiency']['insufficientMotion']:
            estimated.append('trajectoryEfficiency')
        for component in detailed['qualityAssessment']['estimatedComponents']:
            estimated.append(f"qualityAssessment.{component}")

        return {
            'totalSamples': len(samples),
            'samplesWithTarget': with_target,
            'samplesWithError': with_error,
            'completeness': with_error / len(samples) * 100 if samples else 0.0,
            'estimatedMetrics': estimated,
            'reducedConfidence': bool(estimated),
        }


class ReportGenerator:
    """
    Writes reports in multiple formats.
    """

    def generate_report(
        self,
        report: TrajectoryReport,
        output_path: str,
        format: str = 'json',
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Write a report to disk.

        Args:
            report: Analysis report
            output_path: Output file path
            format: Report format ('json', 'txt')
            metadata: Optional caller information (flight name, analysis date)
        """
        if format == 'json':
            self._generate_json_report(report, output_path, metadata or {})
        elif format == 'txt':
            self._generate_text_report(report, output_path, metadata or {})
        else:
            raise ValueError(f"Unsupported format: {format}")

        logger.info(f"Wrote {format} report to {output_path}")

    def _generate_json_report(self, report: TrajectoryReport, output_path: str,
                              metadata: Dict[str, Any]):
        """Generate JSON report."""
        with open(output_path, 'w') as f:
            json.dump({'metadata': metadata, **report.to_dict()}, f, indent=2, default=str)

    def _generate_text_report(self, report: TrajectoryReport, output_path: str,
                              metadata: Dict[str, Any]):
        """Generate text report."""
        summary = report.summary
        detailed = report.detailed

        with open(output_path, 'w') as f:
            f.write("=" * 70 + "\n")
            f.write("TRAQA FLIGHT QUALITY REPORT\n")
            f.write("=" * 70 + "\n\n")

            for key, value in metadata.items():
                f.write(f"{key.replace('_', ' ').title()}: {value}\n")
            if metadata:
                f.write("\n")

            # Summary
            f.write("SUMMARY\n")
            f.write("-" * 70 + "\n")
            f.write(f"Overall Score: {summary['overallScore']} (Grade {summary['grade']})\n")
            f.write(f"Stability Score: {summary['stabilityScore']:.1f}\n")
            f.write(f"Path Efficiency: {format_percentage(summary['efficiencyRatio'])}\n")
            f.write(f"Path Smoothness: {format_percentage(summary['pathSmoothness'])}\n")
            f.write(f"Network/Error Correlation: {summary['networkImpact']:.3f}\n")
            f.write(f"Average Deviation: {summary['averageDeviation']:.3f} m\n\n")

            # Breakdown
            breakdown = detailed['qualityAssessment']['breakdown']
            f.write("SCORE BREAKDOWN\n")
            f.write("-" * 70 + "\n")
            for name, score in breakdown.items():
                f.write(f"  {name.title():<14} {score:>3}\n")
            f.write("\n")

            # Flight
            velocity = detailed['velocityAnalysis']
            timing = detailed['performanceMetrics']['timeEfficiency']
            f.write("FLIGHT\n")
            f.write("-" * 70 + "\n")
            f.write(f"Duration: {format_duration(timing['totalFlightTime'])}"
                    f" (active {format_duration(timing['activeFlightTime'])})\n")
            f.write(f"Distance: {detailed['trajectoryEfficiency']['actualDistance']:.2f} m"
                    f" (planned {detailed['trajectoryEfficiency']['idealDistance']:.2f} m)\n")
            f.write(f"Velocity: avg {velocity['averageVelocity']:.2f} m/s,"
                    f" max {velocity['maxVelocity']:.2f} m/s\n")
            f.write(f"Turns: {summary['totalTurns']}"
                    f" ({detailed['turnAnalysis']['sharpTurns']} sharp)\n\n")

            # Network
            events = detailed['networkPerformance']['degradationEvents']
            f.write("NETWORK DEGRADATION\n")
            f.write("-" * 70 + "\n")
            if not events:
                f.write("  No degradation events\n")
            for event in events:
                f.write(f"  {event['startTime']:.1f}s - {event['endTime']:.1f}s:"
                        f" {event['severity']} (min {event['minQuality']:.0f}%)\n")
            f.write("\n")

            # Recommendations
            f.write("RECOMMENDATIONS\n")
            f.write("-" * 70 + "\n")
            if not report.recommendations:
                f.write("  None\n")
            for i, rec in enumerate(report.recommendations, 1):
                f.write(f"  {i}. [{rec['severity'].upper()}] {rec['category']}: {rec['message']}\n")
                if rec.get('metric'):
                    f.write(f"     {rec['metric']}\n")
