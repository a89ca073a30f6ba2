"""
TRAQA Command Line Interface

Analyzes decoded flight logs (JSON files in the ground station layout)
and writes quality reports.
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from .config import Config
from .analysis import FlightAnalyzer, ReportGenerator, compare_flights, rank_flights
from .ingest import InvalidFlightDataError, TrajectoryReport


def load_flight_log(path: str) -> dict:
    """Decode a JSON flight log file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def print_summary(name: str, report: TrajectoryReport) -> None:
    """Print the headline numbers of a report."""
    summary = report.summary
    ratio = summary["efficiencyRatio"]

    print(f"\n✈️  {name}")
    print("=" * 70)
    print(f"Overall Score:   {summary['overallScore']} (Grade {summary['grade']})")
    print(f"Stability:       {summary['stabilityScore']:.1f}")
    print(f"Efficiency:      {ratio * 100:.1f}%" if ratio is not None else "Efficiency:      N/A")
    print(f"Turns:           {summary['totalTurns']}")
    print(f"Degradations:    {summary['degradationEvents']}")

    for rec in report.recommendations[:3]:
        print(f"  • [{rec['severity']}] {rec['message']}")


def analyze_files(
    analyzer: FlightAnalyzer, paths: List[str]
) -> List[Tuple[str, TrajectoryReport]]:
    """Analyze each flight log file, skipping unreadable or invalid ones."""
    results = []

    for path in paths:
        name = Path(path).stem
        try:
            report = analyzer.analyze(load_flight_log(path))
        except (OSError, json.JSONDecodeError) as e:
            print(f"❌ Could not read {path}: {e}")
            continue
        except InvalidFlightDataError as e:
            print(f"❌ Invalid flight log {path}: {e}")
            continue

        print_summary(name, report)
        results.append((name, report))

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the analyzer."""
    parser = argparse.ArgumentParser(
        description="TRAQA Flight Analyzer - UAV trajectory quality analysis"
    )
    parser.add_argument(
        "flights",
        nargs="+",
        help="Flight log JSON file(s)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: built-in settings)",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output directory for reports (default: from config)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "txt"],
        help="Report format (default: from config)",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Print a comparison of all analyzed flights",
    )

    args = parser.parse_args(argv)

    config = Config(args.config)
    config.setup_logging()

    analyzer = FlightAnalyzer(config)
    results = analyze_files(analyzer, args.flights)
    if not results:
        print("❌ No flights analyzed")
        return 1

    output_dir = Path(args.output or config.output_directory)
    output_dir.mkdir(parents=True, exist_ok=True)
    report_format = args.format or config.output_format

    generator = ReportGenerator()
    for name, report in results:
        output_path = output_dir / f"{name}_report.{report_format}"
        generator.generate_report(
            report,
            str(output_path),
            format=report_format,
            metadata={
                "flight_name": name,
                "analysis_date": datetime.now().isoformat(),
            },
        )
        print(f"\n💾 Report saved to: {output_path}")

    if args.compare and len(results) > 1:
        comparison = compare_flights(results)
        print("\n📊 Flight Comparison")
        print("=" * 70)
        for entry in rank_flights(results):
            print(f"{entry['rank']:2d}. {entry['name']}: {entry['overallScore']} ({entry['grade']})")
        for insight in comparison["insights"]:
            print(f"  • {insight['message']}")

    print("\n✅ Analysis complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
