"""
TRAQA Analysis Component

Trajectory and telemetry analytics for UAV flight logs.

Main Classes:
    - FlightAnalyzer: Main coordinator for all analyses
    - KinematicsAnalyzer: Velocity, acceleration and altitude profiles
    - PathAnalyzer: Target deviation, turns and path efficiency
    - StabilityAnalyzer: Stabilization, jitter and flight phases
    - NetworkAnalyzer: Link-quality correlation and degradation events
    - PerformanceAnalyzer: Time, energy and communication efficiency
    - QualityScorer: Weighted quality score and recommendations
    - ReportBuilder / ReportGenerator: Report assembly and rendering

Example:
    >>> from traqa.analysis import FlightAnalyzer
    >>> analyzer = FlightAnalyzer()
    >>> report = analyzer.analyze(flight_log)
    >>> report.summary['grade']
    'A'
"""

# Main analysis components
from .analyzer import FlightAnalyzer, analyze, assess_quality
from .kinematics import KinematicsAnalyzer
from .path_analyzer import PathAnalyzer
from .stability import StabilityAnalyzer
from .network import NetworkAnalyzer, DegradationDetector
from .performance import PerformanceAnalyzer
from .scorer import QualityScorer
from .reporter import ReportBuilder, ReportGenerator
from .comparison import compare_flights, performance_trend, rank_flights

# Utilities
from . import constants
from . import statistics

__all__ = [
    # Main classes
    'FlightAnalyzer',
    'KinematicsAnalyzer',
    'PathAnalyzer',
    'StabilityAnalyzer',
    'NetworkAnalyzer',
    'DegradationDetector',
    'PerformanceAnalyzer',
    'QualityScorer',
    'ReportBuilder',
    'ReportGenerator',

    # Entry points
    'analyze',
    'assess_quality',
    'compare_flights',
    'performance_trend',
    'rank_flights',

    # Modules
    'constants',
    'statistics',
]
