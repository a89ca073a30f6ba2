"""
TRAQA - Trajectory Quality Analysis

Flight-quality analytics for UAV telemetry logs: path deviation,
velocity smoothness, turn geometry, stability, network-quality impact,
trajectory efficiency and a composite quality score.

Components:
    - ingest: Validation and typed model of decoded flight logs
    - analysis: Trajectory analyzers, quality scoring and reports

Example:
    >>> from traqa import Config, analyze
    >>> report = analyze(flight_log, Config('config.yaml'))
    >>> print(report.summary['overallScore'], report.summary['grade'])
"""

# Component imports for easy access
from . import ingest
from . import analysis
from . import utils
from . import config

from .config import Config
from .analysis import FlightAnalyzer, analyze, assess_quality
from .ingest import InvalidFlightDataError, read_flight_record

TRAQA_VERSION = "v0.1.0"

__version__ = TRAQA_VERSION
__author__ = "TRAQA Project"
__license__ = "MIT"

__all__ = [
    "ingest",
    "analysis",
    "utils",
    "config",
    "Config",
    "FlightAnalyzer",
    "analyze",
    "assess_quality",
    "InvalidFlightDataError",
    "read_flight_record",
]
