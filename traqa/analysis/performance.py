"""
Performance Metrics
Time, energy and communication efficiency of a flight, plus the basic
flight statistics handed to exporters.

Battery and command data are optional. When they are missing the metrics
fall back to neutral values and are flagged with ``estimated: True``.
"""

import logging
from typing import Any, Dict

from ..ingest.constants import DEFAULT_MINIMUM_VOLTAGE, PHASE_WAYPOINT
from ..ingest.models import FlightRecord
from ..utils import path_length
from .kinematics import active_flight_time
from .scorer import accuracy_score
from .statistics import describe
from .stability import stabilization_ratio

logger = logging.getLogger(__name__)


def has_battery_data(record: FlightRecord) -> bool:
    """Whether the record carries a usable start voltage."""
    return record.battery is not None and record.battery.start_voltage > 0


class PerformanceAnalyzer:
    """
    Mission-level performance metrics of a flight record.
    """

    def flight_statistics(self, record: FlightRecord) -> Dict[str, Any]:
        """
        Basic counts and accuracy statistics.

        Args:
            record: Flight record

        Returns:
            Point counts, response time, position accuracy, battery and
            command figures (defaults substituted where absent)
        """
        samples = record.samples
        waypoints = [s for s in samples if s.phase == PHASE_WAYPOINT]
        waypoint_errors = [s.error for s in waypoints if s.error is not None]

        battery = record.battery
        commands = record.command_stats

        return {
            'totalPoints': len(samples),
            'waypointPoints': len(waypoints),
            'transitPoints': len(samples) - len(waypoints),
            'responseTime': record.response_time,
            'positionAccuracy': {
                'overall': describe(record.errors()),
                'waypoint': {
                    **describe(waypoint_errors),
                    'count': len(waypoints),
                    'percentage': len(waypoints) / len(samples) * 100 if samples else 0.0,
                },
            },
            'battery': {
                'startVoltage': battery.start_voltage if battery else 0.0,
                'minimumRequired': battery.minimum_required if battery else DEFAULT_MINIMUM_VOLTAGE,
                'estimated': not has_battery_data(record),
            },
            'commandStats': {
                'sent': commands.sent if commands else 0,
                'dropped': commands.dropped if commands else 0,
                'totalAttempts': commands.total_attempts if commands else 0,
                'estimated': commands is None,
            },
        }

    def analyze(self, record: FlightRecord) -> Dict[str, Any]:
        """
        Complete performance metrics.

        Args:
            record: Flight record

        Returns:
            Time, energy and communication efficiency and the overall
            performance score
        """
        total_time = record.duration
        active_time = active_flight_time(record.samples)

        return {
            'timeEfficiency': {
                'totalFlightTime': total_time,
                'activeFlightTime': active_time,
                'idleTime': total_time - active_time,
                'efficiencyRatio': active_time / total_time if total_time > 0 else 0.0,
            },
            'energyEfficiency': self.energy_efficiency(record),
            'communicationEfficiency': self.communication_efficiency(record),
            'overallPerformanceScore': self.overall_performance_score(record),
        }

    def energy_efficiency(self, record: FlightRecord) -> Dict[str, Any]:
        battery = record.battery

        if not has_battery_data(record):
            logger.warning("No battery data; energy efficiency is estimated")
            return {
                'estimated': True,
                'batteryUtilization': 0.0,
                'energyPerMeter': 0.0,
                'distancePerVolt': 0.0,
                'projectedFlightTime': 0.0,
            }

        total_distance = path_length(record.positions)
        voltage_used = battery.start_voltage - battery.minimum_required
        total_time = record.duration

        return {
            'estimated': False,
            'batteryUtilization': voltage_used / battery.start_voltage * 100,
            'energyPerMeter': voltage_used / total_distance if total_distance > 0 else 0.0,
            'distancePerVolt': total_distance / voltage_used if voltage_used > 0 else 0.0,
            'projectedFlightTime': (
                total_time / voltage_used * battery.start_voltage if voltage_used > 0 else 0.0
            ),
        }

    def communication_efficiency(self, record: FlightRecord) -> Dict[str, Any]:
        commands = record.command_stats

        if commands is None:
            return {
                'estimated': True,
                'successRate': 100.0,
                'dropRate': 0.0,
                'reliability': 100.0,
                'latency': 0.0,
            }

        attempts = commands.total_attempts
        success_rate = commands.sent / attempts * 100 if attempts > 0 else 100.0
        drop_rate = commands.dropped / attempts * 100 if attempts > 0 else 0.0

        return {
            'estimated': False,
            'successRate': success_rate,
            'dropRate': drop_rate,
            'reliability': 100 - drop_rate,
            'commandsSent': commands.sent,
            'commandsDropped': commands.dropped,
            'totalAttempts': attempts,
        }

    def overall_performance_score(self, record: FlightRecord) -> int:
        """
        Unweighted mean of accuracy, stabilization, response-time and
        command-reliability scores, rounded.
        """
        accuracy = accuracy_score(record.errors())
        stability = stabilization_ratio(record.samples) * 100

        total_time = record.duration
        if total_time > 0:
            efficiency = min(100.0, max(0.0, 100 - record.response_time / total_time * 100))
        else:
            efficiency = 100.0

        commands = record.command_stats
        if commands is None or commands.total_attempts == 0:
            reliability = 100.0
        else:
            reliability = commands.sent / commands.total_attempts * 100

        return round((accuracy + stability + efficiency + reliability) / 4)
