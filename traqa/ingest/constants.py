"""
TRAQA Ingestion Constants
Field names and defaults of the decoded flight log format.
"""

# Flight phases
PHASE_WAYPOINT = "waypoint"
PHASE_TRANSIT = "transit"
VALID_PHASES = (PHASE_WAYPOINT, PHASE_TRANSIT)

# Defaults applied to optional sample fields
DEFAULT_NETWORK_QUALITY = 100.0  # percent
DEFAULT_MINIMUM_VOLTAGE = 3.8  # volts

# Required keys per sample
REQUIRED_SAMPLE_FIELDS = ("x", "y", "z", "time")

# Top-level keys (first match wins)
SAMPLES_KEYS = ("position_data", "samples")
ROUTE_KEYS = ("sequence", "ideal_route")
