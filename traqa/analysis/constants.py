"""
Analysis Constants
"""

# Kinematics
ACTIVE_VELOCITY_THRESHOLD: float = 0.05  # m/s, slower pairs count as idle time
VERTICAL_MOVEMENT_THRESHOLD: float = 0.05  # m, altitude steps counted as movements

# Path deviation
HIGH_DEVIATION_THRESHOLD: float = 0.1  # m, 10cm off target is a high-deviation point

# Turn detection
TURN_THRESHOLD_RAD: float = 0.26  # ~15 degrees
SHARP_TURN_THRESHOLD_DEG: float = 45.0

# Trend classification
TREND_CHANGE_THRESHOLD: float = 0.1  # 10% relative change between halves

# Stability score weights
STABILITY_ERROR_WEIGHT: float = 0.3
STABILITY_STABILIZATION_WEIGHT: float = 0.4
STABILITY_JITTER_WEIGHT: float = 0.3

# Waypoint dwell detection
WAYPOINT_DWELL_GAP_S: float = 1.0  # gap that starts a new waypoint visit

# Network degradation
NETWORK_QUALITY_THRESHOLD: float = 70.0  # percent, below this is degraded
DEGRADATION_MIN_DURATION_S: float = 2.0
SEVERE_QUALITY_THRESHOLD: float = 30.0
MODERATE_QUALITY_THRESHOLD: float = 50.0
IMPACT_WINDOW_SIZE: int = 10  # samples per sliding correlation window
CRITICAL_ERROR_FACTOR: float = 1.5  # decile error vs baseline that marks the threshold
HIGH_QUALITY_THRESHOLD: float = 90.0  # baseline group for performance drop
IMPACT_HIGH_QUALITY: float = 80.0  # impact assessment groups
IMPACT_LOW_QUALITY: float = 50.0

# Network quality bands (lower bound inclusive)
NETWORK_BANDS = {
    "excellent": 90.0,
    "good": 70.0,
    "fair": 50.0,
    "poor": float("-inf"),
}

# Quality score weights
ACCURACY_WEIGHT: float = 0.30
STABILITY_WEIGHT: float = 0.25
EFFICIENCY_WEIGHT: float = 0.25
ADAPTABILITY_WEIGHT: float = 0.20
ACCURACY_ERROR_PENALTY: float = 1000.0  # score points lost per meter of mean error
ADAPTABILITY_QUALITY_STDDEV: float = 20.0  # network variation that triggers the check
IMPROVEMENT_SCORE_THRESHOLD: float = 70.0

# Grade boundaries (minimum score)
GRADE_THRESHOLDS = [
    ("A", 90),
    ("B", 80),
    ("C", 70),
    ("D", 60),
]

# Recommendation rules
LOW_STABILIZATION_RATIO: float = 0.7
STRONG_NEGATIVE_CORRELATION: float = -0.5
LOW_EFFICIENCY_RATIO: float = 0.8
SHARP_TURN_FRACTION: float = 0.3

# Trend of flight series
SERIES_TREND_THRESHOLD_PCT: float = 5.0
