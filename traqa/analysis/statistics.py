"""
Statistics Kernel
Population statistics used by every analyzer.

All functions accept plain sequences of numbers and never raise on empty
or degenerate input; they fall back to 0 (or 'stable') instead.
"""

from math import sqrt
from typing import Dict, Sequence

from .constants import TREND_CHANGE_THRESHOLD

TREND_IMPROVING = "improving"
TREND_DEGRADING = "degrading"
TREND_STABLE = "stable"


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return sum(values) / len(values)


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation, 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0

    avg = mean(values)
    return sqrt(mean([(v - avg) ** 2 for v in values]))


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two series.

    Args:
        x: First series
        y: Second series, same length as ``x``

    Returns:
        Coefficient in [-1, 1]; 0 when the inputs are empty, differ in
        length, or either series is constant
    """
    if len(x) != len(y) or len(x) == 0:
        return 0.0

    mean_x = mean(x)
    mean_y = mean(y)

    numerator = 0.0
    sum_x_squared = 0.0
    sum_y_squared = 0.0

    for xi, yi in zip(x, y):
        diff_x = xi - mean_x
        diff_y = yi - mean_y
        numerator += diff_x * diff_y
        sum_x_squared += diff_x * diff_x
        sum_y_squared += diff_y * diff_y

    denominator = sqrt(sum_x_squared * sum_y_squared)
    if denominator == 0:
        return 0.0

    # Rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, numerator / denominator))


def trend(values: Sequence[float]) -> str:
    """
    Classify a series by comparing the means of its two halves.

    Args:
        values: Chronological series

    Returns:
        'improving' if the second half mean is more than 10% above the first,
        'degrading' if more than 10% below, otherwise 'stable'
    """
    if len(values) < 2:
        return TREND_STABLE

    half = len(values) // 2
    first_mean = mean(values[:half])
    second_mean = mean(values[half:])

    if first_mean == 0:
        if second_mean > 0:
            return TREND_IMPROVING
        if second_mean < 0:
            return TREND_DEGRADING
        return TREND_STABLE

    change = (second_mean - first_mean) / first_mean

    if change > TREND_CHANGE_THRESHOLD:
        return TREND_IMPROVING
    if change < -TREND_CHANGE_THRESHOLD:
        return TREND_DEGRADING
    return TREND_STABLE


def describe(values: Sequence[float]) -> Dict[str, float]:
    """
    Summary statistics of a series.

    Returns:
        Dictionary with average, median (upper median for even lengths),
        min and max; all zero for an empty series
    """
    if len(values) == 0:
        return {'average': 0.0, 'median': 0.0, 'min': 0.0, 'max': 0.0}

    ordered = sorted(values)

    return {
        'average': mean(values),
        'median': ordered[len(ordered) // 2],
        'min': ordered[0],
        'max': ordered[-1],
    }


def safe_min(values: Sequence[float]) -> float:
    """Minimum of a series, 0 when empty."""
    return min(values) if len(values) > 0 else 0.0


def safe_max(values: Sequence[float]) -> float:
    """Maximum of a series, 0 when empty."""
    return max(values) if len(values) > 0 else 0.0
