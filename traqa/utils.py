"""
TRAQA Utility Functions
Geometry helpers for local-frame flight positions (meters).
"""

from math import sqrt, atan2, pi
from typing import Sequence

# Local-frame point (x, y, z) in meters
Point = Sequence[float]


def distance3d(a: Point, b: Point) -> float:
    """
    Calculate Euclidean distance between two 3D points.

    Args:
        a: First point (x, y, z)
        b: Second point (x, y, z)

    Returns:
        Distance in meters

    Example:
        >>> distance3d((0, 0, 0), (3, 4, 0))
        5.0
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    dz = b[2] - a[2]

    return sqrt(dx**2 + dy**2 + dz**2)


def path_length(points: Sequence[Point]) -> float:
    """
    Calculate total length of a polyline.

    Args:
        points: Ordered sequence of 3D points

    Returns:
        Sum of consecutive segment lengths in meters (0 for one point or none)
    """
    length = 0.0
    for i in range(1, len(points)):
        length += distance3d(points[i - 1], points[i])

    return length


def bearing(a: Point, b: Point) -> float:
    """
    Calculate heading of the segment a -> b in the horizontal plane.

    Altitude is ignored: turn analysis models horizontal maneuvering only.

    Args:
        a: Segment start (x, y, z)
        b: Segment end (x, y, z)

    Returns:
        Signed angle in radians, as returned by atan2(dy, dx)
    """
    return atan2(b[1] - a[1], b[0] - a[0])


def wrap_angle(theta: float) -> float:
    """
    Normalize an angle to the interval (-pi, pi].

    Args:
        theta: Angle in radians

    Returns:
        Equivalent angle in (-pi, pi]

    Example:
        >>> wrap_angle(3 * pi / 2)
        -1.5707963267948966
    """
    while theta > pi:
        theta -= 2 * pi
    while theta <= -pi:
        theta += 2 * pi

    return theta


def format_duration(seconds: float) -> str:
    """
    Format flight duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string

    Example:
        >>> format_duration(75.5)
        '1m 15.5s'
    """
    if seconds is None or seconds < 0:
        return "N/A"

    minutes = int(seconds // 60)
    secs = seconds - minutes * 60

    if minutes > 0:
        return f"{minutes}m {secs:.1f}s"

    return f"{secs:.1f}s"


def format_percentage(ratio: float, digits: int = 1) -> str:
    """
    Format a 0-1 ratio as a percentage string.

    Args:
        ratio: Ratio value (None renders as N/A)
        digits: Decimal places

    Returns:
        Formatted percentage string

    Example:
        >>> format_percentage(0.8512)
        '85.1%'
    """
    if ratio is None:
        return "N/A"

    return f"{ratio * 100:.{digits}f}%"
