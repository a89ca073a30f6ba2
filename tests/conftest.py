"""
Shared flight log fixtures.
"""

import pytest


def point(x, y, z, time, phase="transit", **extra):
    """Decoded telemetry point in the ground station layout."""
    data = {"x": x, "y": y, "z": z, "time": time, "phase": phase}
    data.update(extra)
    return data


@pytest.fixture
def make_point():
    return point


@pytest.fixture
def perfect_log():
    """Straight 10 m flight at 1 m/s, on target, fully stabilized."""
    return {
        "position_data": [
            point(
                float(t), 0.0, 10.0, float(t),
                target={"x": float(t), "y": 0.0, "z": 10.0},
                error=0.0,
                networkQuality=100,
                stabilized=True,
            )
            for t in range(11)
        ],
        "sequence": [{"x": 0.0, "y": 0.0, "z": 10.0}, {"x": 10.0, "y": 0.0, "z": 10.0}],
        "battery": {"start_voltage": 4.2, "minimum_required": 3.8},
        "command_stats": {"sent": 20, "dropped": 0, "total_attempts": 20},
    }


@pytest.fixture
def degraded_log():
    """L-shaped flight with a 3 second severe network dip."""
    qualities = [100, 100, 100, 20, 25, 30, 100, 100, 100, 100, 100]
    positions = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (5, 0),
                 (5, 1), (5, 2), (5, 3), (5, 4), (5, 5)]
    samples = []
    for t, ((x, y), quality) in enumerate(zip(positions, qualities)):
        samples.append(point(
            float(x), float(y), 5.0, float(t),
            phase="waypoint" if t in (0, 5, 10) else "transit",
            target={"x": float(x), "y": float(y), "z": 5.0},
            error=0.01 if quality >= 90 else 0.05,
            networkQuality=quality,
            stabilized=t % 2 == 0,
        ))
    return {
        "position_data": samples,
        "sequence": [[0.0, 0.0, 5.0], [5.0, 0.0, 5.0], [5.0, 5.0, 5.0]],
        "battery": {"start_voltage": 4.2, "minimum_required": 3.8},
        "command_stats": {"sent": 9, "dropped": 1, "total_attempts": 10},
        "response_time": 1.0,
    }


@pytest.fixture
def hover_log():
    """Vehicle holding position for five seconds."""
    return {
        "position_data": [point(1.0, 1.0, 3.0, float(t), phase="waypoint") for t in range(6)],
        "sequence": [],
    }
