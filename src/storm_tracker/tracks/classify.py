"""Intensity classifiers for storm track points.

`category_from_wind` classifies live-ingested points and never yields a
tropical depression. `sample_category` classifies the bundled reference
records and maps sub-39 mph winds to -1. Keep them separate.
"""

from __future__ import annotations

# (exclusive upper pressure bound in mb, estimated wind in mph)
_PRESSURE_WIND_STEPS: tuple[tuple[float, float], ...] = (
    (920, 165.0),
    (935, 145.0),
    (950, 125.0),
    (965, 100.0),
    (980, 80.0),
    (1000, 50.0),
)
_PRESSURE_WIND_FLOOR = 30.0

# (inclusive lower wind bound in mph, category), strongest first
_LIVE_CATEGORY_STEPS: tuple[tuple[float, int], ...] = (
    (157, 5),
    (130, 4),
    (111, 3),
    (96, 2),
    (74, 1),
)

# (exclusive upper wind bound in mph, category), weakest first
_SAMPLE_CATEGORY_STEPS: tuple[tuple[float, int], ...] = (
    (39, -1),
    (74, 0),
    (96, 1),
    (111, 2),
    (130, 3),
    (157, 4),
)


def estimate_wind_from_pressure(pressure_mb: float) -> float:
    """Coarse wind proxy (mph) for points without a measured wind."""
    for upper_bound, wind in _PRESSURE_WIND_STEPS:
        if pressure_mb < upper_bound:
            return wind
    return _PRESSURE_WIND_FLOOR


def category_from_wind(wind_speed_mph: float) -> int:
    """Category 0-5 for live track points."""
    for lower_bound, category in _LIVE_CATEGORY_STEPS:
        if wind_speed_mph >= lower_bound:
            return category
    return 0


def sample_category(wind_speed_mph: float) -> int:
    """Category -1..5 for static sample records (-1 = tropical depression)."""
    for upper_bound, category in _SAMPLE_CATEGORY_STEPS:
        if wind_speed_mph < upper_bound:
            return category
    return 5
