"""
Grid carbon intensity (gCO₂ per kWh).

A placeholder for a live carbon-intensity feed: five reference intensities
cycled by hour of day, scaled down at night when demand is low.  Anything
exposing an awaitable ``current_intensity()`` can stand in for it.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Callable, Optional, Protocol

BASE_INTENSITIES = (250, 430, 180, 520, 310)

NIGHT_FACTOR = 0.7
DAY_FACTOR   = 1.1


class GridIntensitySource(Protocol):
    async def current_intensity(self) -> float: ...


def is_night(hour: int) -> bool:
    """23:00–05:59 counts as night; 22:00 does not."""
    return hour > 22 or hour < 6


def intensity_for_hour(hour: int) -> float:
    """Unrounded intensity for a wall-clock *hour* in ``0..23``."""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0..23, got {hour!r}")
    factor = NIGHT_FACTOR if is_night(hour) else DAY_FACTOR
    return BASE_INTENSITIES[hour % len(BASE_INTENSITIES)] * factor


class HourlyGridIntensity:
    """
    Time-of-day intensity oracle.

    Parameters
    ----------
    clock : zero-argument callable returning the current ``datetime``.
            Defaults to ``datetime.now``; pass a fixed clock in tests.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now

    async def current_intensity(self) -> float:
        return intensity_for_hour(self.clock().hour)


class FixedGridIntensity:
    """Constant intensity, e.g. a regional figure supplied by the caller."""

    def __init__(self, intensity: float) -> None:
        if not math.isfinite(intensity) or intensity < 0:
            raise ValueError(f"grid intensity must be a finite non-negative number, got {intensity}")
        self.intensity = intensity

    async def current_intensity(self) -> float:
        return self.intensity
