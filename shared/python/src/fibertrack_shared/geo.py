"""
geo.py — Coordinate parsing and bounds helpers.

Used by the CSV validator to turn raw latitude/longitude strings into floats
and by the Coordinates model to enforce geographic bounds.

Usage:
    from fibertrack_shared.geo import parse_coordinate, LAT_BOUNDS

    value = parse_coordinate("49.28")          # 49.28
    value = parse_coordinate("north")          # None
    in_range("lat", 91.0)                      # False
"""

from __future__ import annotations

import math
from typing import Final

LAT_BOUNDS: Final[tuple[float, float]] = (-90.0, 90.0)
LNG_BOUNDS: Final[tuple[float, float]] = (-180.0, 180.0)

_BOUNDS: Final[dict[str, tuple[float, float]]] = {
    "lat": LAT_BOUNDS,
    "lng": LNG_BOUNDS,
}


def parse_coordinate(raw: str | None) -> float | None:
    """
    Parse a coordinate string into a finite float.

    Returns None for blank, non-numeric, NaN or infinite input.
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def in_range(axis: str, value: float) -> bool:
    """Return True if value lies within the inclusive bounds for axis ("lat" | "lng")."""
    low, high = _BOUNDS[axis]
    return low <= value <= high
