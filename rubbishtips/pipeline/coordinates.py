"""Coordinate parsing and range checks."""

from __future__ import annotations

import math
import re

# Leading decimal number; trailing text is ignored ("-33.78 S" -> -33.78).
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_coordinate(*candidates: str | None) -> float:
    """Parse the first non-blank candidate; anything unparseable is ``0.0``."""
    raw = next((value for value in candidates if value), "")
    match = _LEADING_NUMBER_RE.match(raw)
    if not match:
        return 0.0
    value = float(match.group(1))
    if not math.isfinite(value):
        return 0.0
    return value


def has_coordinates(lat: float, lon: float) -> bool:
    return lat != 0 and lon != 0


def valid_lat_lon(lat: float | None, lon: float | None) -> bool:
    if lat is None or lon is None:
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def within_bbox(lat: float, lon: float, bbox: dict) -> bool:
    return (
        bbox["min_lat"] <= lat <= bbox["max_lat"]
        and bbox["min_lon"] <= lon <= bbox["max_lon"]
    )
