from __future__ import annotations

import math
from typing import Any

from ..core.constants import COORDINATE_PRECISION


def validate_coordinates(latitude: Any, longitude: Any) -> bool:
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


def coordinate_label(latitude: float, longitude: float, precision: int = COORDINATE_PRECISION) -> str:
    """Plain ``lat, lng`` label used when no address is available."""
    return f"{latitude:.{precision}f}, {longitude:.{precision}f}"


def format_coordinates(latitude: Any, longitude: Any, precision: int = COORDINATE_PRECISION) -> str:
    """Hemisphere form for display, e.g. ``12.971600°N, 77.594600°E``."""
    if not validate_coordinates(latitude, longitude):
        return "Invalid coordinates"
    lat = float(latitude)
    lng = float(longitude)
    lat_dir = "N" if lat >= 0 else "S"
    lng_dir = "E" if lng >= 0 else "W"
    return f"{abs(lat):.{precision}f}°{lat_dir}, {abs(lng):.{precision}f}°{lng_dir}"
