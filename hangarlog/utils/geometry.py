"""
Geometry utilities for coordinate handling.
"""

import math
from typing import Optional

MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0


def is_valid_latitude(value: float) -> bool:
    """
    Check a latitude in decimal degrees.

    Args:
        value: Latitude in degrees

    Returns:
        True if value lies in [-90, 90]
    """
    return not math.isnan(value) and -MAX_LATITUDE <= value <= MAX_LATITUDE


def is_valid_longitude(value: float) -> bool:
    """
    Check a longitude in decimal degrees.

    Args:
        value: Longitude in degrees

    Returns:
        True if value lies in [-180, 180]
    """
    return not math.isnan(value) and -MAX_LONGITUDE <= value <= MAX_LONGITUDE


def parse_degrees(text: str) -> Optional[float]:
    """Parse decimal degrees typed by a user; blank means unset."""
    text = (text or "").strip()
    if not text:
        return None
    return float(text)
