"""
Geographic utility functions.

This module provides the core geospatial calculation used by carrier matching
and transport request intake.
"""

from math import radians, cos, sin, atan2, sqrt

EARTH_RADIUS_KM = 6371


def haversine(lat1, lon1, lat2, lon2) -> float:
    """
    Calculate the great-circle distance between two points in kilometers.

    Inputs may be floats, ints or Decimals (as stored by the ORM). Coordinates
    are not range checked.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    lat1, lon1, lat2, lon2 = map(float, [lat1, lon1, lat2, lon2])
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c
