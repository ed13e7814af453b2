"""Common utility functions."""

from .geo import EARTH_RADIUS_KM, haversine

__all__ = [
    "EARTH_RADIUS_KM",
    "haversine",
]
