"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..config import settings
from ..models.domain import Location

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: Location, b: Location) -> float:
    """Great-circle distance between two locations in kilometres."""

    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def travel_time_minutes(distance: float, speed_kmh: float | None = None) -> int:
    """Whole minutes needed to cover ``distance`` km at a fixed average speed (halves round up)."""

    speed = speed_kmh or settings.average_speed_kmh
    return math.floor(distance / speed * 60 + 0.5)
