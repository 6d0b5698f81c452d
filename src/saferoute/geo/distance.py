# Copyright 2025 msq
from __future__ import annotations

import math

from .models import GeoPoint

EARTH_RADIUS_METERS = 6371000.0


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in metres between two points."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * (math.sin(d_lng / 2) ** 2)
    # rounding can push h marginally above 1 for antipodal points
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, h)))
