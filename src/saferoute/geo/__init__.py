"""Geographic primitives shared by rating and incident scoring."""

from .distance import EARTH_RADIUS_METERS, haversine_meters
from .models import GeoPoint
from .sampling import DEFAULT_SAMPLE_TARGET, sample_indices, sample_path

__all__ = [
    "EARTH_RADIUS_METERS",
    "DEFAULT_SAMPLE_TARGET",
    "GeoPoint",
    "haversine_meters",
    "sample_indices",
    "sample_path",
]
