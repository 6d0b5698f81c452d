"""SafeRoute zone-proximity safety rating engine."""

from saferoute.errors import LocationNotFoundError, ValidationError
from saferoute.geo import GeoPoint
from saferoute.rating import RatingPolicy, RouteAssessment, SafetyRater
from saferoute.zones import SafetyRating, Zone, ZoneCategory, ZoneIndex, ZoneRegistry

__all__ = [
    "GeoPoint",
    "LocationNotFoundError",
    "RatingPolicy",
    "RouteAssessment",
    "SafetyRater",
    "SafetyRating",
    "ValidationError",
    "Zone",
    "ZoneCategory",
    "ZoneIndex",
    "ZoneRegistry",
]
