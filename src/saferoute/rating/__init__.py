"""Point and route safety rating."""

from .policy import (
    DEFAULT_POLICY,
    MODERATE_THRESHOLD,
    PROXIMITY_FACTOR,
    ROUTE_SAMPLE_POINTS,
    SAFE_THRESHOLD,
    ZONE_WEIGHTS,
    RatingPolicy,
)
from .rater import PointAssessment, RouteAssessment, SafetyRater

__all__ = [
    "DEFAULT_POLICY",
    "MODERATE_THRESHOLD",
    "PROXIMITY_FACTOR",
    "ROUTE_SAMPLE_POINTS",
    "SAFE_THRESHOLD",
    "ZONE_WEIGHTS",
    "PointAssessment",
    "RatingPolicy",
    "RouteAssessment",
    "SafetyRater",
]
