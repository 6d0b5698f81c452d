# Copyright 2025 msq
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import structlog
from prometheus_client import Counter, Histogram

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint, sample_path
from saferoute.geo.models import validate_coordinate
from saferoute.zones import SafetyRating, Zone, ZoneCategory, ZoneIndex, ZoneRegistry

from .policy import DEFAULT_POLICY, RatingPolicy

logger = structlog.get_logger(__name__)

_point_ratings = Counter(
    "saferoute_point_ratings_total",
    "Point ratings by outcome",
    ["rating"],
)
_route_ratings = Counter(
    "saferoute_route_assessments_total",
    "Route assessments by overall category",
    ["overall"],
)
_route_samples = Histogram(
    "saferoute_route_samples",
    "Sampled points per route assessment",
    buckets=(0, 1, 5, 10, 15, 20, 50, 100),
)

PointLike = Union[GeoPoint, Tuple[float, float]]
ZoneSource = Union[ZoneIndex, ZoneRegistry]


@dataclass(frozen=True, slots=True)
class PointAssessment:
    """Rating of a single point with the zone that produced it."""

    point: GeoPoint
    rating: SafetyRating
    zone: Optional[Zone]
    distance_meters: Optional[float]


@dataclass(frozen=True, slots=True)
class RouteAssessment:
    """Aggregate safety judgment over the sampled points of a path.

    ``overall`` is ``safe`` when no sample was rated at all; check
    ``known_count`` to tell that apart from a genuinely safe route.
    """

    overall: ZoneCategory
    has_unsafe_segment: bool
    known_count: int
    total_samples: int
    average_weight: float
    samples: Tuple[PointAssessment, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.value,
            "has_unsafe_segment": self.has_unsafe_segment,
            "known_count": self.known_count,
            "total_samples": self.total_samples,
            "average_weight": self.average_weight,
            "samples": [
                {
                    "lat": sample.point.lat,
                    "lng": sample.point.lng,
                    "rating": sample.rating.value,
                    "zone_id": sample.zone.id if sample.zone else None,
                }
                for sample in self.samples
            ],
        }


def _coerce_point(point: PointLike) -> GeoPoint:
    if isinstance(point, GeoPoint):
        validate_coordinate(point.lat, point.lng)
        return point
    if isinstance(point, (tuple, list)) and len(point) == 2:
        return GeoPoint(lat=point[0], lng=point[1])
    raise ValidationError(f"expected a GeoPoint or (lat, lng) pair, got {point!r}", field="point")


class SafetyRater:
    """Turns zone proximity into point ratings and route assessments.

    Holds no query state. Each call reads one ``ZoneIndex`` snapshot, so a
    registry swap during ``rate_route`` never mixes two catalogs.
    """

    def __init__(self, zones: ZoneSource, policy: RatingPolicy | None = None) -> None:
        self._zones = zones
        self._policy = policy or DEFAULT_POLICY

    @property
    def policy(self) -> RatingPolicy:
        return self._policy

    def _snapshot(self) -> ZoneIndex:
        if isinstance(self._zones, ZoneRegistry):
            return self._zones.current()
        return self._zones

    def rate_point(self, point: PointLike) -> SafetyRating:
        assessment = self._assess(self._snapshot(), _coerce_point(point))
        _point_ratings.labels(rating=assessment.rating.value).inc()
        return assessment.rating

    def assess_point(self, point: PointLike) -> PointAssessment:
        assessment = self._assess(self._snapshot(), _coerce_point(point))
        _point_ratings.labels(rating=assessment.rating.value).inc()
        return assessment

    def rate_route(self, path: Sequence[PointLike], sample_target_count: int | None = None) -> RouteAssessment:
        target = self._policy.sample_target_count if sample_target_count is None else sample_target_count
        # validate every point up front, not only the sampled ones
        points = [_coerce_point(point) for point in path]
        sampled = sample_path(points, target)
        index = self._snapshot()

        samples: List[PointAssessment] = []
        known_count = 0
        total_weight = 0.0
        has_unsafe = False
        for point in sampled:
            assessment = self._assess(index, point)
            samples.append(assessment)
            rating = assessment.rating
            if rating.is_known:
                total_weight += self._policy.weight_of(ZoneCategory(rating.value))
                known_count += 1
            if rating is SafetyRating.UNSAFE:
                has_unsafe = True

        average_weight = total_weight / known_count if known_count > 0 else 0.0
        overall = self._policy.category_for(average_weight)
        result = RouteAssessment(
            overall=overall,
            has_unsafe_segment=has_unsafe,
            known_count=known_count,
            total_samples=len(samples),
            average_weight=average_weight,
            samples=tuple(samples),
        )
        _route_ratings.labels(overall=overall.value).inc()
        _route_samples.observe(len(samples))
        logger.debug(
            "route_assessed",
            path_length=len(points),
            total_samples=len(samples),
            known_count=known_count,
            average_weight=round(average_weight, 4),
            overall=overall.value,
            has_unsafe_segment=has_unsafe,
        )
        return result

    def _assess(self, index: ZoneIndex, point: GeoPoint) -> PointAssessment:
        found = index.nearest(point)
        if found is None:
            return PointAssessment(point, SafetyRating.UNKNOWN, None, None)
        zone, distance = found
        if distance > zone.radius_meters * self._policy.proximity_factor:
            return PointAssessment(point, SafetyRating.UNKNOWN, zone, distance)
        return PointAssessment(point, SafetyRating.from_category(zone.category), zone, distance)
