# Copyright 2025 msq
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import structlog

from saferoute.alerts import ShareSession, SosAlert, compose_sos, start_share_session
from saferoute.external import LocationResolver, PathProvider, RoutePath
from saferoute.geo import GeoPoint
from saferoute.incidents import (
    IncidentDensityScorer,
    IncidentReport,
    IncidentSafetyScore,
    IncidentStore,
)
from saferoute.rating import RouteAssessment, SafetyRater
from saferoute.zones import SafetyRating, Zone, ZoneCategory, ZoneIndex, ZoneRegistry, parse_catalog

logger = structlog.get_logger(__name__)

ROUTE_SAFETY_LABELS: Mapping[ZoneCategory, str] = {
    ZoneCategory.SAFE: "Mostly safe",
    ZoneCategory.MODERATE: "Some moderate-risk areas",
    ZoneCategory.UNSAFE: "Passes through unsafe areas",
}
UNSAFE_ROUTE_WARNING = "Route crosses unsafe zones - consider an alternative path."


@dataclass(slots=True)
class LocationSafety:
    """What the map shows for the user's current position."""

    point: GeoPoint
    rating: SafetyRating
    nearest_zone: str
    incident_score: IncidentSafetyScore

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.point.lat,
            "lng": self.point.lng,
            "rating": self.rating.value,
            "nearest_zone": self.nearest_zone,
            "incident_score": self.incident_score.to_dict(),
        }


@dataclass(slots=True)
class RoutePlanResult:
    start: GeoPoint
    end: GeoPoint
    path: RoutePath
    assessment: RouteAssessment
    avoid_unsafe: bool

    @property
    def distance_km(self) -> float:
        return round(self.path.distance_meters / 1000, 2)

    @property
    def duration_minutes(self) -> int:
        return math.ceil(self.path.duration_seconds / 60)

    @property
    def safety_label(self) -> str:
        return ROUTE_SAFETY_LABELS[self.assessment.overall]

    @property
    def warning(self) -> Optional[str]:
        if self.avoid_unsafe and self.assessment.has_unsafe_segment:
            return UNSAFE_ROUTE_WARNING
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": {"lat": self.start.lat, "lng": self.start.lng},
            "end": {"lat": self.end.lat, "lng": self.end.lng},
            "distance_km": self.distance_km,
            "duration_minutes": self.duration_minutes,
            "safety_label": self.safety_label,
            "warning": self.warning,
            "assessment": self.assessment.to_dict(),
            "path": [point.to_lng_lat() for point in self.path.points],
        }


class SafetyMapService:
    """Application layer over the rating core and its collaborators.

    Everything request-specific (user position, chosen route) arrives as
    arguments; the service itself only holds long-lived collaborators.
    """

    def __init__(
        self,
        *,
        registry: ZoneRegistry,
        rater: SafetyRater,
        incident_store: IncidentStore,
        density_scorer: IncidentDensityScorer,
        path_provider: PathProvider,
        resolver: LocationResolver,
        share_base_url: str,
        sos_phone: str | None = None,
    ) -> None:
        self._registry = registry
        self._rater = rater
        self._incident_store = incident_store
        self._density_scorer = density_scorer
        self._path_provider = path_provider
        self._resolver = resolver
        self._share_base_url = share_base_url
        self._sos_phone = sos_phone

    @property
    def rater(self) -> SafetyRater:
        return self._rater

    # zones

    def zones(self, category: ZoneCategory | None = None) -> Sequence[Zone]:
        return self._registry.current().filter(category)

    def zone_stats(self) -> Dict[str, int]:
        counts = self._registry.current().counts()
        return {category.value: count for category, count in counts.items()}

    def reload_zones(self, document: Mapping[str, Any]) -> ZoneIndex:
        """Validate a catalog document and swap it in; the old index stays on failure."""
        index = parse_catalog(document)
        self._registry.install(index)
        return index

    # rating

    async def locate(self, point: GeoPoint) -> LocationSafety:
        index = self._registry.current()
        # rate and describe against the same snapshot
        rating = SafetyRater(index, self._rater.policy).rate_point(point)
        incidents = await self._incident_store.list_all()
        score = self._density_scorer.score(point, incidents)
        result = LocationSafety(
            point=point,
            rating=rating,
            nearest_zone=index.describe_nearest(point),
            incident_score=score,
        )
        logger.info(
            "location_rated",
            rating=rating.value,
            nearest_zone=result.nearest_zone,
            incident_score=score.score,
        )
        return result

    async def incident_score(self, point: GeoPoint) -> IncidentSafetyScore:
        incidents = await self._incident_store.list_all()
        return self._density_scorer.score(point, incidents)

    def rate_path(self, path: Sequence[GeoPoint], sample_target_count: int | None = None) -> RouteAssessment:
        return self._rater.rate_route(path, sample_target_count)

    async def plan_route(self, start_text: str, end_text: str, *, avoid_unsafe: bool = False) -> RoutePlanResult:
        start = await self._resolver.resolve(start_text)
        end = await self._resolver.resolve(end_text)
        path = await self._path_provider.directions(start, end)
        assessment = self._rater.rate_route(path.points)
        result = RoutePlanResult(start=start, end=end, path=path, assessment=assessment, avoid_unsafe=avoid_unsafe)
        logger.info(
            "route_planned",
            distance_km=result.distance_km,
            duration_minutes=result.duration_minutes,
            overall=assessment.overall.value,
            has_unsafe_segment=assessment.has_unsafe_segment,
            known_count=assessment.known_count,
            total_samples=assessment.total_samples,
        )
        return result

    # incidents

    async def report_incident(
        self,
        *,
        incident_type: str,
        location: GeoPoint,
        description: str | None = None,
        reported_when: str = "now",
    ) -> IncidentReport:
        report = IncidentReport.create(
            incident_type=incident_type,
            location=location,
            description=description,
            reported_when=reported_when,
        )
        return await self._incident_store.add(report)

    async def list_incidents(self) -> List[IncidentReport]:
        return await self._incident_store.list_all()

    # alerts

    def sos(self, point: GeoPoint | None) -> SosAlert:
        alert = compose_sos(point, phone=self._sos_phone)
        logger.warning("sos_triggered", has_location=point is not None)
        return alert

    def start_share(self, name: str | None, duration_minutes: int) -> ShareSession:
        session = start_share_session(self._share_base_url, name, duration_minutes)
        logger.info(
            "location_share_started",
            share_id=session.share_id,
            duration_minutes=duration_minutes,
        )
        return session
