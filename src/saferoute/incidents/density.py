# Copyright 2025 msq
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint, haversine_meters

from .models import IncidentReport

INCIDENT_RADIUS_METERS = 500.0
PENALTY_PER_INCIDENT = 15
MAX_SCORE = 100
GOOD_ABOVE = 80
CAUTION_ABOVE = 50


class ScoreLevel(str, Enum):
    GOOD = "good"
    CAUTION = "caution"
    DANGER = "danger"


@dataclass(frozen=True, slots=True)
class IncidentSafetyScore:
    score: int
    nearby_count: int
    level: ScoreLevel

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "nearby_count": self.nearby_count, "level": self.level.value}


class IncidentDensityScorer:
    """Scores a location out of 100 by how many incidents were reported nearby."""

    def __init__(
        self,
        *,
        radius_meters: float = INCIDENT_RADIUS_METERS,
        penalty_per_incident: int = PENALTY_PER_INCIDENT,
    ) -> None:
        if radius_meters <= 0:
            raise ValidationError("radius_meters must be positive", field="radius_meters")
        if penalty_per_incident < 0:
            raise ValidationError("penalty_per_incident must be >= 0", field="penalty_per_incident")
        self._radius = radius_meters
        self._penalty = penalty_per_incident

    @property
    def radius_meters(self) -> float:
        return self._radius

    def count_nearby(self, point: GeoPoint, incidents: Iterable[IncidentReport]) -> int:
        return sum(1 for incident in incidents if haversine_meters(point, incident.location) <= self._radius)

    def score(self, point: GeoPoint, incidents: Iterable[IncidentReport]) -> IncidentSafetyScore:
        nearby = self.count_nearby(point, incidents)
        value = max(0, MAX_SCORE - nearby * self._penalty)
        return IncidentSafetyScore(score=value, nearby_count=nearby, level=_level_for(value))


def _level_for(score: int) -> ScoreLevel:
    if score > GOOD_ABOVE:
        return ScoreLevel.GOOD
    if score > CAUTION_ABOVE:
        return ScoreLevel.CAUTION
    return ScoreLevel.DANGER
