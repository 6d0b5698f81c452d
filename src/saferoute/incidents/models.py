# Copyright 2025 msq
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict
from uuid import uuid4

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint

NO_DESCRIPTION = "(no description)"


class IncidentType(str, Enum):
    THEFT = "theft"
    ASSAULT = "assault"
    HARASSMENT = "harassment"
    SUSPICIOUS = "suspicious"
    ACCIDENT = "accident"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ReportedWhen(str, Enum):
    """When the reporter says the incident happened."""

    NOW = "now"
    LAST_HOUR = "1h"
    TODAY = "today"
    YESTERDAY = "yesterday"

    @property
    def label(self) -> str:
        return _WHEN_LABELS[self]


_WHEN_LABELS = {
    ReportedWhen.NOW: "Just now",
    ReportedWhen.LAST_HOUR: "Within the last hour",
    ReportedWhen.TODAY: "Today",
    ReportedWhen.YESTERDAY: "Yesterday",
}


@dataclass(frozen=True, slots=True)
class IncidentReport:
    """Anonymous incident pin; no reporter identity is kept."""

    incident_type: IncidentType
    location: GeoPoint
    description: str = NO_DESCRIPTION
    reported_when: ReportedWhen = ReportedWhen.NOW
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        *,
        incident_type: IncidentType | str,
        location: GeoPoint,
        description: str | None = None,
        reported_when: ReportedWhen | str = ReportedWhen.NOW,
    ) -> IncidentReport:
        try:
            kind = IncidentType(incident_type)
        except ValueError as exc:
            raise ValidationError(f"unknown incident type: {incident_type!r}", field="incident_type") from exc
        try:
            when = ReportedWhen(reported_when)
        except ValueError as exc:
            raise ValidationError(f"unknown report time: {reported_when!r}", field="reported_when") from exc
        text = (description or "").strip()
        return cls(
            incident_type=kind,
            location=location,
            description=text or NO_DESCRIPTION,
            reported_when=when,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.incident_type.value,
            "type_label": self.incident_type.label,
            "description": self.description,
            "reported_when": self.reported_when.value,
            "reported_when_label": self.reported_when.label,
            "lat": self.location.lat,
            "lng": self.location.lng,
            "created_at": self.created_at.isoformat(),
        }
