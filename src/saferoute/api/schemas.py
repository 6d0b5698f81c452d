# Copyright 2025 msq
"""Request/response models of the HTTP API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from saferoute.geo import GeoPoint
from saferoute.incidents import IncidentType, ReportedWhen
from saferoute.zones import Zone, ZoneCategory


class PointIn(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0, description="latitude")
    lng: float = Field(..., ge=-180.0, le=180.0, description="longitude")

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class ZoneOut(BaseModel):
    id: str
    name: str
    category: ZoneCategory
    lat: float
    lng: float
    radius_meters: float
    description: str

    @classmethod
    def from_zone(cls, zone: Zone) -> ZoneOut:
        return cls(
            id=zone.id,
            name=zone.name,
            category=zone.category,
            lat=zone.center.lat,
            lng=zone.center.lng,
            radius_meters=zone.radius_meters,
            description=zone.description,
        )


class ZoneCatalogIn(BaseModel):
    version: Optional[str] = None
    zones: List[Dict[str, Any]] = Field(default_factory=list, description="catalog records")


class PointRatingOut(BaseModel):
    rating: str
    zone_id: Optional[str] = None
    zone_name: Optional[str] = None
    distance_meters: Optional[float] = None


class RouteRatingIn(BaseModel):
    path: List[PointIn] = Field(default_factory=list, description="ordered route points")
    sample_target_count: Optional[int] = Field(None, ge=1, description="target number of sampled points")


class RoutePlanIn(BaseModel):
    start: str = Field(..., min_length=1, description="'lat, lng' or a place name")
    end: str = Field(..., min_length=1, description="'lat, lng' or a place name")
    avoid_unsafe: bool = False


class IncidentIn(PointIn):
    type: IncidentType = IncidentType.OTHER
    description: Optional[str] = Field(None, max_length=2000)
    reported_when: ReportedWhen = ReportedWhen.NOW


class SosIn(BaseModel):
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0)
    lng: Optional[float] = Field(None, ge=-180.0, le=180.0)

    def to_point(self) -> Optional[GeoPoint]:
        if self.lat is None or self.lng is None:
            return None
        return GeoPoint(lat=self.lat, lng=self.lng)


class SosOut(BaseModel):
    message: str
    whatsapp_url: str
    sms_url: str


class ShareIn(BaseModel):
    name: Optional[str] = Field(None, max_length=80)
    duration_minutes: int = Field(0, ge=0, le=24 * 60, description="0 shares until stopped")


class ShareOut(BaseModel):
    share_id: str
    name: str
    url: str
    invite_text: str
    expires_at: Optional[str] = None
