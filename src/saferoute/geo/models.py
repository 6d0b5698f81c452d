# Copyright 2025 msq
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

from saferoute.errors import ValidationError


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS84 coordinate in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        validate_coordinate(self.lat, self.lng)
        object.__setattr__(self, "lat", float(self.lat))
        object.__setattr__(self, "lng", float(self.lng))

    @classmethod
    def from_lng_lat(cls, pair: Sequence[Any]) -> GeoPoint:
        """Build from a GeoJSON-ordered ``[lng, lat]`` pair."""
        if len(pair) < 2:
            raise ValidationError(f"coordinate pair needs two values: {pair!r}", field="coordinates")
        return cls(lat=_as_float(pair[1], "lat"), lng=_as_float(pair[0], "lng"))

    def to_lng_lat(self) -> list[float]:
        return [self.lng, self.lat]

    def as_text(self, precision: int = 5) -> str:
        return f"{self.lat:.{precision}f}, {self.lng:.{precision}f}"


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got {value!r}", field=field)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a number, got {value!r}", field=field) from exc


def validate_coordinate(lat: Any, lng: Any) -> None:
    """Reject NaN, infinite and out-of-range latitude/longitude."""
    lat_value = _as_float(lat, "lat")
    lng_value = _as_float(lng, "lng")
    if not math.isfinite(lat_value) or not -90.0 <= lat_value <= 90.0:
        raise ValidationError(f"latitude out of range: {lat!r}", field="lat")
    if not math.isfinite(lng_value) or not -180.0 <= lng_value <= 180.0:
        raise ValidationError(f"longitude out of range: {lng!r}", field="lng")
