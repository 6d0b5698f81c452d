# Copyright 2025 msq
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from saferoute.geo import GeoPoint


class ZoneCategory(str, Enum):
    """Risk category of a zone."""

    SAFE = "safe"
    MODERATE = "moderate"
    UNSAFE = "unsafe"

    @property
    def area_label(self) -> str:
        return _AREA_LABELS[self]


_AREA_LABELS = {
    ZoneCategory.SAFE: "Safe area",
    ZoneCategory.MODERATE: "Moderate area",
    ZoneCategory.UNSAFE: "Unsafe area",
}


class SafetyRating(str, Enum):
    """Point or route rating; ``UNKNOWN`` when no zone is near enough."""

    SAFE = "safe"
    MODERATE = "moderate"
    UNSAFE = "unsafe"
    UNKNOWN = "unknown"

    @classmethod
    def from_category(cls, category: ZoneCategory) -> SafetyRating:
        return cls(category.value)

    @property
    def is_known(self) -> bool:
        return self is not SafetyRating.UNKNOWN


@dataclass(frozen=True, slots=True)
class Zone:
    """Circular risk region."""

    id: str
    name: str
    category: ZoneCategory
    center: GeoPoint
    radius_meters: float
    description: str = ""
