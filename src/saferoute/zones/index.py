# Copyright 2025 msq
from __future__ import annotations

import math
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

import structlog

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint, haversine_meters

from .models import Zone, ZoneCategory

logger = structlog.get_logger(__name__)


class ZoneIndex:
    """Immutable, ordered zone catalog answering nearest-zone queries.

    Load order is significant: equidistant zones resolve to the one loaded
    first. Instances are never mutated after construction; a catalog reload
    builds a new index and swaps the reference (see ``ZoneRegistry``).
    """

    __slots__ = ("_zones", "_by_id")

    def __init__(self, zones: Tuple[Zone, ...] = ()) -> None:
        self._zones: Tuple[Zone, ...] = zones
        self._by_id: Dict[str, Zone] = {zone.id: zone for zone in zones}

    @classmethod
    def load(cls, zones: Iterable[Zone]) -> ZoneIndex:
        """Validate ``zones`` and build a new index."""
        ordered = tuple(zones)
        seen: set[str] = set()
        for zone in ordered:
            _validate_zone(zone)
            if zone.id in seen:
                raise ValidationError(f"duplicate zone id: {zone.id}", field="id")
            seen.add(zone.id)
        index = cls(ordered)
        logger.info("zone_index_loaded", zone_count=len(ordered))
        return index

    @classmethod
    def empty(cls) -> ZoneIndex:
        return cls(())

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones)

    def __bool__(self) -> bool:
        return bool(self._zones)

    @property
    def zones(self) -> Tuple[Zone, ...]:
        return self._zones

    def get(self, zone_id: str) -> Optional[Zone]:
        return self._by_id.get(zone_id)

    def nearest(self, point: GeoPoint) -> Optional[Tuple[Zone, float]]:
        """Zone whose centre is closest to ``point`` and that distance in metres."""
        best: Optional[Zone] = None
        best_distance = math.inf
        for zone in self._zones:
            distance = haversine_meters(point, zone.center)
            if distance < best_distance:
                best = zone
                best_distance = distance
        if best is None:
            return None
        return best, best_distance

    def describe_nearest(self, point: GeoPoint) -> str:
        """Human label of the nearest zone, ignoring how far away it is."""
        found = self.nearest(point)
        if found is None:
            return "Unknown area"
        zone, _ = found
        return f"{zone.name} ({zone.category.area_label})"

    def filter(self, category: Optional[ZoneCategory] = None) -> Sequence[Zone]:
        if category is None:
            return list(self._zones)
        return [zone for zone in self._zones if zone.category is category]

    def counts(self) -> Dict[ZoneCategory, int]:
        totals = {category: 0 for category in ZoneCategory}
        for zone in self._zones:
            totals[zone.category] += 1
        return totals


def _validate_zone(zone: Zone) -> None:
    if not isinstance(zone.id, str) or not zone.id:
        raise ValidationError(f"zone id must be a non-empty string: {zone.id!r}", field="id")
    if not isinstance(zone.category, ZoneCategory):
        raise ValidationError(f"unrecognized zone category for {zone.id}: {zone.category!r}", field="category")
    if not isinstance(zone.center, GeoPoint):
        raise ValidationError(f"zone {zone.id} has no valid center", field="center")
    radius = zone.radius_meters
    if isinstance(radius, bool) or not isinstance(radius, (int, float)) or not math.isfinite(radius) or radius <= 0:
        raise ValidationError(f"zone {zone.id} radius must be positive: {radius!r}", field="radius_meters")
