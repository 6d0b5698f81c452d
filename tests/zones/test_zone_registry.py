from __future__ import annotations

import pytest

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint
from saferoute.zones import Zone, ZoneCategory, ZoneIndex, ZoneRegistry


def _zone(zone_id: str, category: ZoneCategory, radius: float = 100.0) -> Zone:
    return Zone(id=zone_id, name=zone_id, category=category, center=GeoPoint(0.0, 0.0), radius_meters=radius)


def test_registry_starts_empty() -> None:
    registry = ZoneRegistry()
    assert len(registry.current()) == 0


def test_replace_swaps_whole_index() -> None:
    registry = ZoneRegistry(ZoneIndex.load([_zone("old", ZoneCategory.SAFE)]))
    before = registry.current()

    registry.replace([_zone("new", ZoneCategory.UNSAFE)])

    after = registry.current()
    assert after is not before
    assert [z.id for z in after] == ["new"]
    # the old snapshot is untouched for queries still holding it
    assert [z.id for z in before] == ["old"]


def test_failed_replace_keeps_previous_index() -> None:
    registry = ZoneRegistry(ZoneIndex.load([_zone("keep", ZoneCategory.SAFE)]))
    with pytest.raises(ValidationError):
        registry.replace([_zone("bad", ZoneCategory.SAFE, radius=-1.0)])
    assert [z.id for z in registry.current()] == ["keep"]


def test_snapshot_records_load_time() -> None:
    registry = ZoneRegistry()
    first = registry.snapshot()
    registry.install(ZoneIndex.load([_zone("a", ZoneCategory.MODERATE)]))
    second = registry.snapshot()
    assert second.loaded_at >= first.loaded_at
    assert len(second.index) == 1
