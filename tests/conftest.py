from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, os.fspath(ROOT / "src"))

from saferoute.geo import GeoPoint  # noqa: E402
from saferoute.zones import Zone, ZoneCategory, ZoneIndex  # noqa: E402


def _zone(zone_id: str, category: ZoneCategory, lat: float, lng: float, radius: float) -> Zone:
    return Zone(
        id=zone_id,
        name=f"zone-{zone_id}",
        category=category,
        center=GeoPoint(lat=lat, lng=lng),
        radius_meters=radius,
    )


@pytest.fixture
def single_unsafe_index() -> ZoneIndex:
    """One unsafe zone, radius 100 m, centred on (10, 10)."""
    return ZoneIndex.load([_zone("u1", ZoneCategory.UNSAFE, 10.0, 10.0, 100.0)])


@pytest.fixture
def three_zone_index() -> ZoneIndex:
    """Safe, moderate and unsafe zones about 11 km apart on the equator, radius 200 m."""
    return ZoneIndex.load(
        [
            _zone("s", ZoneCategory.SAFE, 0.0, 0.0, 200.0),
            _zone("m", ZoneCategory.MODERATE, 0.0, 0.1, 200.0),
            _zone("u", ZoneCategory.UNSAFE, 0.0, 0.2, 200.0),
        ]
    )
