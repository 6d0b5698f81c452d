"""Zone catalog, nearest-zone index and live registry."""

from .catalog import DEFAULT_CATALOG_PATH, ZoneRecord, load_catalog, parse_catalog, zones_from_records
from .index import ZoneIndex
from .models import SafetyRating, Zone, ZoneCategory
from .registry import ZoneRegistry, ZoneRegistryState

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "SafetyRating",
    "Zone",
    "ZoneCategory",
    "ZoneIndex",
    "ZoneRecord",
    "ZoneRegistry",
    "ZoneRegistryState",
    "load_catalog",
    "parse_catalog",
    "zones_from_records",
]
