# Copyright 2025 msq
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Sequence

import jsonschema
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint

from .index import ZoneIndex
from .models import Zone, ZoneCategory

logger = structlog.get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "default_zones.json"
SCHEMA_PATH = DATA_DIR / "zone_catalog_schema.json"


class ZoneRecord(BaseModel):
    """One catalog entry, using the catalog's own field names."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="unique zone id")
    name: str = Field(..., description="display name")
    type: ZoneCategory = Field(..., description="safe / moderate / unsafe")
    lat: float = Field(..., description="centre latitude")
    lng: float = Field(..., description="centre longitude")
    radius: float = Field(..., description="radius in metres")
    desc: str = Field("", description="short description")

    def to_zone(self) -> Zone:
        return Zone(
            id=self.id,
            name=self.name,
            category=self.type,
            center=GeoPoint(lat=self.lat, lng=self.lng),
            radius_meters=self.radius,
            description=self.desc,
        )

    @classmethod
    def from_zone(cls, zone: Zone) -> ZoneRecord:
        return cls(
            id=zone.id,
            name=zone.name,
            type=zone.category,
            lat=zone.center.lat,
            lng=zone.center.lng,
            radius=zone.radius_meters,
            desc=zone.description,
        )


@lru_cache(maxsize=1)
def _load_schema() -> dict:
    with SCHEMA_PATH.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def zones_from_records(records: Sequence[Mapping[str, Any]]) -> List[Zone]:
    """Convert raw catalog records into zones; invalid records raise ``ValidationError``."""
    zones: List[Zone] = []
    for position, raw in enumerate(records):
        try:
            record = ZoneRecord.model_validate(raw)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise ValidationError(
                f"invalid zone record #{position}: {location}: {first.get('msg')}",
                field=location or None,
            ) from exc
        zones.append(record.to_zone())
    return zones


def parse_catalog(document: Mapping[str, Any]) -> ZoneIndex:
    """Validate a ``{"zones": [...]}`` document and build an index."""
    try:
        jsonschema.validate(instance=document, schema=_load_schema())
    except jsonschema.ValidationError as exc:
        path = ".".join(str(part) for part in exc.absolute_path)
        raise ValidationError(f"zone catalog rejected at {path or '<root>'}: {exc.message}", field=path or None) from exc
    return ZoneIndex.load(zones_from_records(document.get("zones") or []))


def load_catalog(path: Path | str | None = None) -> ZoneIndex:
    """Read a zone catalog file; defaults to the packaged demo catalog."""
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    with catalog_path.open("r", encoding="utf-8") as fh:
        try:
            document = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"zone catalog is not valid JSON: {catalog_path}") from exc
    if not isinstance(document, dict):
        raise ValidationError(f"zone catalog must be a JSON object: {catalog_path}")
    index = parse_catalog(document)
    logger.info("zone_catalog_loaded", path=str(catalog_path), zone_count=len(index))
    return index
