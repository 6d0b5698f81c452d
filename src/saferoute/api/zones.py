# Copyright 2025 msq
"""Zone catalog endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Request

from saferoute.zones import ZoneCategory

from .deps import require_service
from .schemas import ZoneCatalogIn, ZoneOut

router = APIRouter(prefix="/zones", tags=["zones"])


@router.get("", response_model=List[ZoneOut])
async def list_zones(request: Request, category: Optional[ZoneCategory] = None) -> List[ZoneOut]:
    """Zones in load order, optionally only one category."""
    service = require_service(request)
    return [ZoneOut.from_zone(zone) for zone in service.zones(category)]


@router.get("/stats")
async def zone_stats(request: Request) -> Dict[str, int]:
    return require_service(request).zone_stats()


@router.put("", response_model=Dict[str, int])
async def replace_zones(payload: ZoneCatalogIn, request: Request) -> Dict[str, int]:
    """Swap in a whole new catalog."""
    service = require_service(request)
    index = service.reload_zones(payload.model_dump(exclude_none=True))
    return {"zone_count": len(index)}
