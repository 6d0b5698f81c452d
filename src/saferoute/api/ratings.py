# Copyright 2025 msq
"""Point and route rating endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from .deps import require_service
from .schemas import PointIn, PointRatingOut, RoutePlanIn, RouteRatingIn

router = APIRouter(tags=["ratings"])


@router.post("/ratings/point", response_model=PointRatingOut)
async def rate_point(payload: PointIn, request: Request) -> PointRatingOut:
    service = require_service(request)
    assessment = service.rater.assess_point(payload.to_point())
    zone = assessment.zone
    return PointRatingOut(
        rating=assessment.rating.value,
        zone_id=zone.id if zone else None,
        zone_name=zone.name if zone else None,
        distance_meters=assessment.distance_meters,
    )


@router.post("/ratings/route")
async def rate_route(payload: RouteRatingIn, request: Request) -> Dict[str, Any]:
    """Rate an already computed path."""
    service = require_service(request)
    path = [point.to_point() for point in payload.path]
    return service.rate_path(path, payload.sample_target_count).to_dict()


@router.post("/routes/plan")
async def plan_route(payload: RoutePlanIn, request: Request) -> Dict[str, Any]:
    """Resolve both ends, fetch directions and rate the path."""
    service = require_service(request)
    result = await service.plan_route(payload.start, payload.end, avoid_unsafe=payload.avoid_unsafe)
    return result.to_dict()


@router.post("/locate")
async def locate(payload: PointIn, request: Request) -> Dict[str, Any]:
    service = require_service(request)
    result = await service.locate(payload.to_point())
    return result.to_dict()
