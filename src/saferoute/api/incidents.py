# Copyright 2025 msq
"""Anonymous incident reporting endpoints."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Request, status

from .deps import require_service
from .schemas import IncidentIn, PointIn

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("")
async def list_incidents(request: Request) -> List[Dict[str, Any]]:
    service = require_service(request)
    return [report.to_dict() for report in await service.list_incidents()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def report_incident(payload: IncidentIn, request: Request) -> Dict[str, Any]:
    service = require_service(request)
    report = await service.report_incident(
        incident_type=payload.type.value,
        location=payload.to_point(),
        description=payload.description,
        reported_when=payload.reported_when.value,
    )
    return report.to_dict()


@router.post("/score")
async def incident_score(payload: PointIn, request: Request) -> Dict[str, Any]:
    """Score out of 100 from incidents reported near the point."""
    service = require_service(request)
    score = await service.incident_score(payload.to_point())
    return score.to_dict()
