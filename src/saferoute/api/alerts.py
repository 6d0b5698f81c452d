# Copyright 2025 msq
"""SOS and live-location share endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from .deps import require_service
from .schemas import ShareIn, ShareOut, SosIn, SosOut

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post("/sos", response_model=SosOut)
async def sos(payload: SosIn, request: Request) -> SosOut:
    alert = require_service(request).sos(payload.to_point())
    return SosOut(message=alert.message, whatsapp_url=alert.whatsapp_url, sms_url=alert.sms_url)


@router.post("/share", response_model=ShareOut)
async def share(payload: ShareIn, request: Request) -> ShareOut:
    session = require_service(request).start_share(payload.name, payload.duration_minutes)
    return ShareOut(
        share_id=session.share_id,
        name=session.name,
        url=session.url,
        invite_text=session.invite_text,
        expires_at=session.expires_at.isoformat() if session.expires_at else None,
    )
