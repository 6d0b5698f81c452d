# Copyright 2025 msq
from __future__ import annotations

from fastapi import HTTPException, Request, status

from saferoute.container import ServiceContainer
from saferoute.services import SafetyMapService


def require_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "service container unavailable")
    return container


def require_service(request: Request) -> SafetyMapService:
    return require_container(request).safety_service
