# Copyright 2025 msq
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import REGISTRY, CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import BaseHTTPMiddleware

from saferoute.config import AppConfig, load_env_files
from saferoute.container import ServiceContainer, build_container
from saferoute.errors import LocationNotFoundError, ValidationError
from saferoute.external import GeocodingError, RoutingError
from saferoute.logging import clear_trace_id, configure_logging, set_trace_id

from . import alerts as alerts_api
from . import incidents as incidents_api
from . import ratings as ratings_api
from . import zones as zones_api
from .deps import require_container

logger = structlog.get_logger(__name__)


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Trace-Id or mint one, and echo it on the response."""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or str(uuid.uuid4())
        set_trace_id(trace_id)
        try:
            response = await call_next(request)
            response.headers["X-Trace-Id"] = trace_id
            return response
        finally:
            clear_trace_id()


def _error(status_code: int, error: str, detail: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"error": error, "detail": detail}
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("request_rejected", path=request.url.path, detail=str(exc), field=exc.field)
        return _error(422, "validation_error", str(exc), field=exc.field)

    @app.exception_handler(LocationNotFoundError)
    async def _location_not_found(request: Request, exc: LocationNotFoundError) -> JSONResponse:
        logger.info("location_not_found", query=exc.query)
        return _error(status.HTTP_404_NOT_FOUND, "location_not_found", str(exc), query=exc.query)

    @app.exception_handler(RoutingError)
    async def _routing_error(request: Request, exc: RoutingError) -> JSONResponse:
        logger.warning("upstream_routing_error", detail=str(exc), info=exc.info)
        return _error(status.HTTP_502_BAD_GATEWAY, "routing_error", str(exc), info=exc.info)

    @app.exception_handler(GeocodingError)
    async def _geocoding_error(request: Request, exc: GeocodingError) -> JSONResponse:
        logger.warning("upstream_geocoding_error", detail=str(exc), info=exc.info)
        return _error(status.HTTP_502_BAD_GATEWAY, "geocoding_error", str(exc), info=exc.info)


def create_app(
    config: AppConfig | None = None,
    *,
    container: ServiceContainer | None = None,
    metrics_registry: CollectorRegistry | None = None,
) -> FastAPI:
    cfg = config or (container.config if container is not None else AppConfig.load_from_env())
    configure_logging(json_logs=cfg.log_json, log_level=cfg.log_level)
    services = container or build_container(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("saferoute_api_started", zone_count=len(services.registry.current()))
        try:
            yield
        finally:
            await services.aclose()
            logger.info("saferoute_api_stopped")

    app = FastAPI(title="SafeRoute API", lifespan=lifespan)
    app.state.container = services
    app.add_middleware(TraceIDMiddleware)
    Instrumentator(registry=metrics_registry or REGISTRY).instrument(app).expose(app)
    _install_error_handlers(app)

    @app.get("/healthz")
    async def healthz(request: Request) -> Dict[str, Any]:
        registry = require_container(request).registry
        state = registry.snapshot()
        return {
            "status": "ok",
            "zone_count": len(state.index),
            "zones_loaded_at": state.loaded_at.isoformat(),
        }

    app.include_router(zones_api.router)
    app.include_router(ratings_api.router)
    app.include_router(incidents_api.router)
    app.include_router(alerts_api.router)
    return app


def main() -> None:
    import uvicorn

    load_env_files()
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
