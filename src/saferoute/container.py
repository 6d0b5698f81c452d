# Copyright 2025 msq
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import structlog

from saferoute.config import AppConfig
from saferoute.external import LocationResolver, NominatimClient, OpenRouteServiceClient
from saferoute.incidents import IncidentDensityScorer, InMemoryIncidentStore
from saferoute.rating import SafetyRater
from saferoute.services import SafetyMapService
from saferoute.zones import ZoneRegistry, load_catalog

logger = structlog.get_logger(__name__)


class ServiceContainer:
    """Small service container wiring the application for the API and CLI."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._services: dict[str, Any] = {}
        self._config: Optional[AppConfig] = config
        self._closers: list[Callable[[], Awaitable[None]]] = []

    def register(self, name: str, service: Any) -> None:
        self._services[name] = service
        logger.info("service_registered", name=name)

    def get(self, name: str) -> Any:
        if name not in self._services:
            raise KeyError(f"Service not found: {name}")
        return self._services[name]

    def on_close(self, closer: Callable[[], Awaitable[None]]) -> None:
        self._closers.append(closer)

    async def aclose(self) -> None:
        while self._closers:
            closer = self._closers.pop()
            await closer()

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError("Config not initialized")
        return self._config

    @property
    def registry(self) -> ZoneRegistry:
        return self.get("zone_registry")

    @property
    def safety_service(self) -> SafetyMapService:
        return self.get("safety_service")


def build_container(config: AppConfig, **overrides: Any) -> ServiceContainer:
    """Wire default collaborators; ``overrides`` replace any of them by name."""
    container = ServiceContainer(config)

    registry = overrides.get("zone_registry") or ZoneRegistry(load_catalog(config.zone_catalog_path))
    container.register("zone_registry", registry)

    rater = SafetyRater(registry, config.rating_policy())
    container.register("rater", rater)

    path_provider = overrides.get("path_provider")
    if path_provider is None:
        ors = OpenRouteServiceClient(
            api_key=config.ors_api_key,
            base_url=config.ors_base_url,
            profile=config.ors_profile,
            connect_timeout=config.http_connect_timeout,
            read_timeout=config.http_read_timeout,
            cache_ttl=config.route_cache_ttl_seconds,
        )
        container.on_close(ors.close)
        path_provider = ors
    container.register("path_provider", path_provider)

    geocoder = overrides.get("geocoder")
    if geocoder is None:
        nominatim = NominatimClient(
            base_url=config.nominatim_base_url,
            timeout=config.http_read_timeout,
        )
        container.on_close(nominatim.close)
        geocoder = nominatim
    container.register("geocoder", geocoder)

    incident_store = overrides.get("incident_store") or InMemoryIncidentStore()
    container.register("incident_store", incident_store)

    service = SafetyMapService(
        registry=registry,
        rater=rater,
        incident_store=incident_store,
        density_scorer=IncidentDensityScorer(
            radius_meters=config.incident_radius_meters,
            penalty_per_incident=config.incident_penalty,
        ),
        path_provider=path_provider,
        resolver=LocationResolver(geocoder),
        share_base_url=config.share_base_url,
        sos_phone=config.sos_phone,
    )
    container.register("safety_service", service)
    return container
