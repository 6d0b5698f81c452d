# Copyright 2025 msq
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

import httpx
import structlog

from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint

logger = structlog.get_logger(__name__)


class RoutingError(RuntimeError):
    """Directions API call failed or returned no route."""

    def __init__(self, message: str, *, info: str | None = None) -> None:
        super().__init__(message)
        self.info = info


@dataclass(frozen=True, slots=True)
class RoutePath:
    """Ordered path computed by a directions service."""

    points: Tuple[GeoPoint, ...]
    distance_meters: float
    duration_seconds: float
    cache_hit: bool = False


class PathProvider(Protocol):
    async def directions(self, start: GeoPoint, end: GeoPoint) -> RoutePath: ...


@dataclass(slots=True)
class _CacheEntry:
    value: RoutePath
    expires_at: float


class OpenRouteServiceClient:
    """OpenRouteService directions client with a small TTL cache."""

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.openrouteservice.org",
        profile: str = "driving-car",
        connect_timeout: float = 10.0,
        read_timeout: float = 10.0,
        cache_ttl: float = 300.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._profile = profile
        self._cache_ttl = cache_ttl
        self._owns_client = http_client is None
        timeout = httpx.Timeout(
            timeout=max(connect_timeout, read_timeout),
            connect=connect_timeout,
            read=read_timeout,
            write=read_timeout,
            pool=connect_timeout,
        )
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )
        self._cache: dict[str, _CacheEntry] = {}
        self._cache_lock = asyncio.Lock()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def directions(self, start: GeoPoint, end: GeoPoint) -> RoutePath:
        """Route between two points; repeated queries are served from cache."""
        cache_key = self._build_cache_key(start, end, self._profile)
        cached = await self._get_cached(cache_key)
        if cached is not None:
            logger.info("ors_cache_hit", cache_key=cache_key)
            return RoutePath(cached.points, cached.distance_meters, cached.duration_seconds, cache_hit=True)

        data = await self._request(
            f"/v2/directions/{self._profile}/geojson",
            {"coordinates": [start.to_lng_lat(), end.to_lng_lat()]},
        )
        route = self._parse_route(data)
        await self._set_cache(cache_key, route)
        logger.info(
            "ors_route_fetched",
            point_count=len(route.points),
            distance_meters=route.distance_meters,
            duration_seconds=route.duration_seconds,
        )
        return route

    async def _request(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = self._api_key
        try:
            response = await self._client.post(path, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("ors_request_failed", path=path, error=str(exc))
            raise RoutingError("routing failed", info=str(exc)) from exc
        data = response.json()
        if not isinstance(data, dict):
            raise RoutingError("unexpected routing response", info=type(data).__name__)
        return data

    @staticmethod
    def _parse_route(data: Dict[str, Any]) -> RoutePath:
        features = data.get("features") or []
        if not features:
            raise RoutingError("no route found")
        first = features[0]
        coordinates = (first.get("geometry") or {}).get("coordinates") or []
        try:
            points: List[GeoPoint] = [GeoPoint.from_lng_lat(pair) for pair in coordinates]
        except (ValidationError, TypeError) as exc:
            raise RoutingError("route geometry is malformed", info=str(exc)) from exc
        summary = (first.get("properties") or {}).get("summary") or {}
        try:
            distance = float(summary.get("distance", 0.0))
            duration = float(summary.get("duration", 0.0))
        except (TypeError, ValueError, AttributeError) as exc:
            raise RoutingError("route summary is malformed", info=str(exc)) from exc
        return RoutePath(points=tuple(points), distance_meters=distance, duration_seconds=duration)

    async def _get_cached(self, key: str) -> RoutePath | None:
        async with self._cache_lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if entry.expires_at < time.monotonic():
                self._cache.pop(key, None)
                return None
            return entry.value

    async def _set_cache(self, key: str, value: RoutePath) -> None:
        async with self._cache_lock:
            now = time.monotonic()
            expired = [k for k, entry in self._cache.items() if entry.expires_at < now]
            for k in expired:
                del self._cache[k]
            self._cache[key] = _CacheEntry(value=value, expires_at=now + self._cache_ttl)

    @staticmethod
    def _build_cache_key(start: GeoPoint, end: GeoPoint, profile: str) -> str:
        return f"{start.lng:.6f},{start.lat:.6f}->{end.lng:.6f},{end.lat:.6f}-{profile}"
