# Copyright 2025 msq
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx
import structlog

from saferoute.errors import LocationNotFoundError, ValidationError
from saferoute.geo import GeoPoint

logger = structlog.get_logger(__name__)

_COORDINATE_PAIR = re.compile(r"^(-?\d+\.?\d*)\s*,\s*(-?\d+\.?\d*)$")


class GeocodingError(RuntimeError):
    """Search API call failed."""

    def __init__(self, message: str, *, info: str | None = None) -> None:
        super().__init__(message)
        self.info = info


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    name: str
    location: GeoPoint


class GeocodeProvider(Protocol):
    async def geocode(self, query: str) -> Optional[GeocodeResult]: ...


def parse_coordinate_pair(text: str) -> Optional[GeoPoint]:
    """Parse ``"lat, lng"``; ``None`` when the text is not a plain pair."""
    match = _COORDINATE_PAIR.match(text.strip())
    if match is None:
        return None
    return GeoPoint(lat=float(match.group(1)), lng=float(match.group(2)))


class NominatimClient:
    """OpenStreetMap Nominatim search client."""

    def __init__(
        self,
        *,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "saferoute",
        language: str = "en",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = http_client is None
        headers = {"User-Agent": user_agent, "Accept-Language": language}
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout, connect=timeout),
            headers=headers,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def geocode(self, query: str) -> Optional[GeocodeResult]:
        params = {"format": "json", "q": query, "limit": 1}
        try:
            response = await self._client.get("/search", params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("nominatim_request_failed", query=query, error=str(exc))
            raise GeocodingError("geocoding failed", info=str(exc)) from exc
        data: List[Dict[str, Any]] = response.json()
        if not isinstance(data, list):
            raise GeocodingError("unexpected geocoding response", info=type(data).__name__)
        if not data:
            return None
        first = data[0]
        try:
            location = GeoPoint(lat=float(first["lat"]), lng=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError("geocoding result is malformed", info=str(exc)) from exc
        return GeocodeResult(name=str(first.get("display_name") or query), location=location)


class LocationResolver:
    """Turns user-entered text into a point: coordinate pair first, then search."""

    def __init__(self, geocoder: GeocodeProvider) -> None:
        self._geocoder = geocoder

    async def resolve(self, text: str) -> GeoPoint:
        value = (text or "").strip()
        if not value:
            raise ValidationError("location text is empty", field="location")
        # an out-of-range pair raises here instead of going to search
        pair = parse_coordinate_pair(value)
        if pair is not None:
            return pair
        result = await self._geocoder.geocode(value)
        if result is None:
            raise LocationNotFoundError(value)
        logger.info("location_geocoded", query=value, name=result.name)
        return result.location
