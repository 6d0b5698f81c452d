from __future__ import annotations

from typing import List, Optional

import httpx
import pytest

from saferoute.errors import LocationNotFoundError, ValidationError
from saferoute.external import (
    GeocodeResult,
    GeocodingError,
    LocationResolver,
    NominatimClient,
    parse_coordinate_pair,
)
from saferoute.geo import GeoPoint


def _client(status_code: int, payload, seen: List[httpx.Request]) -> NominatimClient:
    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, json=payload)

    return NominatimClient(
        base_url="https://mock.nominatim",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://mock.nominatim"),
    )


class StubGeocoder:
    def __init__(self, result: Optional[GeocodeResult]) -> None:
        self.result = result
        self.queries: List[str] = []

    async def geocode(self, query: str) -> Optional[GeocodeResult]:
        self.queries.append(query)
        return self.result


@pytest.mark.parametrize(
    "text,expected",
    [
        ("40.7580, -73.9855", GeoPoint(40.7580, -73.9855)),
        ("  -33.9,151.2 ", GeoPoint(-33.9, 151.2)),
        ("12, 7", GeoPoint(12.0, 7.0)),
    ],
)
def test_parse_coordinate_pair(text: str, expected: GeoPoint) -> None:
    assert parse_coordinate_pair(text) == expected


@pytest.mark.parametrize("text", ["Central Station", "40.7N, 73.9W", "1, 2, 3", ""])
def test_non_pairs_are_not_parsed(text: str) -> None:
    assert parse_coordinate_pair(text) is None


def test_out_of_range_pair_is_invalid() -> None:
    with pytest.raises(ValidationError):
        parse_coordinate_pair("123.0, 10.0")


@pytest.mark.asyncio
async def test_geocode_returns_first_match() -> None:
    seen: List[httpx.Request] = []
    client = _client(200, [{"lat": "40.7527", "lon": "-73.9772", "display_name": "Grand Central"}], seen)

    result = await client.geocode("grand central")

    assert result == GeocodeResult(name="Grand Central", location=GeoPoint(40.7527, -73.9772))
    params = seen[0].url.params
    assert params["q"] == "grand central"
    assert params["format"] == "json"
    assert params["limit"] == "1"
    await client.close()


@pytest.mark.asyncio
async def test_geocode_without_match_returns_none() -> None:
    client = _client(200, [], [])
    assert await client.geocode("nowhere at all") is None
    await client.close()


@pytest.mark.asyncio
async def test_geocode_http_failure() -> None:
    client = _client(500, {"error": "boom"}, [])
    with pytest.raises(GeocodingError):
        await client.geocode("x")
    await client.close()


@pytest.mark.asyncio
async def test_resolver_prefers_coordinate_pairs() -> None:
    geocoder = StubGeocoder(None)
    point = await LocationResolver(geocoder).resolve("10.5, 20.25")
    assert point == GeoPoint(10.5, 20.25)
    assert geocoder.queries == []


@pytest.mark.asyncio
async def test_resolver_falls_back_to_search() -> None:
    geocoder = StubGeocoder(GeocodeResult(name="Plaza", location=GeoPoint(1.0, 2.0)))
    assert await LocationResolver(geocoder).resolve(" Plaza ") == GeoPoint(1.0, 2.0)
    assert geocoder.queries == ["Plaza"]


@pytest.mark.asyncio
async def test_resolver_errors() -> None:
    resolver = LocationResolver(StubGeocoder(None))
    with pytest.raises(ValidationError):
        await resolver.resolve("   ")
    with pytest.raises(LocationNotFoundError):
        await resolver.resolve("Atlantis")
