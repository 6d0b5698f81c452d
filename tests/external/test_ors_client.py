from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import httpx
import pytest

from saferoute.geo import GeoPoint
from saferoute.external import OpenRouteServiceClient, RoutingError
from saferoute.external import routing as routing_module

START = GeoPoint(40.7580, -73.9855)
END = GeoPoint(40.7527, -73.9772)


def _route_payload(coords: List[List[float]], distance: float = 1234.0, duration: float = 300.0) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": coords},
                "properties": {"summary": {"distance": distance, "duration": duration}},
            }
        ],
    }


def _client(responses: List[Dict[str, Any]], seen: List[httpx.Request]) -> OpenRouteServiceClient:
    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if not responses:
            raise AssertionError("unexpected request: no scripted response left")
        payload = responses.pop(0)
        status_code = payload.pop("_status", 200)
        return httpx.Response(status_code, json=payload)

    transport = httpx.MockTransport(handler)
    return OpenRouteServiceClient(
        api_key="secret",
        base_url="https://mock.ors",
        http_client=httpx.AsyncClient(transport=transport, base_url="https://mock.ors"),
    )


@pytest.mark.asyncio
async def test_directions_converts_geojson_to_points() -> None:
    seen: List[httpx.Request] = []
    client = _client([_route_payload([[-73.9855, 40.7580], [-73.98, 40.755], [-73.9772, 40.7527]])], seen)

    route = await client.directions(START, END)

    assert route.points[0] == START
    assert route.points[-1] == END
    assert route.distance_meters == 1234.0
    assert route.duration_seconds == 300.0
    assert route.cache_hit is False

    request = seen[0]
    assert request.url.path == "/v2/directions/driving-car/geojson"
    assert request.headers["Authorization"] == "secret"
    assert json.loads(request.content) == {"coordinates": [[-73.9855, 40.758], [-73.9772, 40.7527]]}
    await client.close()


@pytest.mark.asyncio
async def test_directions_uses_cache() -> None:
    seen: List[httpx.Request] = []
    client = _client([_route_payload([[-73.9855, 40.7580]])], seen)

    first = await client.directions(START, END)
    second = await client.directions(START, END)

    assert len(seen) == 1
    assert second.points == first.points
    assert second.cache_hit is True
    await client.close()


@pytest.mark.asyncio
async def test_no_features_is_a_routing_error() -> None:
    client = _client([{"type": "FeatureCollection", "features": []}], [])
    with pytest.raises(RoutingError, match="no route found"):
        await client.directions(START, END)
    await client.close()


@pytest.mark.asyncio
async def test_http_error_is_wrapped() -> None:
    client = _client([{"_status": 403, "error": "forbidden"}], [])
    with pytest.raises(RoutingError) as excinfo:
        await client.directions(START, END)
    assert "403" in (excinfo.value.info or "")
    await client.close()


@pytest.mark.asyncio
async def test_malformed_geometry_is_a_routing_error() -> None:
    client = _client([_route_payload([[-73.9855, 140.0]])], [])
    with pytest.raises(RoutingError):
        await client.directions(START, END)
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("summary", [{"distance": None, "duration": 10.0}, {"distance": 5.0, "duration": "soon"}])
async def test_malformed_summary_is_a_routing_error(summary: Dict[str, Any]) -> None:
    payload = _route_payload([[-73.9855, 40.7580]])
    payload["features"][0]["properties"]["summary"] = summary
    client = _client([payload], [])
    with pytest.raises(RoutingError, match="summary"):
        await client.directions(START, END)
    await client.close()


@pytest.mark.asyncio
async def test_expired_entries_are_dropped_on_write(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = {"now": 1000.0}
    monkeypatch.setattr(routing_module, "time", SimpleNamespace(monotonic=lambda: clock["now"]))
    client = _client([_route_payload([[-73.9855, 40.7580]]), _route_payload([[-73.9772, 40.7527]])], [])

    await client.directions(START, END)
    assert len(client._cache) == 1

    clock["now"] += 301.0
    await client.directions(END, START)

    assert len(client._cache) == 1
    assert client._build_cache_key(END, START, "driving-car") in client._cache
    await client.close()
