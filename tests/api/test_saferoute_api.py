from __future__ import annotations

import dataclasses
from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from saferoute.api.main import create_app
from saferoute.config import AppConfig
from saferoute.container import build_container
from saferoute.external import GeocodeResult, RoutePath, RoutingError
from saferoute.geo import GeoPoint
from saferoute.zones import ZoneIndex, ZoneRegistry


class StubPathProvider:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    async def directions(self, start: GeoPoint, end: GeoPoint) -> RoutePath:
        if self.fail:
            raise RoutingError("routing failed", info="HTTP 503")
        return RoutePath(points=(start, end), distance_meters=1500.0, duration_seconds=120.0)


class StubGeocoder:
    async def geocode(self, query: str) -> Optional[GeocodeResult]:
        if query == "Harbour":
            return GeocodeResult(name="Harbour", location=GeoPoint(0.0, 0.2))
        return None


def _config() -> AppConfig:
    return dataclasses.replace(
        AppConfig.load_from_env(),
        share_base_url="https://saferoute.example/",
        sos_phone=None,
        log_json=False,
        log_level="WARNING",
    )


def _client(index: ZoneIndex, *, fail_routing: bool = False) -> TestClient:
    config = _config()
    container = build_container(
        config,
        zone_registry=ZoneRegistry(index),
        path_provider=StubPathProvider(fail=fail_routing),
        geocoder=StubGeocoder(),
    )
    app = create_app(config, container=container, metrics_registry=CollectorRegistry())
    return TestClient(app)


@pytest.fixture
def client(three_zone_index: ZoneIndex) -> Iterator[TestClient]:
    with _client(three_zone_index) as test_client:
        yield test_client


def test_healthz(client: TestClient) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["zone_count"] == 3
    assert "zones_loaded_at" in body


def test_trace_id_is_echoed(client: TestClient) -> None:
    resp = client.get("/healthz", headers={"X-Trace-Id": "trace-123"})
    assert resp.headers["X-Trace-Id"] == "trace-123"
    assert client.get("/healthz").headers["X-Trace-Id"]


def test_list_zones_and_stats(client: TestClient) -> None:
    resp = client.get("/zones")
    assert resp.status_code == 200
    assert [zone["id"] for zone in resp.json()] == ["s", "m", "u"]

    only_unsafe = client.get("/zones", params={"category": "unsafe"}).json()
    assert [zone["id"] for zone in only_unsafe] == ["u"]
    assert only_unsafe[0]["radius_meters"] == 200.0

    assert client.get("/zones/stats").json() == {"safe": 1, "moderate": 1, "unsafe": 1}


def test_replace_zones(client: TestClient) -> None:
    resp = client.put(
        "/zones",
        json={"version": "2", "zones": [{"id": "x", "name": "X", "type": "safe", "lat": 5, "lng": 5, "radius": 100}]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"zone_count": 1}
    assert client.get("/healthz").json()["zone_count"] == 1


def test_replace_zones_rejects_bad_catalog(client: TestClient) -> None:
    resp = client.put(
        "/zones",
        json={"zones": [{"id": "x", "name": "X", "type": "safe", "lat": 5, "lng": 5, "radius": -1}]},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"
    assert client.get("/healthz").json()["zone_count"] == 3


def test_rate_point(client: TestClient) -> None:
    resp = client.post("/ratings/point", json={"lat": 0.0, "lng": 0.2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["rating"] == "unsafe"
    assert body["zone_id"] == "u"
    assert body["distance_meters"] == pytest.approx(0.0)

    far = client.post("/ratings/point", json={"lat": 45.0, "lng": 45.0}).json()
    assert far["rating"] == "unknown"


def test_rate_point_rejects_out_of_range(client: TestClient) -> None:
    resp = client.post("/ratings/point", json={"lat": 91.0, "lng": 0.0})
    assert resp.status_code == 422


def test_rate_route(client: TestClient) -> None:
    path = [{"lat": 0.0, "lng": 0.0}] * 3 + [{"lat": 0.0, "lng": 0.2}] * 2
    resp = client.post("/ratings/route", json={"path": path})
    assert resp.status_code == 200
    body = resp.json()
    assert body["overall"] == "moderate"
    assert body["has_unsafe_segment"] is True
    assert body["known_count"] == 5
    assert body["average_weight"] == pytest.approx(0.4)


def test_rate_empty_route(client: TestClient) -> None:
    body = client.post("/ratings/route", json={"path": []}).json()
    assert body["overall"] == "safe"
    assert body["total_samples"] == 0


def test_plan_route(client: TestClient) -> None:
    resp = client.post("/routes/plan", json={"start": "0, 0", "end": "Harbour", "avoid_unsafe": True})
    assert resp.status_code == 200
    body = resp.json()
    assert body["distance_km"] == 1.5
    assert body["duration_minutes"] == 2
    assert body["assessment"]["has_unsafe_segment"] is True
    assert body["warning"] is not None


def test_plan_route_unknown_place(client: TestClient) -> None:
    resp = client.post("/routes/plan", json={"start": "0, 0", "end": "Atlantis"})
    assert resp.status_code == 404
    assert resp.json()["query"] == "Atlantis"


def test_plan_route_upstream_failure(three_zone_index: ZoneIndex) -> None:
    with _client(three_zone_index, fail_routing=True) as test_client:
        resp = test_client.post("/routes/plan", json={"start": "0, 0", "end": "1, 1"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "routing_error"


def test_locate(client: TestClient) -> None:
    body = client.post("/locate", json={"lat": 0.0, "lng": 0.0}).json()
    assert body["rating"] == "safe"
    assert body["nearest_zone"] == "zone-s (Safe area)"
    assert body["incident_score"]["score"] == 100


def test_incident_flow(client: TestClient) -> None:
    created = client.post(
        "/incidents",
        json={"lat": 0.0, "lng": 0.0, "type": "theft", "description": "bag snatched", "reported_when": "1h"},
    )
    assert created.status_code == 201
    assert created.json()["type_label"] == "Theft"

    listed = client.get("/incidents").json()
    assert [item["id"] for item in listed] == [created.json()["id"]]

    score = client.post("/incidents/score", json={"lat": 0.0, "lng": 0.001}).json()
    assert score == {"score": 85, "nearby_count": 1, "level": "good"}


def test_incident_with_unknown_type(client: TestClient) -> None:
    resp = client.post("/incidents", json={"lat": 0.0, "lng": 0.0, "type": "alien"})
    assert resp.status_code == 422


def test_sos(client: TestClient) -> None:
    body = client.post("/alerts/sos", json={"lat": 1.5, "lng": 2.5}).json()
    assert "Location: 1.50000, 2.50000" in body["message"]
    assert body["sms_url"].startswith("sms:?body=")

    blind = client.post("/alerts/sos", json={}).json()
    assert "Location unavailable" in blind["message"]


def test_share(client: TestClient) -> None:
    body = client.post("/alerts/share", json={"name": "Kim", "duration_minutes": 60}).json()
    assert body["url"].startswith("https://saferoute.example/?share=")
    assert body["invite_text"].endswith(body["url"])
    assert body["expires_at"] is not None

    open_ended = client.post("/alerts/share", json={}).json()
    assert open_ended["name"] == "Anonymous"
    assert open_ended["expires_at"] is None


def test_metrics_exposed(client: TestClient) -> None:
    client.get("/healthz")
    resp = client.get("/metrics")
    assert resp.status_code == 200
