from __future__ import annotations

import math

import pytest

from saferoute.errors import ValidationError
from saferoute.geo import EARTH_RADIUS_METERS, GeoPoint, haversine_meters


def test_one_degree_of_longitude_on_equator() -> None:
    distance = haversine_meters(GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0))
    assert distance == pytest.approx(EARTH_RADIUS_METERS * math.pi / 180, rel=1e-9)
    assert distance == pytest.approx(111194.93, abs=0.1)


def test_distance_is_symmetric_and_zero_at_same_point() -> None:
    a = GeoPoint(40.7580, -73.9855)
    b = GeoPoint(40.7527, -73.9772)
    assert haversine_meters(a, b) == pytest.approx(haversine_meters(b, a))
    assert haversine_meters(a, a) == 0.0


def test_antipodal_points_do_not_fail() -> None:
    distance = haversine_meters(GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0))
    assert distance == pytest.approx(EARTH_RADIUS_METERS * math.pi)


@pytest.mark.parametrize(
    "lat,lng",
    [
        (float("nan"), 0.0),
        (0.0, float("nan")),
        (90.5, 0.0),
        (-91.0, 0.0),
        (0.0, 180.01),
        (0.0, float("inf")),
        ("north", 0.0),
        (True, 0.0),
    ],
)
def test_malformed_coordinates_are_rejected(lat, lng) -> None:
    with pytest.raises(ValidationError):
        GeoPoint(lat=lat, lng=lng)


def test_numeric_strings_are_normalised_to_float() -> None:
    point = GeoPoint(lat="10.5", lng="-3")
    assert point.lat == 10.5
    assert point.lng == -3.0


def test_geojson_pair_is_lng_first() -> None:
    point = GeoPoint.from_lng_lat([-73.9855, 40.7580])
    assert point.lat == 40.7580
    assert point.to_lng_lat() == [-73.9855, 40.7580]
    assert point.as_text() == "40.75800, -73.98550"
