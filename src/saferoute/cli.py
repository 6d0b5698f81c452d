# Copyright 2025 msq
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Sequence

from saferoute.config import AppConfig, load_env_files
from saferoute.errors import ValidationError
from saferoute.geo import GeoPoint
from saferoute.logging import configure_logging
from saferoute.rating import SafetyRater
from saferoute.zones import ZoneCategory, load_catalog


def load_geojson_path(path: str) -> List[GeoPoint]:
    """Coordinates of the first LineString in a GeoJSON file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"route file is not valid JSON: {path}") from exc
    if not isinstance(data, dict):
        raise ValidationError(f"route file must be a GeoJSON object: {path}")
    geometry = _first_line_geometry(data)
    if geometry is None:
        raise ValidationError(f"no LineString geometry in {path}")
    try:
        return [GeoPoint.from_lng_lat(pair) for pair in geometry.get("coordinates") or []]
    except TypeError as exc:
        raise ValidationError(f"malformed LineString coordinates in {path}") from exc


def _first_line_geometry(data: Dict[str, Any]) -> Dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    kind = data.get("type")
    if kind == "LineString":
        return data
    if kind == "Feature":
        return _first_line_geometry(data.get("geometry") or {})
    if kind == "FeatureCollection":
        for feature in data.get("features") or []:
            found = _first_line_geometry(feature)
            if found is not None:
                return found
    return None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="saferoute", description="Zone-proximity safety ratings")
    parser.add_argument("--catalog", help="zone catalog JSON (defaults to the packaged demo catalog)")
    sub = parser.add_subparsers(dest="command", required=True)

    point = sub.add_parser("rate-point", help="rate one coordinate")
    point.add_argument("lat", type=float)
    point.add_argument("lng", type=float)

    route = sub.add_parser("rate-route", help="rate the LineString of a GeoJSON file")
    route.add_argument("path", help="GeoJSON file")
    route.add_argument("--samples", type=int, default=None, help="target number of sampled points")

    zones = sub.add_parser("zones", help="list catalog zones")
    zones.add_argument("--category", choices=[c.value for c in ZoneCategory])
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    load_env_files()
    cfg = AppConfig.load_from_env()
    # stdout carries the JSON result
    configure_logging(json_logs=cfg.log_json, log_level=cfg.log_level, stream=sys.stderr)

    try:
        index = load_catalog(args.catalog or cfg.zone_catalog_path)
        rater = SafetyRater(index, cfg.rating_policy())
        if args.command == "rate-point":
            assessment = rater.assess_point(GeoPoint(lat=args.lat, lng=args.lng))
            output: Any = {
                "rating": assessment.rating.value,
                "nearest_zone": index.describe_nearest(assessment.point),
                "distance_meters": assessment.distance_meters,
            }
        elif args.command == "rate-route":
            output = rater.rate_route(load_geojson_path(args.path), args.samples).to_dict()
        else:
            category = ZoneCategory(args.category) if args.category else None
            output = [
                {"id": z.id, "name": z.name, "category": z.category.value, "radius_meters": z.radius_meters}
                for z in index.filter(category)
            ]
    except (ValidationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
