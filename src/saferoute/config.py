# Copyright 2025 msq
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import structlog
from dotenv import load_dotenv

from saferoute.rating.policy import (
    MODERATE_THRESHOLD,
    PROXIMITY_FACTOR,
    ROUTE_SAMPLE_POINTS,
    SAFE_THRESHOLD,
    RatingPolicy,
)
from saferoute.incidents.density import INCIDENT_RADIUS_METERS, PENALTY_PER_INCIDENT

_logger = structlog.get_logger(__name__)

_TRUTHY = {"1", "true", "yes", "y", "on"}


def load_env_files(config_dir: Path | None = None) -> None:
    """Load ``.env`` then ``.env.local``; existing variables are never overridden."""
    base = config_dir or Path.cwd()
    for name in (".env", ".env.local"):
        path = base / name
        if path.is_file():
            load_dotenv(path, override=False)
            _logger.info("dotenv_loaded", file=str(path))


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        _logger.warning("config_value_invalid", name=name, raw=raw, default=default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        _logger.warning("config_value_invalid", name=name, raw=raw, default=default)
        return default


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class AppConfig:
    proximity_factor: float
    route_sample_points: int
    safe_threshold: float
    moderate_threshold: float
    zone_catalog_path: str | None
    incident_radius_meters: float
    incident_penalty: int
    ors_api_key: str | None
    ors_base_url: str
    ors_profile: str
    nominatim_base_url: str
    http_connect_timeout: float
    http_read_timeout: float
    route_cache_ttl_seconds: float
    sos_phone: str | None
    share_base_url: str
    log_json: bool
    log_level: str

    @staticmethod
    def load_from_env() -> "AppConfig":
        return AppConfig(
            proximity_factor=_env_float("SAFEROUTE_PROXIMITY_FACTOR", PROXIMITY_FACTOR),
            route_sample_points=_env_int("SAFEROUTE_ROUTE_SAMPLE_POINTS", ROUTE_SAMPLE_POINTS),
            safe_threshold=_env_float("SAFEROUTE_SAFE_THRESHOLD", SAFE_THRESHOLD),
            moderate_threshold=_env_float("SAFEROUTE_MODERATE_THRESHOLD", MODERATE_THRESHOLD),
            zone_catalog_path=_env_str("SAFEROUTE_ZONE_CATALOG"),
            incident_radius_meters=_env_float("SAFEROUTE_INCIDENT_RADIUS_M", INCIDENT_RADIUS_METERS),
            incident_penalty=_env_int("SAFEROUTE_INCIDENT_PENALTY", PENALTY_PER_INCIDENT),
            ors_api_key=_env_str("ORS_API_KEY"),
            ors_base_url=os.getenv("ORS_BASE_URL", "https://api.openrouteservice.org"),
            ors_profile=os.getenv("ORS_PROFILE", "driving-car"),
            nominatim_base_url=os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org"),
            http_connect_timeout=_env_float("HTTP_CONNECT_TIMEOUT", 10.0),
            http_read_timeout=_env_float("HTTP_READ_TIMEOUT", 10.0),
            route_cache_ttl_seconds=_env_float("ROUTE_CACHE_TTL_SECONDS", 300.0),
            sos_phone=_env_str("SOS_PHONE"),
            share_base_url=os.getenv("SHARE_BASE_URL", "http://localhost:8000/"),
            log_json=os.getenv("LOG_JSON", "false").strip().lower() in _TRUTHY,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def rating_policy(self) -> RatingPolicy:
        return RatingPolicy(
            proximity_factor=self.proximity_factor,
            sample_target_count=self.route_sample_points,
            safe_threshold=self.safe_threshold,
            moderate_threshold=self.moderate_threshold,
        )
