# Copyright 2025 msq
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from saferoute.geo import GeoPoint

LOCATION_UNAVAILABLE = "Location unavailable"


def maps_link(point: GeoPoint) -> str:
    return f"https://www.google.com/maps?q={point.lat},{point.lng}"


def build_sos_message(point: Optional[GeoPoint]) -> str:
    lines = ["\U0001f6a8 EMERGENCY SOS ALERT \U0001f6a8"]
    if point is None:
        lines.append(f"Location: {LOCATION_UNAVAILABLE}")
    else:
        lines.append(f"Location: {point.as_text()}")
        lines.append(maps_link(point))
    return "\n".join(lines)


def build_whatsapp_link(message: str, phone: str | None = None) -> str:
    digits = "".join(ch for ch in (phone or "") if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def build_sms_link(message: str) -> str:
    return f"sms:?body={quote(message, safe='')}"


@dataclass(frozen=True, slots=True)
class SosAlert:
    message: str
    location: Optional[GeoPoint]
    whatsapp_url: str
    sms_url: str


def compose_sos(point: Optional[GeoPoint], *, phone: str | None = None) -> SosAlert:
    message = build_sos_message(point)
    return SosAlert(
        message=message,
        location=point,
        whatsapp_url=build_whatsapp_link(message, phone),
        sms_url=build_sms_link(message),
    )
