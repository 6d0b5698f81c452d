# Copyright 2025 msq
from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from urllib.parse import parse_qs, quote, urlsplit

from saferoute.errors import ValidationError

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
DEFAULT_SHARER = "Anonymous"
DEFAULT_VIEWER_NAME = "Someone"
INVITE_PREFIX = "Track my live location on SafeRoute: "


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_share_id(now_ms: int | None = None) -> str:
    """Eight random base36 characters followed by the base36 millisecond clock."""
    random_part = "".join(secrets.choice(_BASE36) for _ in range(8))
    clock = int(time.time() * 1000) if now_ms is None else now_ms
    return random_part + _to_base36(clock)


def build_share_url(base_url: str, share_id: str, name: str) -> str:
    base = base_url.split("?", 1)[0]
    return f"{base}?share={quote(share_id, safe='')}&name={quote(name, safe='')}"


def parse_share_url(url: str) -> Optional[Tuple[str, str]]:
    """``(share_id, name)`` from a share link, or ``None`` if it is not one."""
    params = parse_qs(urlsplit(url).query)
    share_id = (params.get("share") or [""])[0]
    if not share_id:
        return None
    name = (params.get("name") or [""])[0] or DEFAULT_VIEWER_NAME
    return share_id, name


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_invite_text(url: str) -> str:
    return INVITE_PREFIX + url


@dataclass(frozen=True, slots=True)
class ShareSession:
    """One live-location share; ``expires_at`` is None when it runs until stopped."""

    share_id: str
    name: str
    duration_minutes: int
    started_at: datetime
    expires_at: Optional[datetime]
    url: str

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return _as_utc(now or datetime.now(timezone.utc)) >= self.expires_at

    @property
    def invite_text(self) -> str:
        return build_invite_text(self.url)


def start_share_session(
    base_url: str,
    name: str | None,
    duration_minutes: int,
    *,
    now: datetime | None = None,
) -> ShareSession:
    if duration_minutes < 0:
        raise ValidationError("duration_minutes must be >= 0", field="duration_minutes")
    started_at = _as_utc(now or datetime.now(timezone.utc))
    display_name = (name or "").strip() or DEFAULT_SHARER
    share_id = generate_share_id(int(started_at.timestamp() * 1000))
    expires_at = started_at + timedelta(minutes=duration_minutes) if duration_minutes > 0 else None
    return ShareSession(
        share_id=share_id,
        name=display_name,
        duration_minutes=duration_minutes,
        started_at=started_at,
        expires_at=expires_at,
        url=build_share_url(base_url, share_id, display_name),
    )
