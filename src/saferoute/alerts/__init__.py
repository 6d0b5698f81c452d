"""SOS messages and live-location share links."""

from .sharing import (
    ShareSession,
    build_invite_text,
    build_share_url,
    generate_share_id,
    parse_share_url,
    start_share_session,
)
from .sos import SosAlert, build_sms_link, build_sos_message, build_whatsapp_link, compose_sos, maps_link

__all__ = [
    "ShareSession",
    "SosAlert",
    "build_invite_text",
    "build_share_url",
    "build_sms_link",
    "build_sos_message",
    "build_whatsapp_link",
    "compose_sos",
    "generate_share_id",
    "maps_link",
    "parse_share_url",
    "start_share_session",
]
