"""Small utility helpers."""

from __future__ import annotations

import base64
import binascii
import datetime as dt
import json
import re
import uuid
from typing import Any

from .constants import MIME_JSON, MIME_TEXT_JSON

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


def now_iso_utc() -> str:
    return to_iso_utc(dt.datetime.now(dt.timezone.utc))


def to_iso_utc(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    text = value.astimezone(dt.timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def is_rfc3339(value: Any) -> bool:
    """Full RFC 3339 date-time: date, "T", time, optional fraction, "Z" or offset."""
    if not isinstance(value, str):
        return False
    match = _RFC3339.fullmatch(value)
    if match is None:
        return False
    year, month, day, hour, minute, second = (int(part) for part in match.group(1, 2, 3, 4, 5, 6))
    try:
        # Second 60 is a leap second; range-check it as 59.
        dt.datetime(year, month, day, hour, minute, min(second, 59))
    except ValueError:
        return False
    offset = match.group(8)
    if offset not in ("Z", "z"):
        return int(offset[1:3]) <= 23 and int(offset[4:6]) <= 59
    return True


def new_event_id() -> str:
    return str(uuid.uuid4())


def is_base64(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def b64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64_decode(data: str) -> bytes:
    return base64.b64decode(data, validate=True)


def media_type(content_type: str | None) -> str:
    """Strip parameters (`; charset=...`) from a content type value."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip()


def is_json_media_type(content_type: str | None) -> bool:
    mt = media_type(content_type).lower()
    return mt in {MIME_JSON, MIME_TEXT_JSON} or mt.endswith("+json")


def try_parse_json(value: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(value)
    except ValueError:
        return False, None


def json_dumps_pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, sort_keys=True)
