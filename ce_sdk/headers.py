"""HTTP header sanitising and attribute/header name mapping."""

from __future__ import annotations

from typing import Any, Mapping

from .constants import HEADER_CONTENT_TYPE, HEADER_PREFIX
from .utils import media_type


def sanitize_headers(headers: Mapping[str, Any]) -> dict[str, str]:
    """Clone ``headers`` with lowercase, trimmed keys and trimmed string values.

    ``content-type`` also loses its parameters, so
    ``application/json; charset=utf-8`` becomes ``application/json``.
    Later duplicates (after case folding) win.
    """
    sanitized: dict[str, str] = {}
    for key, value in headers.items():
        if value is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        if isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        sanitized[name] = str(value).strip()

    if HEADER_CONTENT_TYPE in sanitized:
        sanitized[HEADER_CONTENT_TYPE] = media_type(sanitized[HEADER_CONTENT_TYPE])
    return sanitized


def attribute_header(name: str) -> str:
    return f"{HEADER_PREFIX}{name.lower()}"


def is_attribute_header(header: str) -> bool:
    return header.startswith(HEADER_PREFIX) and len(header) > len(HEADER_PREFIX)


def header_attribute(header: str) -> str:
    return header[len(HEADER_PREFIX):]


def attribute_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Attribute name -> value for every prefixed header in a sanitised mapping."""
    return {header_attribute(key): value for key, value in headers.items() if is_attribute_header(key)}
