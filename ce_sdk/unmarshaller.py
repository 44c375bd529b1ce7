"""Inbound entry point: content-mode negotiation and receiver dispatch."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .constants import (
    ALLOWED_BINARY_CONTENT_TYPES,
    ALLOWED_STRUCTURED_CONTENT_TYPES,
    HEADER_CONTENT_TYPE,
    MIME_CE,
)
from .event import CloudEvent
from .headers import sanitize_headers
from .receivers import BinaryReceiver, BindingError, StructuredReceiver

logger = logging.getLogger(__name__)


class BindingMode(str, enum.Enum):
    STRUCTURED = "structured"
    BINARY = "binary"


@dataclass(frozen=True, slots=True)
class UnmarshallerConfig:
    """Media types accepted per content mode (exact, case-sensitive match)."""

    structured_content_types: tuple[str, ...] = ALLOWED_STRUCTURED_CONTENT_TYPES
    binary_content_types: tuple[str, ...] = ALLOWED_BINARY_CONTENT_TYPES


def resolve_binding_name(
    headers: Mapping[str, str],
    config: UnmarshallerConfig | None = None,
) -> BindingMode:
    """Decide the content mode from a sanitised header mapping."""
    active = config or UnmarshallerConfig()
    content_type = headers.get(HEADER_CONTENT_TYPE)
    if not content_type:
        raise BindingError("content-type header not found")

    if content_type.startswith(MIME_CE):
        if content_type in active.structured_content_types:
            return BindingMode.STRUCTURED
        raise BindingError("structured+type not allowed", [content_type])

    if content_type in active.binary_content_types:
        return BindingMode.BINARY
    raise BindingError("content type not allowed", [content_type])


class Unmarshaller:
    """Turn ``(payload, headers)`` from an HTTP request into a :class:`CloudEvent`.

    Every call works on its own cloned headers; one instance may be shared
    between threads.
    """

    def __init__(self, config: UnmarshallerConfig | None = None) -> None:
        self.config = config or UnmarshallerConfig()
        self._receivers = {
            BindingMode.STRUCTURED: StructuredReceiver(),
            BindingMode.BINARY: BinaryReceiver(),
        }

    def unmarshall(self, payload: Any, headers: Mapping[str, Any] | None) -> CloudEvent:
        if payload is None:
            raise BindingError("payload is missing")
        if headers is None:
            raise BindingError("headers are missing")

        sanitized = sanitize_headers(headers)
        if not sanitized.get(HEADER_CONTENT_TYPE):
            raise BindingError("content-type header not found")

        mode = resolve_binding_name(sanitized, self.config)
        logger.debug("unmarshalling %s-mode message (content-type=%s)", mode.value, sanitized[HEADER_CONTENT_TYPE])
        return self._receivers[mode].parse(payload, sanitized)


def unmarshall(payload: Any, headers: Mapping[str, Any] | None) -> CloudEvent:
    return Unmarshaller().unmarshall(payload, headers)
