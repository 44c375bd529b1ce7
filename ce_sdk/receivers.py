"""Rebuild events from HTTP messages, one receiver per content mode."""

from __future__ import annotations

import binascii
from typing import Any, Mapping

from .codec import CodecError, body_to_text, decode_json, decode_json_object, encode_json
from .constants import HEADER_CONTENT_TYPE
from .event import CloudEvent
from .headers import attribute_headers
from .schema import EnvelopeError
from .utils import b64_decode, is_json_media_type
from .versioning import SpecVersion, known_attributes


class BindingError(EnvelopeError):
    """Raised when an HTTP message cannot be bound to an event."""


def _resolve_version(token: Any, *, origin: str) -> SpecVersion:
    if token is None or token == "":
        raise BindingError(f"{origin} not found")
    try:
        return SpecVersion.parse(token)
    except ValueError as exc:
        raise BindingError("unsupported spec version", [token]) from exc


class StructuredReceiver:
    """The body is the whole envelope as one JSON document."""

    def parse(self, payload: Any, headers: Mapping[str, str]) -> CloudEvent:
        try:
            document = decode_json_object(payload)
        except CodecError as exc:
            raise BindingError("invalid structured payload", [str(exc)]) from exc

        version = _resolve_version(document.get("specversion"), origin="specversion attribute")

        data_base64 = document.pop("data_base64", None) if version is SpecVersion.V1 else None
        if data_base64 is not None and "data" in document:
            raise BindingError("data and data_base64 are mutually exclusive")

        event = CloudEvent(document)
        _keep_json_text(event)
        if data_base64 is not None:
            try:
                event.data = b64_decode(data_base64)
            except (binascii.Error, TypeError, ValueError) as exc:
                raise BindingError("data_base64 is not valid base64", [data_base64]) from exc

        event.format()
        return event


class BinaryReceiver:
    """Attributes travel as ``ce-`` headers, the body is the raw data."""

    def parse(self, payload: Any, headers: Mapping[str, str]) -> CloudEvent:
        attributes = attribute_headers(headers)
        version = _resolve_version(attributes.pop("specversion", None), origin="ce-specversion header")
        known = known_attributes(version)

        event = CloudEvent(specversion=version.value)
        for name, value in attributes.items():
            if name in known:
                event.set(name, value)
            else:
                event.add_extension(name, value)

        content_type = headers.get(HEADER_CONTENT_TYPE)
        if content_type:
            event.datacontenttype = content_type

        if not _is_empty_body(payload):
            event.data = self._read_body(payload, content_type, encoded=event.datacontentencoding is not None)
        event.format()
        return event

    def _read_body(self, payload: Any, content_type: str | None, *, encoded: bool) -> Any:
        if not isinstance(payload, (bytes, bytearray, str)):
            # Body already decoded by the HTTP framework.
            return payload

        try:
            text = body_to_text(payload)
        except CodecError:
            return bytes(payload)

        if encoded or not is_json_media_type(content_type):
            return text
        try:
            decoded = decode_json(text)
        except CodecError as exc:
            raise BindingError("invalid JSON payload", [str(exc)]) from exc
        # A JSON string stays as its JSON text, like any string payload of a JSON event.
        return text if isinstance(decoded, str) else decoded


def _keep_json_text(event: CloudEvent) -> None:
    """Re-encode a decoded JSON string so the event reads it back as that string."""
    value = event.raw_data
    if (
        isinstance(value, str)
        and event.datacontentencoding is None
        and is_json_media_type(event.datacontenttype)
    ):
        event.data = encode_json(value).decode("utf-8")


def _is_empty_body(payload: Any) -> bool:
    return isinstance(payload, (bytes, bytearray, str)) and len(payload) == 0
