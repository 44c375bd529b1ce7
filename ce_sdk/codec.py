"""JSON encoding/decoding of HTTP bodies."""

from __future__ import annotations

import json
from typing import Any


class CodecError(ValueError):
    """Raised on encoding/decoding failures."""


def encode_json(value: Any) -> bytes:
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise CodecError(f"failed to encode JSON: {exc}") from exc


def decode_json(data: bytes | bytearray | str) -> Any:
    try:
        if isinstance(data, (bytes, bytearray)):
            return json.loads(bytes(data).decode("utf-8"))
        return json.loads(data)
    except (UnicodeDecodeError, ValueError) as exc:
        raise CodecError(f"invalid JSON payload: {exc}") from exc


def decode_json_object(data: bytes | bytearray | str | dict[str, Any]) -> dict[str, Any]:
    """Decode a structured body; already-decoded mappings pass through as a copy."""
    decoded = dict(data) if isinstance(data, dict) else decode_json(data)
    if not isinstance(decoded, dict):
        raise CodecError("decoded JSON must be an object")
    return decoded


def body_to_text(body: bytes | bytearray | str) -> str:
    if isinstance(body, (bytes, bytearray)):
        try:
            return bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CodecError(f"body is not valid UTF-8: {exc}") from exc
    return body
