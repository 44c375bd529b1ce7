"""Project events onto HTTP bodies and headers, one emitter per content mode."""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from .codec import encode_json
from .constants import HEADER_CONTENT_TYPE, MIME_CE_JSON, MIME_JSON
from .event import CloudEvent
from .headers import attribute_header
from .schema import ValidationError
from .utils import b64_decode, is_json_media_type
from .versioning import SpecVersion

# Header names are case-insensitive, so only lowercase names survive binary mode.
_HEADER_SAFE_NAME = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


class HTTPMessage(NamedTuple):
    """Body and headers ready for an HTTP client (or for ``Unmarshaller.unmarshall``)."""

    body: bytes
    headers: dict[str, str]


def emit_structured(event: CloudEvent) -> HTTPMessage:
    formatted = event.format()
    return HTTPMessage(body=encode_json(formatted), headers={HEADER_CONTENT_TYPE: MIME_CE_JSON})


def emit_binary(event: CloudEvent) -> HTTPMessage:
    """Attributes and extensions become ``ce-`` headers, data becomes the body.

    Extension values travel in their string form (``true``/``false`` for
    booleans, decimal for numbers), so only string-valued extensions come
    back with the same type.
    """
    formatted = event.format()
    unsafe = sorted(name for name in event.extensions if not _HEADER_SAFE_NAME.match(name))
    if unsafe:
        raise ValidationError("extension names not representable as headers", unsafe)

    content_type = formatted.pop("datacontenttype", None) or MIME_JSON
    encoded = event.spec_version is SpecVersion.V03 and "datacontentencoding" in formatted

    if "data_base64" in formatted:
        body = b64_decode(formatted.pop("data_base64"))
    elif "data" in formatted:
        body = _binary_body(formatted.pop("data"), content_type, encoded=encoded)
    else:
        body = b""

    headers = {attribute_header(name): _header_value(value) for name, value in formatted.items()}
    headers[HEADER_CONTENT_TYPE] = content_type
    return HTTPMessage(body=body, headers=headers)


def _binary_body(data: Any, content_type: str, *, encoded: bool) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str) and (encoded or not is_json_media_type(content_type)):
        return data.encode("utf-8")
    return encode_json(data)


def _header_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return encode_json(value).decode("utf-8")
