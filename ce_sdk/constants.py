"""Protocol constants."""

SPEC_V03 = "0.3"
SPEC_V1 = "1.0"
DEFAULT_SPEC_VERSION = SPEC_V1

MIME_JSON = "application/json"
MIME_TEXT_JSON = "text/json"
MIME_CE = "application/cloudevents"
MIME_CE_JSON = "application/cloudevents+json"

HEADER_CONTENT_TYPE = "content-type"
HEADER_PREFIX = "ce-"

ENCODING_BASE64 = "base64"
SUPPORTED_ENCODINGS = {ENCODING_BASE64}

ALLOWED_STRUCTURED_CONTENT_TYPES = (MIME_CE_JSON,)
ALLOWED_BINARY_CONTENT_TYPES = (MIME_JSON,)

DEFAULT_LIMITS = {
    "max_bytes": 1_048_576,
}
