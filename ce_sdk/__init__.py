"""Event envelope SDK: entity, validation and HTTP bindings."""

from .codec import CodecError, decode_json, encode_json
from .emitters import HTTPMessage, emit_binary, emit_structured
from .event import CloudEvent
from .formatter import Formatter, format_event
from .headers import sanitize_headers
from .receivers import BinaryReceiver, BindingError, StructuredReceiver
from .schema import EnvelopeError, ValidationError
from .transport_http import (
    CloudEventHTTPServer,
    HTTPEmitter,
    HTTPReceiver,
    Protocol,
    TransportOptions,
    TransportResponse,
    send_http,
)
from .unmarshaller import BindingMode, Unmarshaller, UnmarshallerConfig, resolve_binding_name, unmarshall
from .versioning import SpecVersion, known_attributes, required_attributes, reserved_names, supported_versions

__all__ = [
    "CloudEvent",
    "Formatter",
    "format_event",
    "EnvelopeError",
    "ValidationError",
    "BindingError",
    "CodecError",
    "encode_json",
    "decode_json",
    "sanitize_headers",
    "StructuredReceiver",
    "BinaryReceiver",
    "BindingMode",
    "Unmarshaller",
    "UnmarshallerConfig",
    "resolve_binding_name",
    "unmarshall",
    "HTTPMessage",
    "emit_structured",
    "emit_binary",
    "HTTPEmitter",
    "HTTPReceiver",
    "CloudEventHTTPServer",
    "Protocol",
    "TransportOptions",
    "TransportResponse",
    "send_http",
    "SpecVersion",
    "supported_versions",
    "required_attributes",
    "known_attributes",
    "reserved_names",
]

__version__ = "0.1.0"
