"""The envelope entity."""

from __future__ import annotations

import datetime as dt
from typing import Any, Mapping

from .codec import encode_json
from .constants import ENCODING_BASE64
from .formatter import Formatter, default_formatter
from .schema import ValidationError
from .utils import b64_decode, is_base64, is_json_media_type, to_iso_utc, try_parse_json
from .versioning import DEFAULT_VERSION, SpecVersion, is_reserved, known_attributes

_MISSING = object()

# Spellings accepted in the initial attribute bag.
_ALIASES = {
    "specVersion": "specversion",
    "dataContentType": "datacontenttype",
    "dataContentEncoding": "datacontentencoding",
    "schemaURL": "schemaurl",
    "dataSchema": "dataschema",
}

_RENAMES = {
    SpecVersion.V1: {"schemaurl": "dataschema"},
    SpecVersion.V03: {"dataschema": "schemaurl"},
}


def _attribute(name: str, doc: str) -> property:
    def getter(self: CloudEvent) -> Any:
        # Never falls back to an extension of the same name.
        return self._attributes.get(name)

    def setter(self: CloudEvent, value: Any) -> None:
        self.set(name, value)

    def deleter(self: CloudEvent) -> None:
        self.remove(name)

    return property(getter, setter, deleter, doc)


class CloudEvent:
    """One event: a spec version, its core attributes, extensions and data.

    The instance is the source of truth; every wire representation is
    derived from it on demand through :class:`Formatter`. Instances are not
    safe for concurrent mutation.
    """

    id = _attribute("id", "Event identifier, unique per source.")
    source = _attribute("source", "URI-reference of the event producer.")
    type = _attribute("type", "Kind of occurrence, e.g. com.github.pull.create.")
    time = _attribute("time", "RFC 3339 timestamp of the occurrence.")
    subject = _attribute("subject", "Subject of the event within the source.")
    datacontenttype = _attribute("datacontenttype", "Media type of data.")
    datacontentencoding = _attribute("datacontentencoding", "Encoding of a string data value (0.3 only).")
    schemaurl = _attribute("schemaurl", "Schema of data (0.3 only).")
    dataschema = _attribute("dataschema", "Schema of data (1.0 only).")

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        bag = {_ALIASES.get(key, key): value for key, value in dict(attributes or {}).items()}
        bag.update({_ALIASES.get(key, key): value for key, value in kwargs.items()})

        self._formatter: Formatter = default_formatter
        self._version = _parse_version(bag.pop("specversion", DEFAULT_VERSION))
        self._attributes: dict[str, Any] = {}
        self._extensions: dict[str, Any] = {}
        self._data: Any = bag.pop("data", _MISSING)

        known = known_attributes(self._version)
        for name, value in bag.items():
            if name in known:
                self.set(name, value)
            else:
                self.add_extension(name, value)

    # -- core attributes -------------------------------------------------

    @property
    def spec_version(self) -> SpecVersion:
        return self._version

    @property
    def specversion(self) -> str:
        return self._version.value

    @specversion.setter
    def specversion(self, value: Any) -> None:
        self.set("specversion", value)

    def get(self, name: str) -> Any:
        if name == "specversion":
            return self._version.value
        if name == "data":
            return self.data
        if name in self._attributes:
            return self._attributes[name]
        if name in known_attributes(self._version):
            return None
        return self._extensions.get(name)

    def set(self, name: str, value: Any) -> None:
        if name == "specversion":
            self._switch_version(_parse_version(value))
            return
        if name == "data":
            self._data = value
            return
        if name not in known_attributes(self._version):
            raise ValidationError(f"unknown attribute for spec version {self._version.value}", [name])
        if value is None:
            self._attributes.pop(name, None)
            return
        if name == "time" and isinstance(value, dt.datetime):
            value = to_iso_utc(value)
        self._attributes[name] = value

    def remove(self, name: str) -> None:
        if name == "specversion":
            raise ValidationError("specversion cannot be removed", [name])
        if name == "data":
            self._data = _MISSING
            return
        if name not in known_attributes(self._version):
            raise ValidationError(f"unknown attribute for spec version {self._version.value}", [name])
        self._attributes.pop(name, None)

    def attributes(self) -> dict[str, Any]:
        """Core attributes (without data), including specversion."""
        result = {"specversion": self._version.value}
        result.update(self._attributes)
        return result

    # -- data --------------------------------------------------------------

    @property
    def data(self) -> Any:
        value = self._data
        if value is _MISSING:
            return None
        if (
            isinstance(value, str)
            and "datacontentencoding" not in self._attributes
            and is_json_media_type(self._attributes.get("datacontenttype"))
        ):
            ok, parsed = try_parse_json(value)
            if ok:
                return parsed
        return value

    @data.setter
    def data(self, value: Any) -> None:
        self._data = value

    @data.deleter
    def data(self) -> None:
        self._data = _MISSING

    @property
    def has_data(self) -> bool:
        return self._data is not _MISSING

    @property
    def raw_data(self) -> Any:
        """Payload exactly as stored, before any JSON parsing."""
        return None if self._data is _MISSING else self._data

    # -- extensions ----------------------------------------------------------

    def add_extension(self, name: str, value: Any) -> None:
        if not isinstance(name, str) or not name:
            raise ValidationError("invalid extension name", [name])
        if is_reserved(self._version, name):
            raise ValidationError(f"Reserved attribute name: '{name}'", [name])
        self._extensions[name] = value

    def get_extension(self, name: str, default: Any = None) -> Any:
        return self._extensions.get(name, default)

    def remove_extension(self, name: str) -> None:
        self._extensions.pop(name, None)

    @property
    def extensions(self) -> dict[str, Any]:
        return dict(self._extensions)

    # -- formatting ----------------------------------------------------------

    def validate(self) -> list[str]:
        """Every violated constraint, empty when the event formats cleanly."""
        return self._formatter.check(self)

    def format(self) -> dict[str, Any]:
        return self._formatter.format(self)

    def to_json(self) -> bytes:
        return encode_json(self.format())

    def _switch_version(self, version: SpecVersion) -> None:
        if version is self._version:
            return

        collisions = sorted(name for name in self._extensions if is_reserved(version, name))
        if collisions:
            raise ValidationError(f"extensions reserved in spec version {version.value}", collisions)

        renames = _RENAMES[version]
        attributes = {renames.get(name, name): value for name, value in self._attributes.items()}
        data = self._data

        encoding = attributes.get("datacontentencoding")
        if version is SpecVersion.V1 and encoding is not None:
            if encoding != ENCODING_BASE64 or not is_base64(data):
                raise ValidationError("cannot carry datacontentencoding into spec version 1.0", [encoding])
            del attributes["datacontentencoding"]
            data = b64_decode(data)

        self._version = version
        self._attributes = attributes
        self._data = data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CloudEvent):
            return NotImplemented
        return self._formatter.build(self)[0] == other._formatter.build(other)[0]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CloudEvent({self._formatter.build(self)[0]!r})"


def _parse_version(token: Any) -> SpecVersion:
    try:
        return SpecVersion.parse(token)
    except ValueError as exc:
        raise ValidationError("unsupported spec version", [token]) from exc
