"""Envelope JSON Schemas and violation collection."""

from __future__ import annotations

from typing import Any

import jsonschema

from .constants import SPEC_V03, SPEC_V1, SUPPORTED_ENCODINGS
from .versioning import SpecVersion


class EnvelopeError(ValueError):
    """Base error: a human readable ``message`` plus the offending ``errors``."""

    def __init__(self, message: str, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: " + "; ".join(str(item) for item in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "errors": [str(item) for item in self.errors]}


class ValidationError(EnvelopeError):
    """Raised when an envelope violates its spec version; ``errors`` lists every violation."""


_NON_EMPTY = {"type": "string", "minLength": 1}

SPEC_V03_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["specversion", "id", "source", "type"],
    "properties": {
        "specversion": {"type": "string", "const": SPEC_V03},
        "id": _NON_EMPTY,
        "source": _NON_EMPTY,
        "type": _NON_EMPTY,
        "datacontenttype": _NON_EMPTY,
        "datacontentencoding": {"type": "string", "enum": sorted(SUPPORTED_ENCODINGS)},
        "schemaurl": _NON_EMPTY,
        "subject": _NON_EMPTY,
        "time": _NON_EMPTY,
        "data": {"type": ["object", "array", "string", "number", "boolean", "null"]},
    },
}

SPEC_V1_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["specversion", "id", "source", "type"],
    "properties": {
        "specversion": {"type": "string", "const": SPEC_V1},
        "id": _NON_EMPTY,
        "source": _NON_EMPTY,
        "type": _NON_EMPTY,
        "datacontenttype": _NON_EMPTY,
        "dataschema": _NON_EMPTY,
        "subject": _NON_EMPTY,
        "time": _NON_EMPTY,
        "data": {"type": ["object", "array", "string", "number", "boolean", "null"]},
        "data_base64": {"type": "string"},
    },
    "not": {"required": ["data", "data_base64"]},
}

_VALIDATORS = {
    SpecVersion.V03: jsonschema.Draft7Validator(SPEC_V03_SCHEMA),
    SpecVersion.V1: jsonschema.Draft7Validator(SPEC_V1_SCHEMA),
}


def schema_for(version: SpecVersion | str) -> dict[str, Any]:
    return _VALIDATORS[SpecVersion.parse(version)].schema


def collect_schema_violations(payload: dict[str, Any], version: SpecVersion | str) -> list[str]:
    """Return every JSON Schema violation of ``payload``, ordered by attribute."""
    validator = _VALIDATORS[SpecVersion.parse(version)]
    errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.absolute_path])
    return [_describe(error) for error in errors]


def _describe(error: jsonschema.ValidationError) -> str:
    if error.validator == "not" and not error.absolute_path:
        return "data and data_base64 are mutually exclusive"
    if not error.absolute_path:
        return error.message
    name = ".".join(str(part) for part in error.absolute_path)
    return f"{name}: {error.message}"
