"""Spec versions and their attribute rule tables."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .constants import DEFAULT_SPEC_VERSION, SPEC_V03, SPEC_V1


class SpecVersion(str, enum.Enum):
    """Closed set of supported envelope versions."""

    V03 = SPEC_V03
    V1 = SPEC_V1

    @classmethod
    def parse(cls, token: Any) -> SpecVersion:
        """Map an inbound version token onto a supported version."""
        if isinstance(token, SpecVersion):
            return token
        for version in cls:
            if version.value == token:
                return version
        raise ValueError(f"unsupported spec version: {token!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AttributeRules:
    """Attribute names a version requires, recognizes and reserves."""

    required: frozenset[str]
    optional: frozenset[str]
    reserved: frozenset[str]

    @property
    def known(self) -> frozenset[str]:
        return self.required | self.optional


_REQUIRED = frozenset({"specversion", "id", "source", "type"})

_RULES: dict[SpecVersion, AttributeRules] = {
    SpecVersion.V03: AttributeRules(
        required=_REQUIRED,
        optional=frozenset({"datacontenttype", "datacontentencoding", "schemaurl", "subject", "time"}),
        reserved=_REQUIRED
        | frozenset({"datacontenttype", "datacontentencoding", "schemaurl", "subject", "time", "data"}),
    ),
    SpecVersion.V1: AttributeRules(
        required=_REQUIRED,
        optional=frozenset({"datacontenttype", "dataschema", "subject", "time"}),
        reserved=_REQUIRED
        | frozenset({"datacontenttype", "dataschema", "subject", "time", "data", "data_base64"}),
    ),
}

DEFAULT_VERSION = SpecVersion(DEFAULT_SPEC_VERSION)


def rules_for(version: SpecVersion | str) -> AttributeRules:
    return _RULES[SpecVersion.parse(version)]


def required_attributes(version: SpecVersion | str) -> frozenset[str]:
    return rules_for(version).required


def optional_attributes(version: SpecVersion | str) -> frozenset[str]:
    return rules_for(version).optional


def known_attributes(version: SpecVersion | str) -> frozenset[str]:
    return rules_for(version).known


def reserved_names(version: SpecVersion | str) -> frozenset[str]:
    return rules_for(version).reserved


def is_reserved(version: SpecVersion | str, name: str) -> bool:
    return name in rules_for(version).reserved


def supported_versions() -> list[str]:
    return [version.value for version in SpecVersion]
