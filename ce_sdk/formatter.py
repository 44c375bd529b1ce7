"""Wire-ready representation of an envelope."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import ENCODING_BASE64
from .schema import ValidationError, collect_schema_violations
from .utils import b64_encode, is_base64, is_json_media_type, is_rfc3339, try_parse_json
from .versioning import SpecVersion

if TYPE_CHECKING:
    from .event import CloudEvent


class Formatter:
    """Builds the formatted mapping of an event and checks it.

    The output keeps the shape of the event (core attributes, extensions,
    ``data``) with two encoding rules applied: a string payload declared as
    JSON is emitted in parsed form, and a ``bytes`` payload is emitted as
    base64 text (``data_base64`` for 1.0, ``data`` plus
    ``datacontentencoding`` for 0.3).
    """

    invalid_message = "invalid payload"

    def build(self, event: CloudEvent) -> tuple[dict[str, Any], list[str]]:
        version = event.spec_version
        attributes = event.attributes()
        output: dict[str, Any] = {"specversion": version.value}
        output.update({key: value for key, value in attributes.items() if key != "specversion"})
        output.update(event.extensions)

        encoding = attributes.get("datacontentencoding")
        violations: list[str] = []
        if event.has_data:
            self._place_data(version, event.raw_data, encoding, output, violations)
        elif encoding is not None:
            violations.append("datacontentencoding: requires a string payload, no data present")

        violations.extend(collect_schema_violations(output, version))

        time_value = output.get("time")
        if isinstance(time_value, str) and time_value and not is_rfc3339(time_value):
            violations.append(f"time: {time_value!r} is not an RFC 3339 timestamp")
        return output, violations

    def check(self, event: CloudEvent) -> list[str]:
        return self.build(event)[1]

    def format(self, event: CloudEvent) -> dict[str, Any]:
        output, violations = self.build(event)
        if violations:
            raise ValidationError(self.invalid_message, violations)
        return output

    def _place_data(
        self,
        version: SpecVersion,
        data: Any,
        encoding: str | None,
        output: dict[str, Any],
        violations: list[str],
    ) -> None:
        content_type = output.get("datacontenttype")

        if isinstance(data, (bytes, bytearray)):
            text = b64_encode(bytes(data))
            if version is SpecVersion.V1:
                output["data_base64"] = text
            else:
                output["data"] = text
                output.setdefault("datacontentencoding", ENCODING_BASE64)
            return

        if encoding is not None:
            output["data"] = data
            if not isinstance(data, str):
                violations.append("datacontentencoding: requires a string payload")
            elif encoding == ENCODING_BASE64 and not is_base64(data):
                violations.append("data: payload is not valid base64")
            return

        if isinstance(data, str) and is_json_media_type(content_type):
            ok, parsed = try_parse_json(data)
            if not ok:
                violations.append(f"data: payload is not valid JSON for content type {content_type!r}")
                output["data"] = data
                return
            output["data"] = parsed
            return

        output["data"] = data


default_formatter = Formatter()


def format_event(event: CloudEvent) -> dict[str, Any]:
    return default_formatter.format(event)
