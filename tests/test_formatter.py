from __future__ import annotations

import unittest

from ce_sdk.event import CloudEvent
from ce_sdk.formatter import Formatter, format_event
from ce_sdk.schema import ValidationError

from tests.test_helpers import DATA, make_attributes, make_v1_event


class FormatterTests(unittest.TestCase):
    def test_build_returns_output_and_violations(self) -> None:
        output, violations = Formatter().build(make_v1_event())
        self.assertEqual(violations, [])
        self.assertEqual(output["data"], DATA)
        self.assertEqual(output["specversion"], "1.0")

    def test_json_string_payload_is_emitted_parsed(self) -> None:
        output = format_event(make_v1_event(data='{"much": "wow"}'))
        self.assertEqual(output["data"], DATA)

    def test_non_json_content_type_keeps_string(self) -> None:
        output = format_event(make_v1_event(datacontenttype="text/plain", data="hello"))
        self.assertEqual(output["data"], "hello")

    def test_check_does_not_raise(self) -> None:
        event = CloudEvent(specversion="1.0")
        violations = Formatter().check(event)
        self.assertEqual(len(violations), 3)

    def test_custom_invalid_message(self) -> None:
        class StrictFormatter(Formatter):
            invalid_message = "rejected envelope"

        with self.assertRaisesRegex(ValidationError, "rejected envelope"):
            StrictFormatter().format(CloudEvent(make_attributes("1.0", id="")))

    def test_time_must_be_rfc3339(self) -> None:
        violations = Formatter().check(make_v1_event(time="2019-06-16 11:42"))
        self.assertEqual(violations, ["time: '2019-06-16 11:42' is not an RFC 3339 timestamp"])

    def test_extensions_are_flattened_into_output(self) -> None:
        event = make_v1_event()
        event.add_extension("comexampleextension1", {"nested": True})
        self.assertEqual(format_event(event)["comexampleextension1"], {"nested": True})
