from __future__ import annotations

import unittest

from ce_sdk.receivers import BindingError
from ce_sdk.unmarshaller import BindingMode, Unmarshaller, UnmarshallerConfig, resolve_binding_name, unmarshall

from tests.test_helpers import EVENT_ID, EVENT_SOURCE, EVENT_TYPE


def _binary_headers(**extra: str) -> dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "ce-specversion": "1.0",
        "ce-id": EVENT_ID,
        "ce-source": EVENT_SOURCE,
        "ce-type": EVENT_TYPE,
    }
    headers.update(extra)
    return headers


class ResolveBindingTests(unittest.TestCase):
    def test_structured_and_binary_content_types(self) -> None:
        self.assertIs(resolve_binding_name({"content-type": "application/cloudevents+json"}), BindingMode.STRUCTURED)
        self.assertIs(resolve_binding_name({"content-type": "application/json"}), BindingMode.BINARY)

    def test_missing_content_type(self) -> None:
        with self.assertRaisesRegex(BindingError, "content-type header not found"):
            resolve_binding_name({})

    def test_unsupported_structured_format(self) -> None:
        with self.assertRaises(BindingError) as ctx:
            resolve_binding_name({"content-type": "application/cloudevents+xml"})
        self.assertEqual(ctx.exception.message, "structured+type not allowed")
        self.assertEqual(ctx.exception.errors, ["application/cloudevents+xml"])

    def test_other_content_type_not_allowed(self) -> None:
        for content_type in ("text/plain", "application/xml", "Application/JSON"):
            with self.subTest(content_type=content_type):
                with self.assertRaises(BindingError) as ctx:
                    resolve_binding_name({"content-type": content_type})
                self.assertEqual(ctx.exception.message, "content type not allowed")
                self.assertEqual(ctx.exception.errors, [content_type])

    def test_custom_config(self) -> None:
        config = UnmarshallerConfig(binary_content_types=("application/json", "text/plain"))
        self.assertIs(resolve_binding_name({"content-type": "text/plain"}, config), BindingMode.BINARY)


class UnmarshallerTests(unittest.TestCase):
    def test_missing_payload_and_headers(self) -> None:
        with self.assertRaisesRegex(BindingError, "payload is missing"):
            unmarshall(None, {"content-type": "application/json"})
        with self.assertRaisesRegex(BindingError, "headers are missing"):
            unmarshall(b"{}", None)

    def test_header_names_are_case_insensitive(self) -> None:
        headers = {
            "CONTENT-TYPE": "application/json; charset=utf-8",
            "Ce-SpecVersion": "1.0",
            "CE-ID": EVENT_ID,
            "ce-Source": EVENT_SOURCE,
            "Ce-Type": EVENT_TYPE,
        }
        event = unmarshall(b'{"much": "wow"}', headers)
        self.assertEqual(event.id, EVENT_ID)
        self.assertEqual(event.data, {"much": "wow"})

    def test_headers_are_not_mutated(self) -> None:
        headers = _binary_headers()
        before = dict(headers)
        Unmarshaller().unmarshall(b"", headers)
        self.assertEqual(headers, before)

    def test_structured_dispatch(self) -> None:
        body = (
            '{"specversion": "1.0", "id": "%s", "source": "%s", "type": "%s", "data": {"much": "wow"}}'
            % (EVENT_ID, EVENT_SOURCE, EVENT_TYPE)
        ).encode("utf-8")
        event = unmarshall(body, {"Content-Type": "application/cloudevents+json; charset=utf-8"})
        self.assertEqual(event.type, EVENT_TYPE)
        self.assertEqual(event.data, {"much": "wow"})

    def test_disallowed_content_type(self) -> None:
        with self.assertRaisesRegex(BindingError, "content type not allowed"):
            unmarshall(b"hello", _binary_headers(**{"Content-Type": "text/plain"}))
