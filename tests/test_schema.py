from __future__ import annotations

import unittest

from ce_sdk.schema import (
    EnvelopeError,
    ValidationError,
    collect_schema_violations,
    schema_for,
)

from tests.test_helpers import make_attributes


class SchemaTests(unittest.TestCase):
    def test_minimal_documents_pass(self) -> None:
        self.assertEqual(collect_schema_violations(make_attributes("0.3"), "0.3"), [])
        self.assertEqual(collect_schema_violations(make_attributes("1.0"), "1.0"), [])

    def test_specversion_must_match_schema(self) -> None:
        violations = collect_schema_violations(make_attributes("0.3"), "1.0")
        self.assertEqual(len(violations), 1)
        self.assertTrue(violations[0].startswith("specversion:"))

    def test_violations_are_sorted_by_attribute(self) -> None:
        payload = make_attributes("1.0", type="", subject=7, id="")
        violations = collect_schema_violations(payload, "1.0")
        self.assertEqual([item.split(":", 1)[0] for item in violations], ["id", "subject", "type"])

    def test_data_and_data_base64_are_mutually_exclusive(self) -> None:
        payload = make_attributes("1.0", data="x", data_base64="eA==")
        self.assertEqual(collect_schema_violations(payload, "1.0"), ["data and data_base64 are mutually exclusive"])

    def test_schema_for_versions(self) -> None:
        self.assertEqual(schema_for("0.3")["properties"]["specversion"]["const"], "0.3")
        self.assertIn("data_base64", schema_for("1.0")["properties"])


class EnvelopeErrorTests(unittest.TestCase):
    def test_str_and_dict_forms(self) -> None:
        err = ValidationError("invalid payload", ["id: required", "type: required"])
        self.assertIsInstance(err, EnvelopeError)
        self.assertIsInstance(err, ValueError)
        self.assertEqual(str(err), "invalid payload: id: required; type: required")
        self.assertEqual(err.to_dict(), {"message": "invalid payload", "errors": ["id: required", "type: required"]})

    def test_message_only(self) -> None:
        err = EnvelopeError("payload is missing")
        self.assertEqual(str(err), "payload is missing")
        self.assertEqual(err.errors, [])
