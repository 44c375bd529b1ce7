from __future__ import annotations

import unittest

from ce_sdk.versioning import (
    SpecVersion,
    is_reserved,
    known_attributes,
    optional_attributes,
    required_attributes,
    reserved_names,
    rules_for,
    supported_versions,
)


class VersioningTests(unittest.TestCase):
    def test_parse_accepts_supported_tokens(self) -> None:
        self.assertIs(SpecVersion.parse("0.3"), SpecVersion.V03)
        self.assertIs(SpecVersion.parse("1.0"), SpecVersion.V1)
        self.assertIs(SpecVersion.parse(SpecVersion.V1), SpecVersion.V1)
        self.assertEqual(str(SpecVersion.V03), "0.3")

    def test_parse_rejects_unknown_tokens(self) -> None:
        for token in ("0.2", "1", "", None, 1.0):
            with self.subTest(token=token):
                with self.assertRaisesRegex(ValueError, "unsupported spec version"):
                    SpecVersion.parse(token)

    def test_required_attributes_are_shared(self) -> None:
        expected = {"specversion", "id", "source", "type"}
        for version in supported_versions():
            with self.subTest(version=version):
                self.assertEqual(required_attributes(version), expected)

    def test_optional_attributes_per_version(self) -> None:
        self.assertEqual(
            optional_attributes("0.3"),
            {"datacontenttype", "datacontentencoding", "schemaurl", "subject", "time"},
        )
        self.assertEqual(optional_attributes("1.0"), {"datacontenttype", "dataschema", "subject", "time"})

    def test_reserved_names_cover_known_attributes_and_data(self) -> None:
        for version in supported_versions():
            with self.subTest(version=version):
                reserved = reserved_names(version)
                self.assertTrue(known_attributes(version) <= reserved)
                self.assertIn("data", reserved)

        self.assertTrue(is_reserved("1.0", "data_base64"))
        self.assertFalse(is_reserved("0.3", "data_base64"))
        self.assertFalse(is_reserved("1.0", "schemaurl"))
        self.assertTrue(is_reserved(SpecVersion.V03, "schemaurl"))

    def test_rules_for_accepts_enum_and_string(self) -> None:
        self.assertEqual(rules_for("1.0"), rules_for(SpecVersion.V1))
        self.assertEqual(supported_versions(), ["0.3", "1.0"])
