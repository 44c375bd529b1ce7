from __future__ import annotations

import unittest

from ce_sdk.codec import CodecError, body_to_text, decode_json, decode_json_object, encode_json


class CodecTests(unittest.TestCase):
    def test_encode_json_keeps_unicode(self) -> None:
        self.assertEqual(encode_json({"name": "café"}), '{"name": "café"}'.encode("utf-8"))

    def test_encode_json_rejects_unserializable_values(self) -> None:
        with self.assertRaises(CodecError):
            encode_json({"value": object()})
        with self.assertRaises(CodecError):
            encode_json({"value": float("nan")})

    def test_decode_json_accepts_bytes_and_text(self) -> None:
        self.assertEqual(decode_json(b'{"a": 1}'), {"a": 1})
        self.assertEqual(decode_json('[1, 2]'), [1, 2])

    def test_decode_json_rejects_malformed_input(self) -> None:
        with self.assertRaisesRegex(CodecError, "invalid JSON payload"):
            decode_json(b"{not json")
        with self.assertRaises(CodecError):
            decode_json(b"\xff\xfe")

    def test_decode_json_object_requires_object(self) -> None:
        with self.assertRaisesRegex(CodecError, "must be an object"):
            decode_json_object(b"[1, 2]")

        original = {"id": "1"}
        copied = decode_json_object(original)
        self.assertEqual(copied, original)
        self.assertIsNot(copied, original)

    def test_body_to_text(self) -> None:
        self.assertEqual(body_to_text(b"hello"), "hello")
        self.assertEqual(body_to_text("hello"), "hello")
        with self.assertRaises(CodecError):
            body_to_text(b"\xff")
