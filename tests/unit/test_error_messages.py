"""Unit tests for warehouse error body decoding."""

import json

import pytest

from bqcore.common.messages import (
    ObjectMessage,
    PlainTextMessage,
    decode_message,
    direct_error_message,
    extract_direct_message,
    parse_message,
)


def _envelope(*messages, top_message="top level"):
    return json.dumps({
        "error": {
            "code": 400,
            "message": top_message,
            "errors": [{"message": text, "reason": "invalid"} for text in messages],
        }
    })


class TestParseMessage:
    def test_object_body(self):
        parsed = parse_message('{"error": "x"}')
        assert isinstance(parsed, ObjectMessage)
        assert parsed.payload == {"error": "x"}

    @pytest.mark.parametrize("raw", ["plain text", "[1, 2]", "42", ""])
    def test_non_object_body(self, raw):
        parsed = parse_message(raw)
        assert isinstance(parsed, PlainTextMessage)
        assert parsed.text == raw


class TestDecodeMessage:
    """Best effort extraction of the readable message."""

    def test_error_string(self):
        assert decode_message('{"error":"my error"}') == "my error"

    def test_top_level_message(self):
        assert decode_message('{"message":"top","error":"ignored"}') == "top"

    def test_non_json_is_identity(self):
        assert decode_message("Not a JSON body") == "Not a JSON body"

    def test_json_array_is_identity(self):
        assert decode_message('["a"]') == '["a"]'

    def test_object_without_error_is_identity(self):
        raw = '{"status":"bad"}'
        assert decode_message(raw) == raw

    def test_error_of_unexpected_type_is_identity(self):
        raw = '{"error": 5}'
        assert decode_message(raw) == raw

    def test_single_error_element(self):
        assert decode_message(_envelope("only one")) == "only one"

    def test_multiple_error_elements(self):
        assert decode_message(_envelope("first", "second")) == "Errors: first\nsecond"

    def test_error_without_errors_uses_error_message(self):
        assert decode_message('{"error":{"message":"inner"}}') == "inner"

    def test_empty_errors_uses_error_message(self):
        assert decode_message(_envelope(top_message="fallback")) == "fallback"

    def test_error_without_message_or_errors_is_identity(self):
        raw = '{"error":{"code":500}}'
        assert decode_message(raw) == raw

    def test_non_string_message_is_rendered_as_json(self):
        assert decode_message('{"message":{"a":1}}') == '{"a":1}'


class TestDirectMessage:
    def test_extracts_detail(self):
        raw = "Error while reading table: p.d.t, error message: Incompatible partition schemas."
        assert extract_direct_message(raw) == "Incompatible partition schemas."

    def test_unmatched_is_identity(self):
        assert extract_direct_message("nothing to see") == "nothing to see"

    def test_direct_error_message_decodes_first(self):
        raw = _envelope("Error while reading table: a, error message: detail")
        assert direct_error_message(raw) == "detail"
