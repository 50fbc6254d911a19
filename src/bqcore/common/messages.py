"""Decoding of warehouse error bodies.

Warehouse failures arrive as a message body that is either plain text or a
JSON error envelope such as::

    {"error": {"code": 400, "message": "...", "errors": [{"reason": "...", "message": "..."}]}}

The body is parsed once into a :data:`StructuredMessage` and every consumer
(message decoding, retry decision) works on that value.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

__all__ = [
    "ObjectMessage",
    "PlainTextMessage",
    "StructuredMessage",
    "parse_message",
    "render_message",
    "decode_message",
    "extract_direct_message",
    "direct_error_message",
]

_DIRECT_MESSAGE_PATTERN = re.compile(r"(.+)error message: (.+)")


@dataclass(frozen=True)
class ObjectMessage:
    """Body that decoded to a JSON object."""

    raw: str
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class PlainTextMessage:
    """Body that is not a JSON object: plain text, or a JSON scalar/array."""

    text: str


StructuredMessage = Union[ObjectMessage, PlainTextMessage]


def parse_message(raw_message: str) -> StructuredMessage:
    """Parse a raw error body. Never raises."""
    try:
        payload = json.loads(raw_message)
    except (TypeError, ValueError):
        return PlainTextMessage(raw_message)

    if isinstance(payload, dict):
        return ObjectMessage(raw=raw_message, payload=payload)
    return PlainTextMessage(raw_message)


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return _compact_json(value)


def render_message(message: StructuredMessage) -> str:
    """Render a parsed body for logging; objects become compact JSON."""
    if isinstance(message, ObjectMessage):
        return _compact_json(message.payload)
    return message.text


def _decode_object(message: ObjectMessage) -> str:
    payload = message.payload
    if "message" in payload:
        return _as_text(payload["message"])

    if "error" not in payload:
        return message.raw

    error = payload["error"]
    if isinstance(error, str):
        return error
    if not isinstance(error, dict):
        return message.raw

    fallback = _as_text(error["message"]) if "message" in error else message.raw

    errors = error.get("errors")
    if not isinstance(errors, list) or not errors:
        return fallback

    texts = [
        _as_text(item.get("message", "")) if isinstance(item, dict) else _as_text(item)
        for item in errors
    ]
    if len(texts) == 1:
        return texts[0]
    return "Errors: " + "\n".join(texts)


def decode_message(raw_message: str) -> str:
    """Turn a raw warehouse error body into readable text.

    Best effort and total: anything that does not look like a known envelope
    is returned unchanged.

    Examples:
        >>> decode_message('{"error":"my error"}')
        'my error'
        >>> decode_message("plain text")
        'plain text'
    """
    message = parse_message(raw_message)
    if isinstance(message, PlainTextMessage):
        return message.text
    return _decode_object(message)


def extract_direct_message(raw_message: str) -> str:
    """Return the detail after ``error message:``, or the input unchanged."""
    match = _DIRECT_MESSAGE_PATTERN.search(raw_message)
    if match is None:
        return raw_message
    return match.group(2)


def direct_error_message(raw_message: str) -> str:
    """Decode the envelope, then strip the table-read error preamble."""
    return extract_direct_message(decode_message(raw_message))
