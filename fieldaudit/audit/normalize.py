"""Value normalisation for materiality checks.

Two values that differ only in entity encoding, markup, whitespace amount or
JSON key order normalise to the same string.
"""

from __future__ import annotations

import html
import json
import re
from html.entities import html5

from fieldaudit.audit.canonical import encode_json

_RE_ENTITY = re.compile(r"&(?:#\d+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")
_RE_TAG = re.compile(r"<[^>]*>")
_RE_WHITESPACE = re.compile(r"\s+")
_RE_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _decode_entity(match: re.Match[str]) -> str:
    entity = match.group(0)
    if entity[1] == "#":
        return html.unescape(entity)
    return html5.get(entity[1:], entity)


def decode_entities(value: str) -> str:
    """Decode semicolon-terminated entities only; bare `&name` text is kept."""
    return _RE_ENTITY.sub(_decode_entity, value)


def collapse_whitespace(value: str) -> str:
    return _RE_WHITESPACE.sub(" ", value)


def strip_tags(value: str) -> str:
    return _RE_TAG.sub("", value)


def normalize_value(value: str) -> str:
    """Normalise *value* for comparison.

    Decodes entities, strips markup, trims and collapses whitespace.  A
    result shaped like a JSON object is re-encoded in canonical form when it
    parses; otherwise it is kept as text.
    """
    value = strip_tags(decode_entities(value)).strip()
    value = collapse_whitespace(value)
    if _RE_JSON_OBJECT.fullmatch(value):
        try:
            value = encode_json(json.loads(value), strict=True)
        except (ValueError, RecursionError):
            pass  # not JSON after all, or nested too deep; compare as text
    return value.strip()
