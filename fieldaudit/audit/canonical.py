"""Canonical form for nested key/value data.

Equivalent structures must serialise to identical JSON regardless of key
order or empty members, so every structured value is passed through
``canonicalize`` before it is encoded for comparison.
"""

from __future__ import annotations

import json
import reprlib
from typing import Any

from fieldaudit.observability.logging import get_logger

_log = get_logger("audit.canonical")


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, dict | list) and not value)


def canonicalize(value: Any) -> Any:
    """Return *value* with mapping keys sorted and empty members removed.

    Scalars pass through unchanged.  Mappings are rebuilt in ascending key
    order with every member canonicalised; members that are None, the empty
    string, or an empty collection after recursion are dropped.  Lists keep
    their order and drop empty members the same way.

    Idempotent: ``canonicalize(canonicalize(x)) == canonicalize(x)``.
    """
    if isinstance(value, dict):
        result = {}
        for key in sorted(value, key=str):
            member = canonicalize(value[key])
            if not _is_empty(member):
                result[key] = member
        return result
    if isinstance(value, list | tuple):
        return [member for member in map(canonicalize, value) if not _is_empty(member)]
    return value


def encode_json(value: Any, strict: bool = False) -> str:
    """Compact JSON encoding of ``canonicalize(value)``.

    Slashes and non-ASCII characters are emitted unescaped.  Values nested
    beyond the interpreter recursion limit fall back to a depth-limited repr,
    or raise RecursionError when *strict* is set.
    """
    try:
        return json.dumps(canonicalize(value), separators=(",", ":"), ensure_ascii=False, default=str)
    except RecursionError:
        if strict:
            raise
        _log.warning("value_nested_too_deep", type=type(value).__name__)
        return reprlib.repr(value)
