"""Textual diff descriptor between two rendered values."""

from __future__ import annotations

from fieldaudit.audit.normalize import normalize_value


def compute_diff(original: str, updated: str) -> str | None:
    """Return ``Changed from: …\\nTo: …`` for material differences, else None.

    Both sides are normalised first, and the descriptor shows the normalised
    forms, so cosmetic-only edits never produce a diff.
    """
    original = normalize_value(original)
    updated = normalize_value(updated)
    if original == updated:
        return None
    return f"Changed from: {original}\nTo: {updated}"
