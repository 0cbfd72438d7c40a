"""Change detection core.

Submodules:
    canonical  -- Deterministic form for nested key/value data.
    normalize  -- Cosmetic-insensitive string normalisation.
    stringify  -- Per-type rendering of field values.
    summary    -- Field summaries for nested composite items.
    diff       -- Materiality check and diff descriptor.
    detector   -- Orchestrates a full record comparison.
    sources    -- Collaborator interfaces (record, nested item, file, clock, actor).
    memory     -- In-memory collaborator implementations.
"""

from __future__ import annotations

from datetime import tzinfo
from zoneinfo import ZoneInfo

from fieldaudit.audit.canonical import canonicalize, encode_json
from fieldaudit.audit.detector import ChangeDetector
from fieldaudit.audit.diff import compute_diff
from fieldaudit.audit.normalize import normalize_value
from fieldaudit.audit.sources import FileResolver
from fieldaudit.audit.stringify import FieldStringifier
from fieldaudit.audit.summary import NestedSummaryBuilder
from fieldaudit.models.config import AuditConfig

__all__ = [
    "ChangeDetector",
    "FieldStringifier",
    "NestedSummaryBuilder",
    "build_stringifier",
    "canonicalize",
    "compute_diff",
    "encode_json",
    "normalize_value",
]


def build_stringifier(config: AuditConfig, file_resolver: FileResolver | None = None) -> FieldStringifier:
    """Create a FieldStringifier honouring the configured zone and nested kind."""
    zone: tzinfo | None = ZoneInfo(config.timezone) if config.timezone else None
    return FieldStringifier(
        file_resolver=file_resolver,
        nested_kind=config.nested_target_kind,
        timezone=zone,
    )
