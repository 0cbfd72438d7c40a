"""Flattened field summaries for nested composite items (paragraphs)."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fieldaudit.audit.canonical import encode_json
from fieldaudit.audit.normalize import collapse_whitespace, decode_entities
from fieldaudit.audit.sources import RecordSource
from fieldaudit.audit.stringify import is_truthy, item_value, join_sorted
from fieldaudit.models.fields import REFERENCE_TYPES, TEXT_TYPES, FieldDefinition, FieldType
from fieldaudit.observability.logging import get_logger

_log = get_logger("audit.summary")

# Identity, revision, parent linkage and administrative fields.
NESTED_EXCLUDED_FIELDS = frozenset(
    {
        "id",
        "uuid",
        "revision_id",
        "parent_id",
        "parent_type",
        "parent_field_name",
        "default_langcode",
        "behavior_settings",
        "created",
        "langcode",
        "revision_default",
        "status",
    }
)

FieldSummary = dict[str, str]


def field_label(item: RecordSource | None, name: str) -> str:
    """Human label of *name* on *item*, falling back to the machine name."""
    if item is not None and item.has_field(name):
        return item.field_definition(name).label or name
    return name


def _render_sub_item(definition: FieldDefinition, raw: Any) -> str | None:
    if definition.type in TEXT_TYPES:
        value = item_value(raw)
        if value is None or isinstance(value, dict | list) or value == "":
            return None
        return collapse_whitespace(decode_entities(str(value)).strip())
    if definition.type == FieldType.BOOLEAN:
        return "Yes" if is_truthy(item_value(raw)) else "No"
    if definition.type in REFERENCE_TYPES:
        target_id = item_value(raw, "target_id")
        return f"Entity ID: {target_id}" if target_id else None
    if isinstance(raw, dict | list):
        return encode_json(raw)
    if raw is None:
        return None
    return str(raw)


class NestedSummaryBuilder:
    """Builds ``sub-field name -> display string`` summaries for nested items.

    Computed and read-only sub-fields are skipped along with every name in
    *excluded_fields*.  Only text, boolean and entity-reference sub-fields get
    type-specific rendering; everything else is rendered as opaque data.
    """

    def __init__(self, excluded_fields: Iterable[str] = NESTED_EXCLUDED_FIELDS) -> None:
        self._excluded = frozenset(excluded_fields)

    def summarize(self, item: RecordSource) -> FieldSummary:
        summary: FieldSummary = {}
        for name in item.field_names():
            definition = item.field_definition(name)
            if definition.computed or definition.read_only or name in self._excluded:
                continue

            values: list[str] = []
            for raw in item.field_value(name):
                rendered = _render_sub_item(definition, raw)
                if rendered:
                    values.append(rendered)
                _log.debug(
                    "nested_field_normalized",
                    item_id=item.entity_id,
                    field=name,
                    raw=encode_json(raw),
                    normalized=rendered or "",
                )

            joined = join_sorted(values)
            if joined:
                summary[name] = joined
        return dict(sorted(summary.items()))
