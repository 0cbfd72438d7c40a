"""Field-level change detection between two revisions of a record.

ChangeDetector walks the updated record's fields, renders old and new values
through FieldStringifier, and emits one ChangeEntry per materially changed
field.  Nested composite fields (paragraphs) are matched by item id and
diffed sub-field by sub-field; all of a field's nested changes are folded
into a single entry.

Each ``detect_changes`` call is a self-contained pass over two immutable
snapshots.  Nothing in this module holds mutable state between calls.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

from fieldaudit.audit.diff import compute_diff
from fieldaudit.audit.memory import SystemClock
from fieldaudit.audit.sources import (
    ActorContext,
    Clock,
    NestedItemSource,
    RecordSource,
)
from fieldaudit.audit.stringify import FieldStringifier, item_value
from fieldaudit.audit.summary import (
    NESTED_EXCLUDED_FIELDS,
    FieldSummary,
    NestedSummaryBuilder,
    field_label,
)
from fieldaudit.ledger import ChangeLog
from fieldaudit.models.changes import ChangeEntry, Identifier
from fieldaudit.models.config import AuditConfig
from fieldaudit.observability.logging import get_logger
from fieldaudit.observability.metrics import (
    change_entries_total,
    change_log_append_failures_total,
    detection_duration_seconds,
    resolution_failures_total,
)

_log = get_logger("audit.detector")

# Revision metadata, audit timestamps, ownership and path alias.
EXCLUDED_FIELDS = frozenset(
    {
        "vid",
        "revision_timestamp",
        "changed",
        "revision_uid",
        "uid",
        "created",
        "path",
        "comment",
        "revision_translation_affected",
    }
)


class _NestedEntry:
    """A resolved nested item and its field summary."""

    __slots__ = ("item", "summary")

    def __init__(self, item: RecordSource, summary: FieldSummary) -> None:
        self.item = item
        self.summary = summary


class ChangeDetector:
    """Detects field-level changes and appends them to a change log.

    Args:
        actor:         Supplies the actor id recorded on every entry.
        nested_source: Loads nested items referenced by composite fields.
        stringifier:   Renders simple field values.  Defaults to one without
                       a file resolver (file fields render as errors).
        change_log:    Sink for produced entries; None disables persistence.
        clock:         Timestamp source.  Defaults to the system clock.
        config:        Extra excluded fields and the nested target kind.
    """

    def __init__(
        self,
        actor: ActorContext,
        nested_source: NestedItemSource | None = None,
        stringifier: FieldStringifier | None = None,
        change_log: ChangeLog | None = None,
        clock: Clock | None = None,
        config: AuditConfig | None = None,
    ) -> None:
        self._config = config or AuditConfig()
        self._actor = actor
        self._nested_source = nested_source
        self._stringifier = stringifier or FieldStringifier(nested_kind=self._config.nested_target_kind)
        self._change_log = change_log
        self._clock = clock or SystemClock()
        self._summaries = NestedSummaryBuilder(NESTED_EXCLUDED_FIELDS.union(self._config.nested_excluded_fields))
        self._excluded = EXCLUDED_FIELDS.union(self._config.excluded_fields)

    def detect_changes(self, updated: RecordSource, original: RecordSource) -> list[ChangeEntry]:
        """Compare *original* with *updated* and return one entry per changed field."""
        t_start = time.monotonic()
        actor_id = self._actor.current_actor_id()
        entries: list[ChangeEntry] = []

        for name in updated.field_names():
            if name in self._excluded or not updated.has_field(name):
                continue
            definition = updated.field_definition(name)

            if definition.is_nested_composite(self._config.nested_target_kind):
                diff = self._diff_nested_field(updated, original, name)
            else:
                diff = self._diff_simple_field(updated, original, name)

            if diff:
                entry = self._record(updated, definition.label or name, diff, actor_id)
                change_entries_total.labels(field_type=definition.type.value).inc()
                entries.append(entry)

        detection_duration_seconds.observe(time.monotonic() - t_start)
        _log.debug(
            "change_detection_complete",
            entity_kind=updated.entity_kind,
            entity_id=updated.entity_id,
            revision_id=updated.revision_id,
            changes=len(entries),
        )
        return entries

    # ------------------------------------------------------------------
    # Simple fields
    # ------------------------------------------------------------------

    def _diff_simple_field(self, updated: RecordSource, original: RecordSource, name: str) -> str | None:
        return compute_diff(
            self._stringifier.stringify_field(original, name),
            self._stringifier.stringify_field(updated, name),
        )

    # ------------------------------------------------------------------
    # Nested composite fields
    # ------------------------------------------------------------------

    def _diff_nested_field(self, updated: RecordSource, original: RecordSource, name: str) -> str | None:
        original_items = original.field_value(name) if original.has_field(name) else []
        new_items = updated.field_value(name)

        before = self._summarize_items(original_items)
        after = self._summarize_items(new_items)

        blocks: list[str] = []

        for item_id, new_entry in after.items():
            old_entry = before.get(item_id)
            if old_entry is None:
                continue
            for sub_field in sorted(new_entry.summary.keys() | old_entry.summary.keys()):
                diff = compute_diff(
                    old_entry.summary.get(sub_field, ""),
                    new_entry.summary.get(sub_field, ""),
                )
                if diff:
                    label = field_label(new_entry.item, sub_field)
                    blocks.append(f"Paragraph ID {item_id}, Field {label}:\n{diff}")

        for item_id in before:
            if item_id not in after:
                blocks.append(f"Paragraph ID {item_id}: Deleted")

        for item_id, new_entry in after.items():
            if item_id in before:
                continue
            lines = [f"{field_label(new_entry.item, key)}: {value}" for key, value in new_entry.summary.items()]
            blocks.append("\n".join([f"Paragraph ID {item_id}: Added", *lines]))

        return "\n\n".join(blocks) or None

    def _summarize_items(self, items: Iterable[Any]) -> dict[str, _NestedEntry]:
        """Resolve each referenced item and map its id to its summary.

        Items without a target id, or that cannot be loaded, are skipped.
        """
        result: dict[str, _NestedEntry] = {}
        for raw in items:
            target_id = item_value(raw, "target_id")
            if not target_id:
                continue
            revision_id = raw.get("target_revision_id") if isinstance(raw, dict) else None
            item = self._load_nested(target_id, revision_id)
            if item is None:
                _log.warning("nested_item_skipped", target_id=target_id, revision_id=revision_id)
                continue
            result[str(target_id)] = _NestedEntry(item, self._summaries.summarize(item))
        return result

    def _load_nested(self, target_id: Identifier, revision_id: Identifier | None) -> RecordSource | None:
        """Load the exact revision when known, falling back to the latest one."""
        if self._nested_source is None:
            _log.warning("nested_source_missing", target_id=target_id)
            resolution_failures_total.labels(target="paragraph").inc()
            return None

        item: RecordSource | None = None
        if revision_id:
            try:
                item = self._nested_source.load_revision(revision_id)
            except Exception as exc:  # noqa: BLE001
                _log.warning("paragraph_revision_load_failed", revision_id=revision_id, error=str(exc))
                resolution_failures_total.labels(target="paragraph").inc()

        if item is None:
            try:
                item = self._nested_source.load_latest(target_id)
            except Exception as exc:  # noqa: BLE001
                _log.warning("paragraph_load_failed", target_id=target_id, error=str(exc))
                resolution_failures_total.labels(target="paragraph").inc()
        return item

    # ------------------------------------------------------------------
    # Entry creation
    # ------------------------------------------------------------------

    def _record(self, updated: RecordSource, label: str, diff: str, actor_id: Identifier) -> ChangeEntry:
        entry = ChangeEntry(
            entity_kind=updated.entity_kind,
            entity_id=updated.entity_id,
            revision_id=updated.revision_id,
            field_label=label,
            diff=diff,
            timestamp=self._clock.now(),
            actor_id=actor_id,
        )
        _log.info(
            "change_detected",
            entity_kind=entry.entity_kind,
            entity_id=entry.entity_id,
            revision_id=entry.revision_id,
            field=label,
        )
        if self._change_log is not None:
            self._append(self._change_log, entry)
        return entry

    def _append(self, change_log: ChangeLog, entry: ChangeEntry) -> None:
        """Hand *entry* to *change_log*; failures are logged, never raised."""
        try:
            stored = change_log.append(entry)
        except Exception as exc:  # noqa: BLE001
            _log.error(
                "change_log_unexpected_error",
                sink=change_log.sink_name,
                field=entry.field_label,
                error=str(exc),
            )
            stored = False
        if not stored:
            change_log_append_failures_total.inc()
            _log.warning("change_log_append_failed", sink=change_log.sink_name, field=entry.field_label)

