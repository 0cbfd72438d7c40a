"""Change entry data structure."""

from __future__ import annotations

from dataclasses import dataclass

Identifier = int | str


@dataclass(frozen=True)
class ChangeEntry:
    """One field's change on one revision.

    Produced by the ChangeDetector, persisted by a ChangeLog sink.
    Immutable: entries are never updated or deleted once created.
    """

    entity_kind: str
    entity_id: Identifier
    revision_id: Identifier | None
    field_label: str
    diff: str
    timestamp: int  # epoch seconds
    actor_id: Identifier

    def to_row(self) -> dict[str, object]:
        """Return the column mapping persisted by storage sinks."""
        return {
            "entity_type": self.entity_kind,
            "entity_id": self.entity_id,
            "revision_id": self.revision_id,
            "field_name": self.field_label,
            "diff": self.diff,
            "changed": self.timestamp,
            "uid": self.actor_id,
        }
