"""Field type tags and field definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FieldType(StrEnum):
    """Type tag of a record field, as reported by the host record system."""

    STRING = "string"
    TEXT = "text"
    TEXT_LONG = "text_long"
    TEXT_WITH_SUMMARY = "text_with_summary"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    TIMESTAMP = "timestamp"
    DECIMAL = "decimal"
    FLOAT = "float"
    DATE = "date"
    LINK = "link"
    FILE = "file"
    IMAGE = "image"
    COMMENT = "comment"
    ENTITY_REFERENCE = "entity_reference"
    ENTITY_REFERENCE_REVISIONS = "entity_reference_revisions"
    OTHER = "other"

    @classmethod
    def parse(cls, tag: str | FieldType) -> FieldType:
        """Map a raw tag to a FieldType; unknown tags become OTHER."""
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHER


TEXT_TYPES = frozenset(
    {FieldType.STRING, FieldType.TEXT, FieldType.TEXT_LONG, FieldType.TEXT_WITH_SUMMARY}
)
REFERENCE_TYPES = frozenset({FieldType.ENTITY_REFERENCE, FieldType.ENTITY_REFERENCE_REVISIONS})


@dataclass(frozen=True)
class FieldDefinition:
    """Definition of one field on a record or nested item."""

    type: FieldType
    label: str
    target_kind: str | None = None
    computed: bool = False
    read_only: bool = False

    def __post_init__(self) -> None:
        # Accept raw tag strings from callers; store the closed enum.
        object.__setattr__(self, "type", FieldType.parse(self.type))

    def references(self, kind: str) -> bool:
        """Return True if this is an entity reference targeting *kind*."""
        return self.type in REFERENCE_TYPES and self.target_kind == kind

    def is_nested_composite(self, kind: str) -> bool:
        """Return True if this field embeds revisioned nested items of *kind*."""
        return self.type == FieldType.ENTITY_REFERENCE_REVISIONS and self.target_kind == kind
