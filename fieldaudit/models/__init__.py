"""Core data structures for fieldaudit."""

from fieldaudit.models.changes import ChangeEntry, Identifier
from fieldaudit.models.config import FieldAuditConfig
from fieldaudit.models.fields import FieldDefinition, FieldType

__all__ = [
    "ChangeEntry",
    "FieldAuditConfig",
    "FieldDefinition",
    "FieldType",
    "Identifier",
]
