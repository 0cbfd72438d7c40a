"""Collaborator interfaces consumed by the change detector.

RecordSource    -- Read-only view of one record revision (or nested item).
NestedItemSource -- Loads nested items by exact revision or latest revision.
FileResolver    -- Resolves a file id to an absolute URL.
Clock           -- Epoch-seconds time source.
ActorContext    -- Identifies who performed the update.

The change-log sink interface lives in ``fieldaudit.ledger``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from fieldaudit.models.changes import Identifier
from fieldaudit.models.fields import FieldDefinition


class RecordSource(ABC):
    """A read-only snapshot of a record's field definitions and values."""

    @property
    @abstractmethod
    def entity_kind(self) -> str:
        """Kind of the record, e.g. ``node`` or ``paragraph``."""

    @property
    @abstractmethod
    def entity_id(self) -> Identifier:
        """Stable identity of the record across revisions."""

    @property
    @abstractmethod
    def revision_id(self) -> Identifier | None:
        """Identity of this particular revision, if revisioned."""

    @abstractmethod
    def field_names(self) -> list[str]:
        """Names of every field defined on the record."""

    @abstractmethod
    def has_field(self, name: str) -> bool:
        """Return True if the record defines *name*."""

    @abstractmethod
    def field_definition(self, name: str) -> FieldDefinition:
        """Return the definition of *name*. Raises KeyError if undefined."""

    @abstractmethod
    def field_value(self, name: str) -> Sequence[Any]:
        """Return the raw items stored for *name* (empty when unset)."""


class NestedItemSource(ABC):
    """Loads nested composite items.

    Implementations may return None or raise; the detector treats both as a
    resolution failure.
    """

    @abstractmethod
    def load_revision(self, revision_id: Identifier) -> RecordSource | None:
        """Load the exact revision *revision_id*."""

    @abstractmethod
    def load_latest(self, item_id: Identifier) -> RecordSource | None:
        """Load the latest revision of item *item_id*."""


class FileResolver(ABC):
    """Resolves file references to absolute URLs."""

    @abstractmethod
    def resolve_url(self, file_id: Identifier) -> str | None:
        """Return the file's absolute URL, or None if the file no longer exists."""


class Clock(ABC):
    """Time source for change entry timestamps."""

    @abstractmethod
    def now(self) -> int:
        """Current time in epoch seconds."""


class ActorContext(ABC):
    """Identifies the actor performing the update."""

    @abstractmethod
    def current_actor_id(self) -> Identifier:
        """Identifier of the current actor."""
