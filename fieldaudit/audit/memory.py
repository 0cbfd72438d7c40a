"""In-memory collaborator implementations.

Used by the REST layer to run a detection pass over request payloads, and by
tests.  Every class here is a plain value holder; none performs I/O.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fieldaudit.audit.sources import (
    ActorContext,
    Clock,
    FileResolver,
    NestedItemSource,
    RecordSource,
)
from fieldaudit.models.changes import Identifier
from fieldaudit.models.fields import FieldDefinition


@dataclass(frozen=True)
class Snapshot(RecordSource):
    """Dict-backed record revision.

    ``values`` maps field name to its raw items.  A value that is not a list
    is treated as a single item.
    """

    kind: str
    id: Identifier
    revision: Identifier | None = None
    definitions: Mapping[str, FieldDefinition] = field(default_factory=dict)
    values: Mapping[str, Any] = field(default_factory=dict)

    @property
    def entity_kind(self) -> str:
        return self.kind

    @property
    def entity_id(self) -> Identifier:
        return self.id

    @property
    def revision_id(self) -> Identifier | None:
        return self.revision

    def field_names(self) -> list[str]:
        return list(self.definitions)

    def has_field(self, name: str) -> bool:
        return name in self.definitions

    def field_definition(self, name: str) -> FieldDefinition:
        return self.definitions[name]

    def field_value(self, name: str) -> Sequence[Any]:
        raw = self.values.get(name)
        if raw is None:
            return []
        if isinstance(raw, list | tuple):
            return list(raw)
        return [raw]


class InMemoryNestedItemStore(NestedItemSource):
    """Holds nested item revisions keyed by item id and revision id.

    The latest revision of an item is the one added last.
    """

    def __init__(self, items: Sequence[RecordSource] = ()) -> None:
        self._by_revision: dict[str, RecordSource] = {}
        self._latest: dict[str, RecordSource] = {}
        for item in items:
            self.add(item)

    def add(self, item: RecordSource) -> None:
        if item.revision_id is not None:
            self._by_revision[str(item.revision_id)] = item
        self._latest[str(item.entity_id)] = item

    def load_revision(self, revision_id: Identifier) -> RecordSource | None:
        return self._by_revision.get(str(revision_id))

    def load_latest(self, item_id: Identifier) -> RecordSource | None:
        return self._latest.get(str(item_id))


class MappingFileResolver(FileResolver):
    """Resolves file ids through a fixed id -> URL mapping."""

    def __init__(self, urls: Mapping[str, str] | None = None) -> None:
        self._urls = {str(k): v for k, v in (urls or {}).items()}

    def resolve_url(self, file_id: Identifier) -> str | None:
        return self._urls.get(str(file_id))


class SystemClock(Clock):
    """Wall clock, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class StaticActor(ActorContext):
    """Actor context for a single, known actor."""

    def __init__(self, actor_id: Identifier) -> None:
        self._actor_id = actor_id

    def current_actor_id(self) -> Identifier:
        return self._actor_id
