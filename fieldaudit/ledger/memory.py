"""In-process change log."""

from __future__ import annotations

import threading

from fieldaudit.ledger import ChangeLog
from fieldaudit.models.changes import ChangeEntry


class InMemoryChangeLog(ChangeLog):
    """Append-only list of change entries, safe for concurrent appends."""

    def __init__(self) -> None:
        self._entries: list[ChangeEntry] = []
        self._lock = threading.Lock()

    @property
    def sink_name(self) -> str:
        return "memory"

    def append(self, entry: ChangeEntry) -> bool:
        with self._lock:
            self._entries.append(entry)
        return True

    @property
    def entries(self) -> tuple[ChangeEntry, ...]:
        with self._lock:
            return tuple(self._entries)
