"""Change log sinks for fieldaudit.

The change log is append-only: entries are inserted once and never updated,
re-read or deleted by the detector.

Submodules:
    memory  -- In-process list sink.
    sqlite  -- Single-row inserts into the ``field_change_audit_log`` table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fieldaudit.models.changes import ChangeEntry


class ChangeLog(ABC):
    """Abstract base class for change log sinks.

    ``append`` should not raise; return ``False`` instead.
    """

    @property
    @abstractmethod
    def sink_name(self) -> str:
        """Identifier used in logs."""

    @abstractmethod
    def append(self, entry: ChangeEntry) -> bool:
        """Store *entry*.

        Returns:
            True  -- entry stored.
            False -- storage failed (already logged inside implementation).
        """

    def stop(self) -> None:
        """Release resources held by the sink.  No-op by default."""


def build_change_log(backend: str, sqlite_path: str = "") -> ChangeLog:
    """Create the change log sink named by *backend*."""
    if backend == "sqlite":
        from fieldaudit.ledger.sqlite import SQLiteChangeLog

        return SQLiteChangeLog(sqlite_path)
    if backend == "memory":
        from fieldaudit.ledger.memory import InMemoryChangeLog

        return InMemoryChangeLog()
    raise ValueError(f"Unknown change log backend: {backend}")


__all__ = ["ChangeLog", "build_change_log"]
