"""SQLite-backed change log.

Each entry is one INSERT into ``field_change_audit_log``, committed
immediately.  The sink offers no query surface.
"""

from __future__ import annotations

import sqlite3
import threading

import structlog

from fieldaudit.ledger import ChangeLog
from fieldaudit.models.changes import ChangeEntry

_log = structlog.get_logger(component="ledger.sqlite")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS field_change_audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    entity_type TEXT NOT NULL,
    entity_id TEXT NOT NULL,
    revision_id TEXT,
    field_name TEXT NOT NULL,
    diff TEXT NOT NULL,
    changed INTEGER NOT NULL,
    uid TEXT NOT NULL
)
"""

_INSERT = (
    "INSERT INTO field_change_audit_log "
    "(entity_type, entity_id, revision_id, field_name, diff, changed, uid) "
    "VALUES (:entity_type, :entity_id, :revision_id, :field_name, :diff, :changed, :uid)"
)


class SQLiteChangeLog(ChangeLog):
    """Change log persisted to a SQLite database file.

    Args:
        path: Database file path, or ``:memory:``.
    """

    def __init__(self, path: str) -> None:
        if not path:
            raise ValueError("SQLite change log path must not be empty")
        self._path = path
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(path, check_same_thread=False)
        with self._conn:
            self._conn.execute(_SCHEMA)

    @property
    def sink_name(self) -> str:
        return "sqlite"

    def append(self, entry: ChangeEntry) -> bool:
        row = entry.to_row()
        row["entity_id"] = str(row["entity_id"])
        row["uid"] = str(row["uid"])
        if row["revision_id"] is not None:
            row["revision_id"] = str(row["revision_id"])
        try:
            with self._lock, self._conn:
                self._conn.execute(_INSERT, row)
        except sqlite3.Error as exc:
            _log.warning(
                "sqlite_insert_failed",
                path=self._path,
                entity_id=entry.entity_id,
                field=entry.field_label,
                error=str(exc),
            )
            return False
        return True

    def stop(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()
