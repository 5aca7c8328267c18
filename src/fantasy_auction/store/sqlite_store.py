from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS kv ("
    "  namespace TEXT NOT NULL,"
    "  key TEXT NOT NULL,"
    "  value TEXT NOT NULL,"
    "  PRIMARY KEY (namespace, key)"
    ")"
)


class SqliteStore:
    """Namespaced string values in a single SQLite file, opened on first use."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Opening session store at %s", self._db_path)
            conn = sqlite3.connect(str(self._db_path))
            conn.execute("PRAGMA busy_timeout=5000")
            conn.execute(_SCHEMA)
            conn.commit()
            self._conn = conn
        return self._conn

    def get(self, namespace: str, key: str) -> str | None:
        row = (
            self._connection()
            .execute("SELECT value FROM kv WHERE namespace = ? AND key = ?", (namespace, key))
            .fetchone()
        )
        return None if row is None else row[0]

    def set(self, namespace: str, key: str, value: str) -> None:
        conn = self._connection()
        conn.execute(
            "INSERT OR REPLACE INTO kv (namespace, key, value) VALUES (?, ?, ?)",
            (namespace, key, value),
        )
        conn.commit()

    def clear(self, namespace: str, key: str | None = None) -> None:
        conn = self._connection()
        if key is not None:
            conn.execute("DELETE FROM kv WHERE namespace = ? AND key = ?", (namespace, key))
        else:
            conn.execute("DELETE FROM kv WHERE namespace = ?", (namespace,))
        conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
