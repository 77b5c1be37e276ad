"""
Persisted client state (streak, daily quests).

A tiny key/value port: `load(key)` returns the stored JSON value or None,
`save(key, value)` replaces it.  Two implementations:
  - SqliteStateStore: durable, one row per key.
  - MemoryStateStore: dict-backed, for tests and throwaway sessions.

Nothing else (conversation, playlist) is persisted.
"""

import json
import sqlite3
import time
from typing import Any, Protocol

from epictech.config import STATE_DB_FILE


class StateStore(Protocol):
    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryStateStore:
    """Dict-backed store.  Values are JSON round-tripped like the SQLite one."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)


class SqliteStateStore:
    """SQLite-backed key/value store."""

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = str(db_path or STATE_DB_FILE)
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_tables()

    def _init_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS client_state (
                key        TEXT PRIMARY KEY,
                value      TEXT NOT NULL,
                updated_at REAL NOT NULL
            );
        """)
        self._conn.commit()

    def load(self, key: str) -> Any | None:
        row = self._conn.execute(
            "SELECT value FROM client_state WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            return None  # corrupt row, treat as unset

    def save(self, key: str, value: Any) -> None:
        self._conn.execute(
            "INSERT INTO client_state (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            (key, json.dumps(value), time.time()),
        )
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()
