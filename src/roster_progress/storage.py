"""
roster_progress/storage.py — Key-value persistence port
=======================================================
The roster is persisted as a single JSON blob under one key, the way a
browser app keeps it in localStorage.  The manager only sees the
``KeyValueStore`` protocol, so the storage mechanism is swappable.

Backends
--------
  InMemoryStore   dict-backed; used by tests and for throwaway sessions.
  SqliteStore     one ``kv_store`` table in a local SQLite file.

Design decisions
----------------
- **Connection per call** — every get/set/delete opens and closes its own
  connection; there is a single writer and no long-lived session.
- **Errors are wrapped** — ``sqlite3.Error`` and serialisation failures
  surface as ``StorageError`` so callers handle one exception type.

Public API
----------
  KeyValueStore              protocol: get / set / delete
  InMemoryStore()
  SqliteStore(path)          creates the table on first use
  build_store(storage_cfg)   → KeyValueStore for the configured backend
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the persistent store cannot be read or written."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        """Decoded JSON value for *key*, or None when absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Serialise *value* to JSON and store it under *key*."""
        ...

    def delete(self, key: str) -> None:
        """Remove *key*; missing keys are not an error."""
        ...


def _encode(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"value is not JSON-serialisable: {exc}") from exc


def _decode(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"stored value is not valid JSON: {exc}") from exc


# ─── In-memory backend ───────────────────────────────────────────────────────

class InMemoryStore:
    """Holds serialised JSON strings in a dict, so round-trips behave like disk."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else _decode(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _encode(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


# ─── SQLite backend ──────────────────────────────────────────────────────────

class SqliteStore:
    """Single-table key-value store in a SQLite file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._initialised = False

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.path))
        conn.row_factory = sqlite3.Row
        if not self._initialised:
            try:
                conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key         TEXT PRIMARY KEY,
                    value       TEXT NOT NULL,
                    updated_at  TEXT DEFAULT (datetime('now'))
                );
                """)
                conn.commit()
            except sqlite3.Error:
                conn.close()
                raise
            self._initialised = True
        return conn

    def get(self, key: str) -> Optional[Any]:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"could not read {key!r} from {self.path}: {exc}") from exc
        if row is None:
            return None
        return _decode(row["value"])

    def set(self, key: str, value: Any) -> None:
        raw = _encode(value)
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = datetime('now')
                    """,
                    (key, raw),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"could not write {key!r} to {self.path}: {exc}") from exc
        logger.debug("Stored %d bytes under %r in %s", len(raw), key, self.path)

    def delete(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"could not delete {key!r} from {self.path}: {exc}") from exc


def build_store(storage_cfg) -> KeyValueStore:
    """Return the backend named by ``storage_cfg.backend``."""
    if storage_cfg.backend == "memory":
        return InMemoryStore()
    return SqliteStore(storage_cfg.db_path)
