# src/daily_focus/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..core.errors import PersistenceError

logger = logging.getLogger(__name__)


class SqliteKeyValueStorage:
    """
    SQLite-backed key-value storage.

    One table, created if missing:
      kv(key TEXT PRIMARY KEY, value BLOB, updated_at REAL)

    Thread-safety:
    - each method opens its own SQLite connection

    sqlite3 errors are re-raised as PersistenceError.
    """

    def __init__(self, db_path: str | Path = "daily_focus.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("KeyValueStorage ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value BLOB NOT NULL,
                        updated_at REAL NOT NULL
                    )
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot initialise storage at {self._db_path}: {e}") from e

    # ---- public API ----

    def get(self, key: str) -> bytes | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Read failed for key {key!r}: {e}") from e

        if row is None:
            return None
        value = row[0]
        return bytes(value) if not isinstance(value, str) else value.encode("utf-8")

    def set(self, key: str, value: bytes) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, sqlite3.Binary(value), time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Write failed for key {key!r}: {e}") from e
        logger.debug("Stored key=%s bytes=%d", key, len(value))

