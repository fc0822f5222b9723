# src/class_portal/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..errors import QuotaExceededError

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_CHARS = 5_000_000


def _entry_size(key: str, value: str) -> int:
    # Counted in characters, like browser local storage.
    return len(key) + len(value)


class SQLiteKeyValueStore:
    """
    SQLite-backed durable key-value store.

    One table, one row per key. Values are opaque strings.

    Quota:
    - sum of len(key) + len(value) over all rows, in characters
    - a write that would push the total above the quota is refused
      with QuotaExceededError and leaves the table untouched
    - quota=None disables the check

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(
        self,
        db_path: str | Path = "storage.sqlite3",
        *,
        quota_chars: int | None = DEFAULT_QUOTA_CHARS,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._quota = quota_chars
        self._ensure_schema()
        try:
            used = self.usage()
        except sqlite3.Error:
            used = -1
        logger.info("SQLiteKeyValueStore ready db=%s used=%s quota=%s", self._db_path, used, self._quota)

    @property
    def quota(self) -> int | None:
        return self._quota

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

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
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def read(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            # Raw bytes: a row that is not valid UTF-8 must reach the schema guard
            # as unreadable text instead of failing inside sqlite3.
            row = conn.execute("SELECT CAST(value AS BLOB) FROM kv WHERE key = ?", (key,)).fetchone()
            if row is None:
                return None
            return bytes(row[0]).decode("utf-8", errors="replace")
        finally:
            conn.close()

    def write(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            if self._quota is not None:
                (others,) = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) FROM kv WHERE key != ?",
                    (key,),
                ).fetchone()
                needed = int(others) + _entry_size(key, value)
                if needed > self._quota:
                    raise QuotaExceededError(key, needed, self._quota)

            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
            logger.debug("kv write key=%s chars=%d", key, len(value))
        finally:
            conn.close()

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def usage(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) FROM kv").fetchone()
            return int(n)
        finally:
            conn.close()


class MemoryKeyValueStore:
    """Process-local store with the same quota rules; nothing survives the process."""

    def __init__(self, *, quota_chars: int | None = DEFAULT_QUOTA_CHARS) -> None:
        self._data: dict[str, str] = {}
        self._quota = quota_chars

    @property
    def quota(self) -> int | None:
        return self._quota

    def close(self) -> None:
        return

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        if self._quota is not None:
            others = sum(_entry_size(k, v) for k, v in self._data.items() if k != key)
            needed = others + _entry_size(key, value)
            if needed > self._quota:
                raise QuotaExceededError(key, needed, self._quota)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def usage(self) -> int:
        return sum(_entry_size(k, v) for k, v in self._data.items())
