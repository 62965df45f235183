"""SQLite-backed key/value store with per-entry expiry."""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Callable, Optional

Clock = Callable[[], float]


class SQLiteKeyValueStore:
    """Durable string key/value table where every entry may carry a TTL.

    Expired entries are indistinguishable from missing ones: reads filter on
    ``expires_at`` and writes opportunistically purge stale rows. Writes to the
    same key are last-write-wins.
    """

    def __init__(self, db_path: str, *, clock: Clock = time.time) -> None:
        self._db_path = Path(db_path)
        self._clock = clock
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at REAL
                )
                """
            )

    def put(self, key: str, value: str, *, ttl_seconds: Optional[int] = None) -> None:
        if not key:
            raise ValueError("Key must be a non-empty string")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        now = self._clock()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM kv_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (now,),
            )
            conn.execute(
                """
                INSERT INTO kv_entries (key, value, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at
                """,
                (key, value, expires_at),
            )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT value FROM kv_entries
                WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)
                """,
                (key, self._clock()),
            ).fetchone()
        if not row:
            return None
        return row["value"]

    def take(self, key: str) -> bool:
        """Delete ``key`` if it holds a live entry; report whether it did.

        The check and the delete are a single statement, so two concurrent
        callers can never both observe the same entry.
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """
                DELETE FROM kv_entries
                WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)
                """,
                (key, self._clock()),
            )
        return cursor.rowcount == 1

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))

    def purge_expired(self) -> int:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM kv_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (self._clock(),),
            )
        return cursor.rowcount


__all__ = ["Clock", "SQLiteKeyValueStore"]
