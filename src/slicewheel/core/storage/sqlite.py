"""
SQLite medium.

Local persistence for the three collections, featuring:
- Schema versioning and migrations
- One short-lived connection per call, committed or rolled back as a unit
- A byte budget checked inside the same transaction as the write
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ...config import DEFAULT_QUOTA_BYTES
from .base import KeyValueMedium

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class SQLiteMedium(KeyValueMedium):
    """
    Persistent key-value medium in a local SQLite file.

    Every `set` runs in its own transaction, so a single collection write is
    atomic. Writes spanning several keys are not grouped.
    """

    def __init__(self, db_path: Path, quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES):
        self.db_path = Path(db_path)
        self.quota_bytes = quota_bytes
        self._init_db()

    @contextmanager
    def _connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema with versioning."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL,
                    description TEXT
                )
            """)

            current_version = self._get_schema_version_internal(conn)

            if current_version < SCHEMA_VERSION:
                self._migrate(conn, current_version)

    def _get_schema_version_internal(self, conn: sqlite3.Connection) -> int:
        row = conn.execute(
            "SELECT MAX(version) as v FROM schema_version"
        ).fetchone()
        return row["v"] if row and row["v"] else 0

    def _migrate(self, conn: sqlite3.Connection, from_version: int) -> None:
        """Run schema migrations."""
        if from_version < 1:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                INSERT INTO schema_version (version, applied_at, description)
                VALUES (1, ?, 'Initial schema')
            """, (datetime.now(timezone.utc).isoformat(),))
            logger.debug(f"Created schema v1 in {self.db_path}")

    def get_schema_version(self) -> int:
        with self._connection() as conn:
            return self._get_schema_version_internal(conn)

    def _total_size(self, conn: sqlite3.Connection) -> int:
        row = conn.execute("""
            SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0) AS s
            FROM entries
        """).fetchone()
        return row["s"]

    def get(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT value FROM entries WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connection() as conn:
            row = conn.execute("""
                SELECT LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB)) AS s
                FROM entries WHERE key = ?
            """, (key,)).fetchone()
            existing_size = row["s"] if row else 0
            self.check_quota(key, value, self._total_size(conn), existing_size)

            conn.execute("""
                INSERT OR REPLACE INTO entries (key, value, updated_at)
                VALUES (?, ?, ?)
            """, (key, value, datetime.now(timezone.utc).isoformat()))

    def delete(self, key: str) -> bool:
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM entries WHERE key = ?", (key,))
            return cursor.rowcount > 0

    def keys(self) -> List[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT key FROM entries ORDER BY key").fetchall()
            return [row["key"] for row in rows]

    def size_bytes(self) -> int:
        with self._connection() as conn:
            return self._total_size(conn)
