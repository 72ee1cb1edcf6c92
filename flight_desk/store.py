"""Key-value persistence backed by SQLite."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class SqliteKeyValueStore:
    """String key-value store kept in a single SQLite table."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self.migrate()

    def migrate(self) -> None:
        """Create the table if needed and record the schema version."""
        logger.info("Running migrations for %s", self.db_path)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_version "
                "(version INTEGER NOT NULL)"
            )
            row = conn.execute("SELECT version FROM schema_version").fetchone()
            current = row[0] if row else 0
            if current < SCHEMA_VERSION:
                logger.info("Applying schema version %s", SCHEMA_VERSION)
                conn.executescript(_SCHEMA)
                if row:
                    conn.execute(
                        "UPDATE schema_version SET version=?", (SCHEMA_VERSION,)
                    )
                else:
                    conn.execute(
                        "INSERT INTO schema_version(version) VALUES (?)",
                        (SCHEMA_VERSION,),
                    )
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        logger.debug("Reading key %s", key)
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key=?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        logger.info("Writing key %s (%d bytes)", key, len(value))
        now = datetime.now(timezone.utc).isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?,?,?)
                ON CONFLICT(key)
                DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """,
                (key, value, now),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        logger.info("Removing key %s", key)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key=?", (key,))
            conn.commit()


__all__ = ["KeyValueStore", "SqliteKeyValueStore", "SCHEMA_VERSION"]
