"""
Posture Guardian — Record Database.

Durable key/value storage for JSON records (reminder settings, runtime
state). Every save is a synchronous write-through; there is no batching.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SETTINGS_KEY = "postureSettings"
STATE_KEY = "postureState"


class RecordDB:
    """SQLite-backed storage for JSON-serializable records."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from src.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the records table if it doesn't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS records (
                    key        TEXT PRIMARY KEY,
                    value      TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
        logger.debug("Records table initialized at %s", self._db_path)

    def load(self, key: str, default: Any = None) -> Any:
        """Return the decoded record for key, or default.

        A record that is missing or not valid JSON yields default; corruption
        is logged and never raised.
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM records WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return default

        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError) as exc:
            logger.warning("Corrupt record '%s', using defaults: %s", key, exc)
            return default

    def save(self, key: str, value: Any) -> None:
        """Serialize value to JSON and upsert it under key."""
        payload = json.dumps(value, ensure_ascii=False)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO records (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload, datetime.now(timezone.utc).isoformat()),
            )
        logger.debug("Saved record '%s' (%d bytes)", key, len(payload))

    def delete(self, key: str) -> bool:
        """Remove a record. Returns True if it existed."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM records WHERE key = ?", (key,))
        return cursor.rowcount > 0

