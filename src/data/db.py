"""
Family Calendar Lite — Local SQLite storage.

EventDB mirrors the remote `events` table so the calendar can run against a
local file (BACKEND_PROVIDER=sqlite). SessionDB keeps the PIN session expiry,
the equivalent of the browser's local storage.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

EVENT_COLUMNS = (
    "id",
    "title",
    "who",
    "notes",
    "start_at",
    "end_at",
    "is_all_day",
    "status",
    "requested_by",
    "needs_approval_from",
)


def _default_db_path() -> str:
    from src.config import settings
    return settings.DATABASE_PATH


def _prepare_path(db_path: str) -> None:
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


class EventDB:
    """SQLite-backed `events` table."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            db_path = _default_db_path()

        self._db_path = db_path
        _prepare_path(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the events table if it doesn't exist, and migrate schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    id          TEXT    PRIMARY KEY,
                    title       TEXT    NOT NULL,
                    who         TEXT    NOT NULL,
                    notes       TEXT    NOT NULL DEFAULT '',
                    start_at    TEXT    NOT NULL,
                    end_at      TEXT    NOT NULL,
                    is_all_day  INTEGER NOT NULL DEFAULT 0
                )
            """)
            # Approval columns arrived later; older files lack them
            existing_cols = {
                row[1] for row in conn.execute("PRAGMA table_info(events)").fetchall()
            }
            for col in ("status", "requested_by", "needs_approval_from"):
                if col not in existing_cols:
                    conn.execute(f"ALTER TABLE events ADD COLUMN {col} TEXT")
        logger.debug("Events table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> dict:
        data = {col: row[col] for col in EVENT_COLUMNS}
        data["is_all_day"] = bool(data["is_all_day"])
        return data

    @staticmethod
    def _check_columns(fields: dict) -> None:
        unknown = set(fields) - set(EVENT_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown event columns: {sorted(unknown)}")

    def list_all(self) -> list[dict]:
        """Return all rows ordered by start_at, ties in insertion order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM events ORDER BY start_at ASC, rowid ASC"
            ).fetchall()
        return [self._row_to_dict(r) for r in rows]

    def get(self, event_id: str) -> dict | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM events WHERE id = ?", (event_id,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    def insert(self, row: dict) -> None:
        """Insert a single event row."""
        self._check_columns(row)
        cols = list(row)
        values = [int(v) if c == "is_all_day" else v for c, v in row.items()]
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO events ({', '.join(cols)}) "
                f"VALUES ({', '.join('?' for _ in cols)})",
                values,
            )
        logger.info("Event inserted: %s '%s'", row.get("id"), row.get("title"))

    def update(self, event_id: str, patch: dict) -> bool:
        """Patch any subset of columns. Returns False if no row matched."""
        self._check_columns(patch)
        if not patch:
            return self.get(event_id) is not None
        assignments = ", ".join(f"{col} = ?" for col in patch)
        values = [int(v) if c == "is_all_day" else v for c, v in patch.items()]
        with self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE events SET {assignments} WHERE id = ?",
                (*values, event_id),
            )
        updated = cursor.rowcount > 0
        if updated:
            logger.info("Event %s updated (%s)", event_id, ", ".join(patch))
        return updated

    def delete(self, event_id: str) -> bool:
        """Permanently delete an event by ID."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM events WHERE id = ?", (event_id,),
            )
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Event %s deleted", event_id)
        return deleted


class SessionDB:
    """Tiny key/value table for session state (PIN expiry)."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            db_path = _default_db_path()

        self._db_path = db_path
        _prepare_path(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS session (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
        logger.debug("Session table initialized at %s", self._db_path)

    def get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM session WHERE key = ?", (key,),
            ).fetchone()
        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO session (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )

    def remove(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM session WHERE key = ?", (key,))
