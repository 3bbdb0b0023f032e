"""SQLite backend adapter — implements BackendPort on a local file.

Uses EventDB (sync sqlite3) wrapped with asyncio.to_thread for async
compatibility. Handy for development and for running without Supabase.
"""

from __future__ import annotations

import asyncio
import logging

from src.data.db import EventDB
from src.ports.backend_port import BackendError

logger = logging.getLogger(__name__)


class SQLiteBackend:
    """SQLite implementation of BackendPort."""

    def __init__(self, db: EventDB | None = None, db_path: str | None = None) -> None:
        self._db = db or EventDB(db_path=db_path)

    async def select_all(self) -> list[dict]:
        try:
            return await asyncio.to_thread(self._db.list_all)
        except Exception as exc:
            logger.error("SQLite error (select_all): %s", exc)
            raise BackendError(f"Failed to load events: {exc}") from exc

    async def insert(self, row: dict) -> None:
        try:
            await asyncio.to_thread(self._db.insert, row)
        except Exception as exc:
            logger.error("SQLite error (insert): %s", exc)
            raise BackendError(f"Failed to insert event: {exc}") from exc

    async def update(self, event_id: str, patch: dict) -> None:
        try:
            updated = await asyncio.to_thread(self._db.update, event_id, patch)
        except Exception as exc:
            logger.error("SQLite error (update): %s", exc)
            raise BackendError(f"Failed to update event: {exc}") from exc
        if not updated:
            raise BackendError(f"Event {event_id} not found in backend")

    async def delete(self, event_id: str) -> None:
        try:
            deleted = await asyncio.to_thread(self._db.delete, event_id)
        except Exception as exc:
            logger.error("SQLite error (delete): %s", exc)
            raise BackendError(f"Failed to delete event: {exc}") from exc
        if not deleted:
            raise BackendError(f"Event {event_id} not found in backend")
