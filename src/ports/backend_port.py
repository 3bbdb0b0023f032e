"""Backend port — abstract interface for the remote `events` table.

Core modules depend on this protocol, never on a specific provider.
Rows are plain dicts in the Event wire shape (see src.data.models.Event).

update and delete target exactly one row by id. An id that matches no
row is a failure: every adapter raises BackendError for it, so the event
store never applies a local change the backend did not make.
"""

from __future__ import annotations

from typing import Protocol


class BackendError(Exception):
    """Raised when any backend operation fails, including a missing row."""


class BackendPort(Protocol):
    """Abstract CRUD interface used by the event store."""

    async def select_all(self) -> list[dict]: ...

    async def insert(self, row: dict) -> None: ...

    async def update(self, event_id: str, patch: dict) -> None: ...

    async def delete(self, event_id: str) -> None: ...
