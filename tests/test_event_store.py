"""Tests for src.core.event_store — write-then-apply collection."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from src.core.event_store import EventBusyError, EventNotFoundError, EventStore
from src.data.models import EventStatus
from src.ports.backend_port import BackendError


def _row(event_id, start_at, **extra):
    row = {
        "id": event_id,
        "title": f"Event {event_id}",
        "who": "child",
        "notes": "",
        "start_at": start_at,
        "end_at": start_at,
        "is_all_day": False,
    }
    row.update(extra)
    return row


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_orders_by_start_keeping_ties(self, mock_backend):
        mock_backend.select_all = AsyncMock(return_value=[
            _row("b", "2024-03-05T10:00:00"),
            _row("c", "2024-03-05T10:00:00"),
            _row("a", "2024-03-01T10:00:00"),
        ])
        store = EventStore(mock_backend)
        events = await store.load()
        assert [e.id for e in events] == ["a", "b", "c"]
        assert [e.id for e in store.events] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_legacy_rows_without_status(self, mock_backend):
        mock_backend.select_all = AsyncMock(return_value=[_row("a", "2024-03-01T10:00:00")])
        store = EventStore(mock_backend)
        await store.load()
        assert store.get("a").status is None

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_collection(self, mock_backend):
        mock_backend.select_all = AsyncMock(return_value=[_row("a", "2024-03-01T10:00:00")])
        store = EventStore(mock_backend)
        await store.load()

        mock_backend.select_all = AsyncMock(side_effect=BackendError("offline"))
        with pytest.raises(BackendError):
            await store.load()
        assert [e.id for e in store.events] == ["a"]

    @pytest.mark.asyncio
    async def test_malformed_rows_fail_whole_load(self, mock_backend):
        mock_backend.select_all = AsyncMock(return_value=[
            _row("a", "2024-03-01T10:00:00"),
            _row("b", "2024-03-02T10:00:00", who="grandma"),
        ])
        store = EventStore(mock_backend)
        with pytest.raises(BackendError):
            await store.load()
        assert store.events == []


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_sends_row_then_appends(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        event = make_event(id="new")
        await store.create(event)
        mock_backend.insert.assert_awaited_once_with(event.to_row())
        assert store.get("new") == event

    @pytest.mark.asyncio
    async def test_create_failure_leaves_collection(self, mock_backend, make_event):
        mock_backend.insert = AsyncMock(side_effect=BackendError("boom"))
        store = EventStore(mock_backend)
        with pytest.raises(BackendError):
            await store.create(make_event(id="new"))
        assert store.events == []
        assert store.is_busy("new") is False


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_merges_patch(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1", status="pending", needs_approval_from="parentB"))

        updated = await store.update("e1", {"status": "confirmed", "needs_approval_from": None})
        mock_backend.update.assert_awaited_once_with(
            "e1", {"status": "confirmed", "needs_approval_from": None},
        )
        assert updated.status is EventStatus.CONFIRMED
        assert store.get("e1").needs_approval_from is None
        assert store.get("e1").title == "Piano"

    @pytest.mark.asyncio
    async def test_update_keeps_position(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1"))
        await store.create(make_event(id="e2"))
        await store.update("e1", {"title": "Renamed"})
        assert [e.id for e in store.events] == ["e1", "e2"]

    @pytest.mark.asyncio
    async def test_update_failure_leaves_event(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1"))
        mock_backend.update = AsyncMock(side_effect=BackendError("boom"))
        with pytest.raises(BackendError):
            await store.update("e1", {"title": "Renamed"})
        assert store.get("e1").title == "Piano"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, mock_backend):
        store = EventStore(mock_backend)
        with pytest.raises(EventNotFoundError):
            await store.update("ghost", {"title": "x"})
        mock_backend.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_id_cannot_be_patched(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1"))
        await store.update("e1", {"id": "other", "title": "Renamed"})
        mock_backend.update.assert_awaited_once_with("e1", {"title": "Renamed"})
        assert store.get("e1").title == "Renamed"


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1"))
        await store.delete("e1")
        mock_backend.delete.assert_awaited_once_with("e1")
        assert store.get("e1") is None

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_event(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1"))
        mock_backend.delete = AsyncMock(side_effect=BackendError("boom"))
        with pytest.raises(BackendError):
            await store.delete("e1")
        assert store.get("e1") is not None

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, mock_backend):
        store = EventStore(mock_backend)
        with pytest.raises(EventNotFoundError):
            await store.delete("ghost")


class TestInFlight:
    @pytest.mark.asyncio
    async def test_second_write_while_first_in_flight_is_refused(self, mock_backend, make_event):
        store = EventStore(mock_backend)
        await store.create(make_event(id="e1"))

        release = asyncio.Event()

        async def slow_update(event_id, patch):
            await release.wait()

        mock_backend.update = AsyncMock(side_effect=slow_update)
        first = asyncio.create_task(store.update("e1", {"title": "First"}))
        await asyncio.sleep(0)
        assert store.is_busy("e1") is True

        with pytest.raises(EventBusyError):
            await store.update("e1", {"title": "Second"})

        release.set()
        await first
        assert store.is_busy("e1") is False
        assert store.get("e1").title == "First"
        assert mock_backend.update.await_count == 1
