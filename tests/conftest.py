"""Shared test fixtures and configuration.

Sets up fake environment variables so src.config doesn't sys.exit(),
and provides common fixtures like a temp DB and sample events.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("PIN_CODE", "1234")
os.environ.setdefault("BACKEND_PROVIDER", "supabase")
os.environ.setdefault("SUPABASE_URL", "https://fake-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "fake-key-for-tests")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("ACTING_PARENT", "parentA")

import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_calendar.db")


@pytest.fixture
def event_db(tmp_db_path):
    """Return an EventDB instance backed by a temp file."""
    from src.data.db import EventDB
    return EventDB(db_path=tmp_db_path)


@pytest.fixture
def session_db(tmp_path):
    """Return a SessionDB instance backed by a temp file."""
    from src.data.db import SessionDB
    return SessionDB(db_path=str(tmp_path / "test_session.db"))


@pytest.fixture
def mock_backend():
    """A BackendPort double where every call succeeds."""
    backend = MagicMock()
    backend.select_all = AsyncMock(return_value=[])
    backend.insert = AsyncMock(return_value=None)
    backend.update = AsyncMock(return_value=None)
    backend.delete = AsyncMock(return_value=None)
    return backend


def _make_event(**overrides):
    from src.data.models import Event

    data = {
        "id": "evt-1",
        "title": "Piano",
        "who": "child",
        "notes": "",
        "start_at": "2024-03-05T12:00:00",
        "end_at": "2024-03-05T13:00:00",
        "is_all_day": False,
        "status": "confirmed",
        "requested_by": "parentA",
        "needs_approval_from": None,
    }
    data.update(overrides)
    return Event.model_validate(data)


@pytest.fixture
def make_event():
    """Factory building an Event with sensible defaults."""
    return _make_event

