"""Backend adapter factory — creates the right adapter based on config."""

from __future__ import annotations

from src.config import settings
from src.ports.backend_port import BackendPort


def create_backend(db_path: str | None = None) -> BackendPort:
    """Return the backend adapter matching the BACKEND_PROVIDER setting.

    Args:
        db_path: Overrides DATABASE_PATH for the sqlite provider.
    """
    provider = settings.BACKEND_PROVIDER.lower()

    if provider == "supabase":
        from src.adapters.supabase_backend import SupabaseBackend

        return SupabaseBackend()

    if provider == "sqlite":
        from src.adapters.sqlite_backend import SQLiteBackend

        return SQLiteBackend(db_path=db_path)

    raise ValueError(f"Unknown BACKEND_PROVIDER: {provider!r}")
