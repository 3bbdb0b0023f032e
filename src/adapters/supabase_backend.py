"""Supabase backend adapter — implements BackendPort over PostgREST.

Talks to the `events` table through the Supabase REST endpoint
(`/rest/v1/<table>`) with httpx. Every call is a single round trip;
there is no retry.
"""

from __future__ import annotations

import logging

import httpx

from src.ports.backend_port import BackendError

logger = logging.getLogger(__name__)


class SupabaseBackend:
    """PostgREST implementation of BackendPort."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        table: str | None = None,
        timeout: float | None = None,
    ) -> None:
        if url is None or api_key is None or table is None or timeout is None:
            from src.config import settings
            url = settings.SUPABASE_URL if url is None else url
            api_key = settings.SUPABASE_KEY if api_key is None else api_key
            table = settings.EVENTS_TABLE if table is None else table
            timeout = settings.BACKEND_TIMEOUT_SECONDS if timeout is None else timeout

        self._endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._api_key = api_key
        self._timeout = timeout

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        action: str,
        params: dict | None = None,
        json: list | dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(
                    method,
                    self._endpoint,
                    params=params,
                    json=json,
                    headers=headers or self._headers(),
                )
                resp.raise_for_status()
                return resp
        except Exception as exc:
            logger.error("Supabase error (%s): %s", action, exc)
            raise BackendError(f"Failed to {action}: {exc}") from exc

    async def select_all(self) -> list[dict]:
        resp = await self._request(
            "GET", "load events",
            params={"select": "*", "order": "start_at.asc"},
        )
        try:
            rows = resp.json()
        except ValueError as exc:
            raise BackendError(f"Invalid JSON from backend: {exc}") from exc
        if not isinstance(rows, list):
            raise BackendError(f"Unexpected response shape: {type(rows).__name__}")
        return rows

    async def insert(self, row: dict) -> None:
        await self._request(
            "POST", "insert event",
            json=[row],
            headers=self._headers(Prefer="return=minimal"),
        )
        logger.info("Supabase event inserted: %s", row.get("id"))

    def _affected_rows(self, resp: httpx.Response, event_id: str) -> list:
        try:
            rows = resp.json()
        except ValueError as exc:
            raise BackendError(f"Invalid JSON from backend: {exc}") from exc
        if not rows:
            logger.error("Supabase event not found: %s", event_id)
            raise BackendError(f"Event {event_id} not found in backend")
        return rows

    async def update(self, event_id: str, patch: dict) -> None:
        resp = await self._request(
            "PATCH", "update event",
            params={"id": f"eq.{event_id}"},
            json=patch,
            headers=self._headers(Prefer="return=representation"),
        )
        self._affected_rows(resp, event_id)
        logger.info("Supabase event updated: %s (%s)", event_id, ", ".join(patch))

    async def delete(self, event_id: str) -> None:
        resp = await self._request(
            "DELETE", "delete event",
            params={"id": f"eq.{event_id}"},
            headers=self._headers(Prefer="return=representation"),
        )
        self._affected_rows(resp, event_id)
        logger.info("Supabase event deleted: %s", event_id)
