"""Async client for the venue-ops HTTP API, used by the view models."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from venue_ops.db.models import BlacklistedSong, CooldownSong, DjSnapshot
from venue_ops.errors import RemoteCallError
from venue_ops.records.normalize import unwrap_records
from venue_ops.web.serializers import parse_snapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class VenueApiClient:
    """Calls the app's own endpoints and raises RemoteCallError on failure.

    A call fails when the server is unreachable, answers non-2xx, or
    answers with ``"success": false``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "VenueApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _call(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=body)
        except httpx.RequestError as exc:
            logger.warning("%s %s unreachable: %s", method, path, exc)
            raise RemoteCallError(str(exc)) from exc

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None

        if response.is_error:
            detail = data.get("error") if isinstance(data, dict) else None
            raise RemoteCallError(
                detail or f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        if isinstance(data, dict) and data.get("success") is False:
            raise RemoteCallError(
                str(data.get("error") or "request rejected"),
                status_code=response.status_code,
            )
        return data

    # ------------------------------------------------------------------
    # Bands
    # ------------------------------------------------------------------

    async def fetch_bands(self) -> list[dict]:
        return unwrap_records(await self._call("GET", "/bands"))

    async def trigger_refresh(self, last_refresh: str | None = None) -> Any:
        return await self._call("POST", "/bands/refresh", {"lastRefresh": last_refresh})

    async def submit_band_action(self, payload: dict[str, Any]) -> Any:
        return await self._call("POST", "/bands/status", payload)

    # ------------------------------------------------------------------
    # DJ queue
    # ------------------------------------------------------------------

    async def fetch_dj_snapshot(self) -> DjSnapshot:
        return parse_snapshot(await self._call("GET", "/dj/requests"))

    async def add_request(self, song_id: str, title: str, artist: str, venue: str) -> Any:
        body = {
            "action": "requests.add",
            "data": {
                "songId": song_id,
                "title": title,
                "artist": artist,
                "venue": venue,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "requestCount": 1,
            },
        }
        return await self._call("POST", "/dj/requests", body)

    async def play_song(self, song: CooldownSong) -> Any:
        body = {
            "songId": song.id,
            "title": song.title,
            "artist": song.artist,
            "cooldownUntil": song.cooldown_until,
        }
        return await self._call("POST", "/dj/play-song", body)

    async def add_blacklist(self, song: BlacklistedSong) -> Any:
        body = {"songId": song.id, "title": song.title, "artist": song.artist}
        return await self._call("POST", "/dj/blacklist", body)

    async def remove_blacklist(self, song_id: str) -> Any:
        return await self._call("DELETE", "/dj/blacklist", {"songId": song_id})
