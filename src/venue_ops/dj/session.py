"""DJ dashboard view model: requests, cooldown and blacklist.

Mutations are optimistic. Local lists change first, then the server is
asked to confirm; a failed confirmation puts the lists back and sets
``error``. Nothing retries on its own.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from venue_ops.db.models import BlacklistedSong, CooldownSong, DjSnapshot, SongRequest
from venue_ops.dj.optimistic import OptimisticCommand, OptimisticExecutor
from venue_ops.dj.songs import (
    COOLDOWN_DURATION_MS,
    cooldown_remaining,
    format_countdown,
    now_ms,
    same_song,
    song_id,
)
from venue_ops.errors import RemoteCallError
from venue_ops.remote.api import VenueApiClient

logger = logging.getLogger(__name__)


def _remove_identity(items: list, item: object) -> None:
    """Remove ``item`` by identity; equal-but-distinct entries are kept."""
    for i, existing in enumerate(items):
        if existing is item:
            del items[i]
            return


class DjQueue:
    """Client-side owner of the three song collections for one session."""

    def __init__(
        self,
        api: VenueApiClient,
        *,
        venue: str = "",
        clock: Callable[[], int] = now_ms,
        cooldown_ms: int = COOLDOWN_DURATION_MS,
    ) -> None:
        self._api = api
        self._venue = venue
        self._clock = clock
        self._cooldown_ms = cooldown_ms
        self._closed = False
        self._executor = OptimisticExecutor(
            on_error=self._set_error, is_active=lambda: not self._closed
        )

        self.requests: list[SongRequest] = []
        self.cooldown: list[CooldownSong] = []
        self.blacklist: list[BlacklistedSong] = []
        self.error: str | None = None
        self.last_refresh: datetime | None = None
        # song id -> outcome of a blacklist call still waiting on the server
        self._blacklist_in_flight: dict[str, asyncio.Future[bool]] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop reacting to late remote results."""
        self._closed = True

    def dismiss_error(self) -> None:
        self.error = None

    def _set_error(self, message: str) -> None:
        self.error = message

    def load(self, snapshot: DjSnapshot) -> None:
        self.requests = list(snapshot.available_requests)
        self.cooldown = list(snapshot.active_cooldown)
        self.blacklist = list(snapshot.blacklist)
        self.last_refresh = datetime.now()

    async def refresh(self) -> bool:
        """Replace local state with the server's view."""
        self.error = None
        try:
            snapshot = await self._api.fetch_dj_snapshot()
        except RemoteCallError as exc:
            if self._closed:
                return False
            logger.warning("Loading DJ data failed: %s", exc)
            self.error = "Failed to load DJ data"
            return False
        if self._closed:
            return False
        self.load(snapshot)
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def play_song(self, request_id: str) -> bool:
        """Move a request to cooldown for ``cooldown_ms``."""
        request = next((r for r in self.requests if r.id == request_id), None)
        if request is None:
            logger.debug("play_song: no local request %s", request_id)
            return False

        index = self.requests.index(request)
        played = CooldownSong(
            id=request.id,
            title=request.title,
            artist=request.artist,
            cooldown_until=self._clock() + self._cooldown_ms,
            played_at=datetime.now().isoformat(),
        )

        def forward() -> None:
            _remove_identity(self.requests, request)
            self.cooldown.append(played)

        def inverse() -> None:
            _remove_identity(self.cooldown, played)
            self.requests.insert(min(index, len(self.requests)), request)

        return await self._executor.run(
            OptimisticCommand(
                name=f"play {request.id}",
                forward=forward,
                inverse=inverse,
                remote=lambda: self._api.play_song(played),
                error_message="Failed to play song",
            )
        )

    async def add_to_blacklist(self, title: str, artist: str) -> bool:
        """Blacklist a song and drop any pending request for it."""
        sid = song_id(artist, title)
        already = any(s.id == sid for s in self.blacklist)
        removed = [
            (i, r)
            for i, r in enumerate(self.requests)
            if r.id == sid or same_song(r.title, r.artist, title, artist)
        ]
        if already and not removed:
            pending = self._blacklist_in_flight.get(sid)
            if pending is not None:
                return await asyncio.shield(pending)
            return True

        entry = BlacklistedSong(
            id=sid, title=title, artist=artist, added_at=datetime.now().isoformat()
        )

        def forward() -> None:
            for _, r in removed:
                _remove_identity(self.requests, r)
            if not already:
                self.blacklist.append(entry)

        def inverse() -> None:
            if not already:
                _remove_identity(self.blacklist, entry)
            for i, r in removed:
                self.requests.insert(min(i, len(self.requests)), r)

        command = OptimisticCommand(
            name=f"blacklist {sid}",
            forward=forward,
            inverse=inverse,
            remote=lambda: self._api.add_blacklist(entry),
            error_message="Failed to blacklist song",
        )
        if already:
            return await self._executor.run(command)

        outcome = asyncio.get_running_loop().create_future()
        self._blacklist_in_flight[sid] = outcome
        ok = False
        try:
            ok = await self._executor.run(command)
            return ok
        finally:
            del self._blacklist_in_flight[sid]
            outcome.set_result(ok)

    async def remove_from_blacklist(self, blacklisted_id: str) -> bool:
        entry = next((s for s in self.blacklist if s.id == blacklisted_id), None)
        if entry is None:
            return False
        index = self.blacklist.index(entry)

        def forward() -> None:
            _remove_identity(self.blacklist, entry)

        def inverse() -> None:
            self.blacklist.insert(min(index, len(self.blacklist)), entry)

        return await self._executor.run(
            OptimisticCommand(
                name=f"unblacklist {blacklisted_id}",
                forward=forward,
                inverse=inverse,
                remote=lambda: self._api.remove_blacklist(blacklisted_id),
                error_message="Failed to remove from blacklist",
            )
        )

    async def request_song(self, title: str, artist: str) -> bool:
        """Submit a listener request. Not optimistic: the server may refuse it."""
        sid = song_id(artist, title)
        try:
            await self._api.add_request(sid, title, artist, self._venue)
        except RemoteCallError as exc:
            if not self._closed:
                self.error = str(exc) or "Failed to add song request"
            return False
        if self._closed:
            return False
        existing = next((r for r in self.requests if r.id == sid), None)
        if existing is not None:
            existing.request_count += 1
        else:
            self.requests.append(SongRequest(id=sid, title=title, artist=artist))
        return True

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def sorted_requests(self) -> list[SongRequest]:
        """Most requested first."""
        return sorted(self.requests, key=lambda r: -r.request_count)

    def sorted_cooldown(self) -> list[CooldownSong]:
        """Most recently played first."""
        return sorted(self.cooldown, key=lambda s: -s.cooldown_until)

    def sorted_blacklist(self) -> list[BlacklistedSong]:
        return sorted(self.blacklist, key=lambda s: s.title.casefold())

    def countdowns(self, now: int | None = None) -> dict[str, str]:
        """``HH:MM:SS`` left per cooldown entry; recomputed on every tick."""
        current = self._clock() if now is None else now
        return {
            s.id: format_countdown(cooldown_remaining(s.cooldown_until, current))
            for s in self.cooldown
        }
