"""Server-side system of record for the DJ song collections.

Both stores enforce that a song id lives in at most one of the active
requests, the unexpired cooldowns and the blacklist, and that a song being
played leaves the request list. Expired cooldowns are dropped whenever a
snapshot is read.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

from venue_ops.db.models import (
    BlacklistedSong,
    CooldownSong,
    DjSnapshot,
    QueueStats,
    SongRequest,
)
from venue_ops.dj.songs import now_ms
from venue_ops.errors import SongConflictError

logger = logging.getLogger(__name__)


def _build_snapshot(
    requests: list[SongRequest],
    blacklist: list[BlacklistedSong],
    cooldown: list[CooldownSong],
) -> DjSnapshot:
    return DjSnapshot(
        available_requests=requests,
        blacklist=blacklist,
        active_cooldown=cooldown,
        stats=QueueStats(
            requests=len(requests),
            total_requests=sum(r.request_count for r in requests),
            cooldown=len(cooldown),
            blacklist=len(blacklist),
        ),
    )


def _conflict(title: str, artist: str, reason: str) -> SongConflictError:
    return SongConflictError(f"'{title}' by {artist} is {reason}")


class SongStore(ABC):
    """Interface the web layer uses for requests, cooldowns and the blacklist."""

    @abstractmethod
    def snapshot(self) -> DjSnapshot:
        """All three collections, with expired cooldowns removed."""

    @abstractmethod
    def add_request(self, song_id: str, title: str, artist: str, venue: str = "") -> SongRequest:
        """Create a request or bump its count.

        Raises:
            SongConflictError: If the song is blacklisted or cooling down.
        """

    @abstractmethod
    def play_song(self, song_id: str, title: str, artist: str, cooldown_until: int) -> CooldownSong:
        """Put a song in cooldown and drop its pending request.

        Raises:
            SongConflictError: If the song is blacklisted or still cooling down.
        """

    @abstractmethod
    def add_blacklist(self, song_id: str, title: str, artist: str) -> BlacklistedSong:
        """Blacklist a song, dropping its request and cooldown entry."""

    @abstractmethod
    def remove_blacklist(self, song_id: str) -> bool:
        """Return True if an entry was removed."""


class InMemorySongStore(SongStore):
    """Dict-backed store, used by tests and throwaway runs."""

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._requests: dict[str, SongRequest] = {}
        self._cooldown: dict[str, CooldownSong] = {}
        self._blacklist: dict[str, BlacklistedSong] = {}

    def snapshot(self) -> DjSnapshot:
        now = self._clock()
        for sid in [s for s, c in self._cooldown.items() if c.cooldown_until <= now]:
            del self._cooldown[sid]
        return _build_snapshot(
            [r.model_copy() for r in self._requests.values()],
            [b.model_copy() for b in self._blacklist.values()],
            [c.model_copy() for c in self._cooldown.values()],
        )

    def _cooling_down(self, song_id: str) -> bool:
        entry = self._cooldown.get(song_id)
        return entry is not None and entry.cooldown_until > self._clock()

    def _check_available(self, song_id: str, title: str, artist: str) -> None:
        if song_id in self._blacklist:
            raise _conflict(title, artist, "blacklisted")
        if self._cooling_down(song_id):
            raise _conflict(title, artist, "cooling down")

    def add_request(self, song_id: str, title: str, artist: str, venue: str = "") -> SongRequest:
        self._check_available(song_id, title, artist)
        existing = self._requests.get(song_id)
        if existing is not None:
            existing.request_count += 1
            return existing.model_copy()
        request = SongRequest(
            id=song_id, title=title, artist=artist, created_at=datetime.now().isoformat()
        )
        self._requests[song_id] = request
        return request.model_copy()

    def play_song(self, song_id: str, title: str, artist: str, cooldown_until: int) -> CooldownSong:
        self._check_available(song_id, title, artist)
        self._requests.pop(song_id, None)
        song = CooldownSong(
            id=song_id,
            title=title,
            artist=artist,
            cooldown_until=cooldown_until,
            played_at=datetime.now().isoformat(),
        )
        self._cooldown[song_id] = song
        return song.model_copy()

    def add_blacklist(self, song_id: str, title: str, artist: str) -> BlacklistedSong:
        self._requests.pop(song_id, None)
        self._cooldown.pop(song_id, None)
        existing = self._blacklist.get(song_id)
        if existing is not None:
            return existing.model_copy()
        entry = BlacklistedSong(
            id=song_id, title=title, artist=artist, added_at=datetime.now().isoformat()
        )
        self._blacklist[song_id] = entry
        return entry.model_copy()

    def remove_blacklist(self, song_id: str) -> bool:
        return self._blacklist.pop(song_id, None) is not None


class SqliteSongStore(SongStore):
    """Store backed by the song tables of :class:`venue_ops.db.database.Database`."""

    def __init__(self, conn: sqlite3.Connection, clock: Callable[[], int] = now_ms) -> None:
        self._conn = conn
        self._clock = clock

    def snapshot(self) -> DjSnapshot:
        expired = self._conn.execute(
            "DELETE FROM cooldown_songs WHERE cooldown_until <= ?", (self._clock(),)
        ).rowcount
        self._conn.commit()
        if expired:
            logger.debug("Released %d songs from cooldown", expired)

        requests = [
            SongRequest(
                id=r["song_id"],
                title=r["title"],
                artist=r["artist"],
                request_count=r["request_count"],
                created_at=r["created_at"],
            )
            for r in self._conn.execute("SELECT * FROM song_requests ORDER BY created_at, rowid")
        ]
        blacklist = [
            BlacklistedSong(
                id=r["song_id"], title=r["title"], artist=r["artist"], added_at=r["added_at"]
            )
            for r in self._conn.execute("SELECT * FROM blacklist ORDER BY added_at, rowid")
        ]
        cooldown = [
            CooldownSong(
                id=r["song_id"],
                title=r["title"],
                artist=r["artist"],
                cooldown_until=r["cooldown_until"],
                played_at=r["played_at"],
            )
            for r in self._conn.execute("SELECT * FROM cooldown_songs ORDER BY cooldown_until")
        ]
        return _build_snapshot(requests, blacklist, cooldown)

    def _check_available(self, song_id: str, title: str, artist: str) -> None:
        if self._conn.execute(
            "SELECT 1 FROM blacklist WHERE song_id = ?", (song_id,)
        ).fetchone():
            raise _conflict(title, artist, "blacklisted")
        if self._conn.execute(
            "SELECT 1 FROM cooldown_songs WHERE song_id = ? AND cooldown_until > ?",
            (song_id, self._clock()),
        ).fetchone():
            raise _conflict(title, artist, "cooling down")

    def add_request(self, song_id: str, title: str, artist: str, venue: str = "") -> SongRequest:
        self._check_available(song_id, title, artist)
        self._conn.execute(
            """
            INSERT INTO song_requests (song_id, title, artist, venue, request_count, created_at)
            VALUES (?, ?, ?, ?, 1, ?)
            ON CONFLICT(song_id) DO UPDATE SET request_count = request_count + 1
            """,
            (song_id, title, artist, venue, datetime.now().isoformat()),
        )
        self._conn.commit()
        row = self._conn.execute(
            "SELECT * FROM song_requests WHERE song_id = ?", (song_id,)
        ).fetchone()
        return SongRequest(
            id=row["song_id"],
            title=row["title"],
            artist=row["artist"],
            request_count=row["request_count"],
            created_at=row["created_at"],
        )

    def play_song(self, song_id: str, title: str, artist: str, cooldown_until: int) -> CooldownSong:
        self._check_available(song_id, title, artist)
        played_at = datetime.now().isoformat()
        self._conn.execute("DELETE FROM song_requests WHERE song_id = ?", (song_id,))
        self._conn.execute(
            """
            INSERT OR REPLACE INTO cooldown_songs
                (song_id, title, artist, cooldown_until, played_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (song_id, title, artist, cooldown_until, played_at),
        )
        self._conn.commit()
        return CooldownSong(
            id=song_id,
            title=title,
            artist=artist,
            cooldown_until=cooldown_until,
            played_at=played_at,
        )

    def add_blacklist(self, song_id: str, title: str, artist: str) -> BlacklistedSong:
        self._conn.execute("DELETE FROM song_requests WHERE song_id = ?", (song_id,))
        self._conn.execute("DELETE FROM cooldown_songs WHERE song_id = ?", (song_id,))
        self._conn.execute(
            """
            INSERT OR IGNORE INTO blacklist (song_id, title, artist, added_at)
            VALUES (?, ?, ?, ?)
            """,
            (song_id, title, artist, datetime.now().isoformat()),
        )
        self._conn.commit()
        row = self._conn.execute(
            "SELECT * FROM blacklist WHERE song_id = ?", (song_id,)
        ).fetchone()
        return BlacklistedSong(
            id=row["song_id"], title=row["title"], artist=row["artist"], added_at=row["added_at"]
        )

    def remove_blacklist(self, song_id: str) -> bool:
        removed = self._conn.execute(
            "DELETE FROM blacklist WHERE song_id = ?", (song_id,)
        ).rowcount
        self._conn.commit()
        return removed > 0
