"""Song identity and cooldown timing helpers."""

from __future__ import annotations

import re
import time

COOLDOWN_DURATION_MS = 2 * 60 * 60 * 1000  # 2 hours

_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Lowercase, trim, and collapse whitespace runs into single hyphens."""
    return _WHITESPACE.sub("-", text.strip().lower())


def song_id(artist: str, title: str) -> str:
    """Canonical id for a song: ``"{artist-slug}-{title-slug}"``.

    >>> song_id("Alan Jackson", "Remember When")
    'alan-jackson-remember-when'
    """
    return f"{slugify(artist)}-{slugify(title)}"


def same_song(title_a: str, artist_a: str, title_b: str, artist_b: str) -> bool:
    """Case-insensitive match on both title and artist."""
    return (
        title_a.strip().lower() == title_b.strip().lower()
        and artist_a.strip().lower() == artist_b.strip().lower()
    )


def now_ms() -> int:
    return int(time.time() * 1000)


def cooldown_until(now: int | None = None, duration_ms: int = COOLDOWN_DURATION_MS) -> int:
    return (now_ms() if now is None else now) + duration_ms


def cooldown_remaining(until_ms: int, now: int | None = None) -> int:
    """Milliseconds left on a cooldown, never negative."""
    current = now_ms() if now is None else now
    return max(until_ms - current, 0)


def is_cooling_down(until_ms: int, now: int | None = None) -> bool:
    return cooldown_remaining(until_ms, now) > 0


def format_countdown(remaining_ms: int) -> str:
    """Render milliseconds as ``HH:MM:SS``; ``00:00:00`` once expired."""
    if remaining_ms <= 0:
        return "00:00:00"
    total_seconds = remaining_ms // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
