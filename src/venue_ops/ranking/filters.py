"""Filtering and sorting for the three band views.

Filters are independent predicates; applying them in any order yields the
same set. Sorts are stable, so ties keep the order bands were fetched in.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from venue_ops.db.models import (
    BandRecord,
    BookAgain,
    BookingStatus,
    PlayedState,
    Recommendation,
    Slot,
    ViewStats,
)

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class BandSort(str, Enum):
    SCORE = "score"
    NAME = "name"
    FOLLOWERS = "followers"
    RECENT = "recent"
    VIBE = "vibe"
    ATTENDANCE = "attendance"
    PROFITABILITY = "profitability"


class VibeBucket(str, Enum):
    FIVE = "5-star"
    FOUR = "4-star"
    THREE = "3-star"
    LOW = "1-2-star"


class BandQuery(BaseModel):
    """User-selected filters and sort for a band list. None means "all"."""

    search: str = ""
    recommendation: Recommendation | None = None
    booking_status: BookingStatus | None = None
    # History view
    vibe: VibeBucket | None = None
    would_book_again: BookAgain | None = None
    slot: Slot | None = None
    # Rejected view
    reason: str | None = None

    sort: BandSort = BandSort.SCORE


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def matches_vibe(band: BandRecord, bucket: VibeBucket) -> bool:
    vibe = band.overall_vibe
    if bucket is VibeBucket.LOW:
        return bool(vibe) and vibe <= 2
    return vibe == int(bucket.value[0])


def matches_reason(band: BandRecord, reason: str) -> bool:
    needle = reason.lower()
    return any(needle in r.lower() for r in band.rejection_reasons)


def predicates(query: BandQuery) -> list[Callable[[BandRecord], bool]]:
    """One predicate per active filter in ``query``."""
    preds: list[Callable[[BandRecord], bool]] = []
    if query.search:
        needle = query.search.lower()
        preds.append(lambda b: needle in b.name.lower())
    if query.recommendation is not None:
        preds.append(lambda b: b.recommendation == query.recommendation)
    if query.booking_status is not None:
        preds.append(lambda b: b.booking_status == query.booking_status)
    if query.vibe is not None:
        preds.append(lambda b: matches_vibe(b, query.vibe))
    if query.would_book_again is not None:
        preds.append(lambda b: b.would_book_again == query.would_book_again)
    if query.slot is not None:
        preds.append(lambda b: b.slot == query.slot)
    if query.reason:
        preds.append(lambda b: matches_reason(b, query.reason))
    return preds


def filter_bands(bands: list[BandRecord], query: BandQuery) -> list[BandRecord]:
    result = bands
    for pred in predicates(query):
        result = [b for b in result if pred(b)]
    return result


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


def profitability(band: BandRecord) -> float:
    """Attendance per dollar, scaled to 0-100. 0 when data is missing."""
    if not band.attendance or not band.booking_cost or band.booking_cost <= 0:
        return 0.0
    return min(band.attendance / band.booking_cost * 10, 100.0)


def _timestamp(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


def _recent_key(band: BandRecord) -> float:
    # Rejected bands sort on rejection date only, everyone else on performance date
    if band.has_played is PlayedState.REMOVED:
        return _timestamp(band.date_rejected)
    return _timestamp(band.most_recent_performance)


_SORT_KEYS: dict[BandSort, Callable[[BandRecord], object]] = {
    BandSort.SCORE: lambda b: -b.overall_score,
    BandSort.NAME: lambda b: b.name.casefold(),
    BandSort.FOLLOWERS: lambda b: -b.spotify_followers,
    BandSort.RECENT: lambda b: -_recent_key(b),
    BandSort.VIBE: lambda b: -(b.overall_vibe or 0),
    BandSort.ATTENDANCE: lambda b: -(b.attendance or 0),
    BandSort.PROFITABILITY: lambda b: -profitability(b),
}


def sort_bands(bands: list[BandRecord], sort: BandSort) -> list[BandRecord]:
    """Stable sort; descending for numeric keys, ascending for name."""
    return sorted(bands, key=_SORT_KEYS[sort])


def query_bands(bands: list[BandRecord], query: BandQuery) -> list[BandRecord]:
    return sort_bands(filter_bands(bands, query), query.sort)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def view_stats(bands: list[BandRecord]) -> ViewStats:
    """Counts for the summary strip plus the latest analysis date."""
    analyzed = [b.date_analyzed for b in bands if b.date_analyzed]
    last_refresh = max(analyzed, key=_timestamp) if analyzed else None
    return ViewStats(
        total=len(bands),
        book_soon=sum(1 for b in bands if b.recommendation is Recommendation.BOOK_SOON),
        strong_consider=sum(
            1 for b in bands if b.recommendation is Recommendation.STRONG_CONSIDER
        ),
        booked=sum(1 for b in bands if b.booking_status is BookingStatus.BOOKED),
        last_refresh=last_refresh,
    )
