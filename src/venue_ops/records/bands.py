"""Build BandRecords from raw workflow records and split them into views."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from venue_ops.db.models import (
    BandRecord,
    BookAgain,
    BookingStatus,
    ConfidenceLevel,
    PlayedState,
    Recommendation,
    Slot,
)
from venue_ops.dj.songs import slugify
from venue_ops.records.fields import extract_all
from venue_ops.records.normalize import round_half_up

logger = logging.getLogger(__name__)


class View(str, Enum):
    DISCOVERY = "discovery"
    HISTORY = "history"
    REJECTED = "rejected"


# Older base tables used different status labels.
_STATUS_ALIASES: dict[str, BookingStatus] = {
    "new": BookingStatus.NOT_CONTACTED,
    "declined": BookingStatus.PASSED,
}

# Status assumed when the record carries none, by view.
_DEFAULT_STATUS: dict[PlayedState, BookingStatus] = {
    PlayedState.NO: BookingStatus.NOT_CONTACTED,
    PlayedState.YES: BookingStatus.BOOKED,
    PlayedState.REMOVED: BookingStatus.PASSED,
}


def parse_played_state(value: Any) -> PlayedState:
    """``"Yes"`` -> YES, ``"Band Removed"`` -> REMOVED, anything else -> NO."""
    text = str(value or "").strip().lower()
    if text == "yes":
        return PlayedState.YES
    if text == "band removed":
        return PlayedState.REMOVED
    return PlayedState.NO


def _enum_or(enum_cls: type[Enum], value: Any, default: Any) -> Any:
    if value is None:
        return default
    text = str(value).strip()
    for member in enum_cls:
        if member.value.lower() == text.lower():
            return member
    return default


def parse_recommendation(value: Any) -> Recommendation:
    text = str(value or "").replace("_", " ")
    return _enum_or(Recommendation, text, Recommendation.MAYBE)


def parse_booking_status(value: Any, played: PlayedState = PlayedState.NO) -> BookingStatus:
    default = _DEFAULT_STATUS[played]
    if value is None:
        return default
    alias = _STATUS_ALIASES.get(str(value).strip().lower())
    if alias is not None:
        return alias
    return _enum_or(BookingStatus, str(value).replace("_", " "), default)


def band_from_raw(record: Mapping[str, Any]) -> BandRecord:
    """Normalize one raw record. Never raises on odd field shapes."""
    fields = extract_all(record)
    band_id = fields["id"] or f"band-{slugify(fields['name'])}"
    if not fields["id"]:
        logger.warning("Record for %r has no id, using %s", fields["name"], band_id)
    played = parse_played_state(fields["has_played"])
    vibe = int(fields["overall_vibe"])

    return BandRecord(
        id=band_id,
        name=fields["name"],
        overall_score=round_half_up(fields["overall_score"]),
        growth_momentum=fields["growth_momentum"],
        fan_engagement=fields["fan_engagement"],
        digital_popularity=fields["digital_popularity"],
        live_potential=fields["live_potential"],
        venue_fit=fields["venue_fit"],
        geographic_fit=fields["geographic_fit"],
        cost_effectiveness=fields["cost_effectiveness"],
        recommendation=parse_recommendation(fields["recommendation"]),
        booking_status=parse_booking_status(fields["booking_status"], played),
        has_played=played,
        spotify_followers=fields["spotify_followers"],
        spotify_popularity=fields["spotify_popularity"],
        spotify_url=fields["spotify_url"],
        youtube_subscribers=fields["youtube_subscribers"],
        youtube_views=fields["youtube_views"],
        youtube_video_count=fields["youtube_video_count"],
        average_views_per_video=fields["average_views_per_video"],
        youtube_has_vevo=fields["youtube_has_vevo"],
        ai_cost_estimate=fields["ai_cost_estimate"] or None,
        estimated_draw=fields["estimated_draw"],
        key_strengths=fields["key_strengths"],
        main_concerns=fields["main_concerns"],
        last_updated=fields["last_updated"],
        date_analyzed=fields["date_analyzed"],
        confidence_level=_enum_or(
            ConfidenceLevel, fields["confidence_level"], ConfidenceLevel.MEDIUM
        ),
        ai_analysis_notes=fields["ai_analysis_notes"],
        overall_vibe=vibe if vibe > 0 else None,
        attendance=fields["attendance"] or None,
        booking_cost=fields["booking_cost"] or None,
        would_book_again=_enum_or(BookAgain, fields["would_book_again"], None),
        slot=_enum_or(Slot, fields["slot"], None),
        most_recent_performance=fields["most_recent_performance"],
        rejection_reasons=fields["rejection_reasons"],
        date_rejected=fields["date_rejected"],
        rejected_by=fields["rejected_by"],
    )


def view_of(band: BandRecord) -> View:
    if band.has_played is PlayedState.YES:
        return View.HISTORY
    if band.has_played is PlayedState.REMOVED:
        return View.REJECTED
    return View.DISCOVERY


def partition(bands: Iterable[BandRecord]) -> dict[View, list[BandRecord]]:
    """Split bands into the three disjoint views, keeping input order."""
    views: dict[View, list[BandRecord]] = {view: [] for view in View}
    for band in bands:
        views[view_of(band)].append(band)
    return views


def bands_from_payload(records: Iterable[Mapping[str, Any]]) -> list[BandRecord]:
    bands = [band_from_raw(r) for r in records]
    logger.debug("Normalized %d band records", len(bands))
    return bands
