"""Field-mapping table from external record keys to BandRecord fields.

Each canonical field lists the external keys that may carry it, in order
of preference. ``extract`` walks the candidates and takes the first
truthy value, then coerces it according to the field kind.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from venue_ops.records.normalize import normalize, to_flag, to_list, to_number


class Kind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    FLAG = "flag"
    LIST = "list"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    candidates: tuple[str, ...]
    kind: Kind = Kind.TEXT
    default: Any = None


BAND_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("id", ("id", "recordId")),
    FieldSpec("name", ("Band Name", "bandName"), default="Unknown"),
    FieldSpec("overall_score", ("Overall Score", "overallScore"), Kind.NUMBER, 0),
    # Ranking components
    FieldSpec("growth_momentum", ("Growth Momentum Score", "growthMomentumScore"), Kind.NUMBER, 0),
    FieldSpec("fan_engagement", ("Fan Engagement Score", "fanEngagementScore"), Kind.NUMBER, 0),
    FieldSpec(
        "digital_popularity",
        ("Digital Popularity Score", "Digital Popularity", "digitalPopularityScore"),
        Kind.NUMBER,
        0,
    ),
    FieldSpec("live_potential", ("Live Potential Score", "livePotentialScore"), Kind.NUMBER, 0),
    FieldSpec("venue_fit", ("Venue Fit Score", "venueFitScore"), Kind.NUMBER, 0),
    FieldSpec("geographic_fit", ("Geographic Fit Score", "geographicFitScore"), Kind.NUMBER, 0),
    FieldSpec(
        "cost_effectiveness",
        ("Cost Effectiveness Score", "costEffectivenessScore"),
        Kind.NUMBER,
        0,
    ),
    # Categorical
    FieldSpec("recommendation", ("Recommendation Level", "Recommendation", "recommendation"), default="MAYBE"),
    FieldSpec("booking_status", ("Booking Status", "bookingStatus")),
    FieldSpec("has_played", ("Has Played?", "hasPlayed"), default="No"),
    FieldSpec("confidence_level", ("Draw Confidence Level", "confidenceLevel"), default="Medium"),
    # Platform metrics
    FieldSpec("spotify_followers", ("Spotify Followers", "spotifyFollowers"), Kind.NUMBER, 0),
    FieldSpec(
        "spotify_popularity",
        ("Spotify Popularity Score", "Spotify Popularity", "spotifyPopularity"),
        Kind.NUMBER,
        0,
    ),
    FieldSpec("spotify_url", ("Spotify Profile URL", "Spotify URL", "spotifyUrl"), default=""),
    FieldSpec("youtube_subscribers", ("Youtube Subscribers", "youtubeSubscribers"), Kind.NUMBER, 0),
    FieldSpec("youtube_views", ("Youtube Views", "youtubeViews"), Kind.NUMBER, 0),
    FieldSpec("youtube_video_count", ("Youtube Video Count", "youtubeVideoCount"), Kind.NUMBER, 0),
    FieldSpec(
        "average_views_per_video",
        ("Average Views Per Video", "averageViewsPerVideo"),
        Kind.NUMBER,
        0,
    ),
    FieldSpec("youtube_has_vevo", ("Youtube has VEVO", "youtubeHasVevo"), Kind.FLAG, False),
    FieldSpec("ai_cost_estimate", ("AI Cost Estimate", "aiCostEstimate"), Kind.NUMBER, 0),
    # Free text
    FieldSpec("estimated_draw", ("Estimated Audience Draw", "Estimated Draw", "estimatedDraw"), default="Unknown"),
    FieldSpec("key_strengths", ("Key Strengths", "keyStrengths"), default="No strengths identified yet"),
    FieldSpec("main_concerns", ("Main Concerns", "Concerns", "mainConcerns"), default="No concerns identified yet"),
    FieldSpec("last_updated", ("Last Updated", "lastUpdated"), default=""),
    FieldSpec("date_analyzed", ("Date Analyzed", "dateAnalyzed"), default=""),
    FieldSpec("ai_analysis_notes", ("AI Analysis Notes", "aiAnalysisNotes"), default="No analysis notes available"),
    # History view
    FieldSpec("overall_vibe", ("Overall Vibe", "overallVibe"), Kind.NUMBER, 0),
    FieldSpec("attendance", ("Overall Attendance", "overallAttendance"), Kind.NUMBER, 0),
    FieldSpec("booking_cost", ("Band Booking Cost", "bandBookingCost"), Kind.NUMBER, 0),
    FieldSpec("would_book_again", ("Would Book Again?", "wouldBookAgain")),
    FieldSpec("slot", ("Opener/Headliner?", "openerHeadliner")),
    FieldSpec(
        "most_recent_performance",
        ("Most Recent Performance Date", "mostRecentPerformanceDate"),
    ),
    # Rejected view
    FieldSpec(
        "rejection_reasons",
        ("Reasons for Removal", "reasonsForRemoval", "rejectionReasons"),
        Kind.LIST,
    ),
    FieldSpec("date_rejected", ("Date Rejected", "dateRejected", "Date Analyzed", "dateAnalyzed")),
    FieldSpec("rejected_by", ("Rejected By", "rejectedBy")),
)


def first_present(record: Mapping[str, Any], candidates: tuple[str, ...]) -> Any:
    """Return the first truthy value among ``candidates``, else None."""
    for key in candidates:
        value = record.get(key)
        if value:
            return value
    return None


def extract(record: Mapping[str, Any], spec: FieldSpec) -> Any:
    """Read one canonical field from a raw record."""
    raw = first_present(record, spec.candidates)
    if spec.kind is Kind.NUMBER:
        return to_number(raw, spec.default or 0)
    if spec.kind is Kind.FLAG:
        return to_flag(raw)
    if spec.kind is Kind.LIST:
        return to_list(raw)
    value = normalize(raw, spec.default)
    if value is None or isinstance(value, str):
        return value
    return str(value)


def extract_all(record: Mapping[str, Any], specs: tuple[FieldSpec, ...] = BAND_FIELDS) -> dict[str, Any]:
    """Apply every spec to ``record``; keys are canonical field names."""
    return {spec.name: extract(record, spec) for spec in specs}
