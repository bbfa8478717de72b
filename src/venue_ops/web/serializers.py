"""Convert models to and from the camelCase JSON used on the wire."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from venue_ops.db.models import (
    BandRecord,
    BlacklistedSong,
    CooldownSong,
    DjSnapshot,
    FinancialResults,
    PartyResults,
    QueueStats,
    Scenario,
    SongRequest,
    ViewStats,
)
from venue_ops.dj.songs import song_id as make_song_id
from venue_ops.records.normalize import normalize, to_number, to_text

# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------


def serialize_band(band: BandRecord) -> dict:
    return {
        "id": band.id,
        "name": band.name,
        "overallScore": band.overall_score,
        "growthMomentumScore": band.growth_momentum,
        "fanEngagementScore": band.fan_engagement,
        "digitalPopularityScore": band.digital_popularity,
        "livePotentialScore": band.live_potential,
        "venueFitScore": band.venue_fit,
        "geographicFitScore": band.geographic_fit,
        "costEffectivenessScore": band.cost_effectiveness,
        "recommendation": band.recommendation.value,
        "bookingStatus": band.booking_status.value,
        "hasPlayed": band.has_played.value,
        "spotifyFollowers": band.spotify_followers,
        "spotifyPopularity": band.spotify_popularity,
        "spotifyUrl": band.spotify_url,
        "youtubeSubscribers": band.youtube_subscribers,
        "youtubeViews": band.youtube_views,
        "youtubeVideoCount": band.youtube_video_count,
        "averageViewsPerVideo": band.average_views_per_video,
        "youtubeHasVevo": band.youtube_has_vevo,
        "aiCostEstimate": band.ai_cost_estimate,
        "estimatedDraw": band.estimated_draw,
        "keyStrengths": band.key_strengths,
        "mainConcerns": band.main_concerns,
        "lastUpdated": band.last_updated,
        "dateAnalyzed": band.date_analyzed,
        "confidenceLevel": band.confidence_level.value,
        "aiAnalysisNotes": band.ai_analysis_notes,
        "overallVibe": band.overall_vibe,
        "overallAttendance": band.attendance,
        "bandBookingCost": band.booking_cost,
        "wouldBookAgain": band.would_book_again.value if band.would_book_again else None,
        "openerHeadliner": band.slot.value if band.slot else None,
        "mostRecentPerformanceDate": band.most_recent_performance,
        "rejectionReasons": band.rejection_reasons,
        "dateRejected": band.date_rejected,
        "rejectedBy": band.rejected_by,
    }


def serialize_view_stats(stats: ViewStats) -> dict:
    return {
        "total": stats.total,
        "bookSoon": stats.book_soon,
        "strongConsider": stats.strong_consider,
        "booked": stats.booked,
        "lastRefresh": stats.last_refresh,
    }


# ---------------------------------------------------------------------------
# DJ songs
# ---------------------------------------------------------------------------


def serialize_request(song: SongRequest) -> dict:
    return {
        "id": song.id,
        "songId": song.id,
        "title": song.title,
        "artist": song.artist,
        "requestCount": song.request_count,
        "createdAt": song.created_at,
    }


def serialize_cooldown(song: CooldownSong) -> dict:
    return {
        "id": song.id,
        "songId": song.id,
        "title": song.title,
        "artist": song.artist,
        "cooldownUntil": song.cooldown_until,
        "playedAt": song.played_at,
    }


def serialize_blacklisted(song: BlacklistedSong) -> dict:
    return {
        "id": song.id,
        "songId": song.id,
        "title": song.title,
        "artist": song.artist,
        "addedAt": song.added_at,
    }


def serialize_snapshot(snapshot: DjSnapshot) -> dict:
    return {
        "availableRequests": [serialize_request(s) for s in snapshot.available_requests],
        "blacklist": [serialize_blacklisted(s) for s in snapshot.blacklist],
        "activeCooldown": [serialize_cooldown(s) for s in snapshot.active_cooldown],
        "stats": {
            "requests": snapshot.stats.requests,
            "totalRequests": snapshot.stats.total_requests,
            "cooldown": snapshot.stats.cooldown,
            "blacklist": snapshot.stats.blacklist,
        },
    }


def _identity(raw: Mapping[str, Any]) -> tuple[str, str, str]:
    title = to_text(raw.get("title"), "")
    artist = to_text(raw.get("artist"), "")
    sid = to_text(raw.get("songId") or raw.get("id"), "") or make_song_id(artist, title)
    return sid, title, artist


def _optional_text(value: Any) -> str | None:
    value = normalize(value, None)
    return None if value is None else str(value)


def parse_request(raw: Mapping[str, Any]) -> SongRequest:
    sid, title, artist = _identity(raw)
    return SongRequest(
        id=sid,
        title=title,
        artist=artist,
        request_count=int(to_number(raw.get("requestCount"), 1)) or 1,
        created_at=_optional_text(raw.get("createdAt")),
    )


def parse_cooldown(raw: Mapping[str, Any]) -> CooldownSong:
    sid, title, artist = _identity(raw)
    return CooldownSong(
        id=sid,
        title=title,
        artist=artist,
        cooldown_until=int(to_number(raw.get("cooldownUntil"))),
        played_at=_optional_text(raw.get("playedAt")),
    )


def parse_blacklisted(raw: Mapping[str, Any]) -> BlacklistedSong:
    sid, title, artist = _identity(raw)
    return BlacklistedSong(
        id=sid, title=title, artist=artist, added_at=_optional_text(raw.get("addedAt"))
    )


def _records(raw: Any) -> list[Mapping[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [r for r in raw if isinstance(r, Mapping)]


def parse_snapshot(payload: Any) -> DjSnapshot:
    """Read a ``GET /dj/requests`` body; unexpected shapes give empty lists."""
    data = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(data, Mapping):
        return DjSnapshot()
    requests = [parse_request(r) for r in _records(data.get("availableRequests"))]
    blacklist = [parse_blacklisted(r) for r in _records(data.get("blacklist"))]
    cooldown = [parse_cooldown(r) for r in _records(data.get("activeCooldown"))]
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


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------


def serialize_party(party: PartyResults) -> dict:
    return {
        "totalRevenue": party.total_revenue,
        "totalCOGS": party.total_cogs,
        "totalFixedCosts": party.total_fixed_costs,
        "grossProfit": party.gross_profit,
        "netProfit": party.net_profit,
        "revenuePerGuest": party.revenue_per_guest,
        "costPerGuest": party.cost_per_guest,
        "profitPerGuest": party.profit_per_guest,
    }


def serialize_results(results: FinancialResults) -> dict:
    return {
        "venue": serialize_party(results.venue),
        "act": serialize_party(results.act),
        "breakEvenAttendance": results.break_even_attendance,
        "profitMargin": results.profit_margin,
        "riskLevel": results.risk_level.value,
        "recommendation": results.recommendation,
    }


def serialize_scenario(scenario: Scenario) -> dict:
    return {
        "id": scenario.id,
        "name": scenario.name,
        "inputs": scenario.inputs.model_dump(),
        "results": serialize_results(scenario.results),
        "createdAt": scenario.created_at.isoformat(),
    }
