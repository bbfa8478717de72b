"""Pydantic v2 data models for bands, DJ song queues and event finance."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Band enums
# ---------------------------------------------------------------------------

class Recommendation(str, Enum):
    BOOK_SOON = "BOOK SOON"
    STRONG_CONSIDER = "STRONG CONSIDER"
    MAYBE = "MAYBE"
    PASS = "PASS"


class BookingStatus(str, Enum):
    NOT_CONTACTED = "Not Contacted"
    CONTACTED = "Contacted"
    NEGOTIATING = "Negotiating"
    BOOKED = "Booked"
    PASSED = "Passed"


class PlayedState(str, Enum):
    """Which of the three band views a record belongs to."""

    NO = "No"
    YES = "Yes"
    REMOVED = "Band Removed"


class ConfidenceLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class BookAgain(str, Enum):
    YES = "Yes"
    NO = "No"
    MAYBE = "Maybe"


class Slot(str, Enum):
    OPENING = "Opening"
    HEADLINER = "Headliner"


# ---------------------------------------------------------------------------
# Band record (central entity)
# ---------------------------------------------------------------------------

class BandRecord(BaseModel):
    """A normalized band record as shown on the booking views.

    Component scores are nominally 0-100 but are never clamped; missing or
    unparseable values arrive here as 0.
    """

    id: str
    name: str = "Unknown"
    overall_score: int = 0

    # Weighted ranking components
    growth_momentum: float = 0.0
    fan_engagement: float = 0.0
    digital_popularity: float = 0.0
    live_potential: float = 0.0
    venue_fit: float = 0.0
    geographic_fit: float = 0.0
    # Display only, not part of any ranking profile
    cost_effectiveness: float = 0.0

    recommendation: Recommendation = Recommendation.MAYBE
    booking_status: BookingStatus = BookingStatus.NOT_CONTACTED
    has_played: PlayedState = PlayedState.NO

    spotify_followers: float = 0.0
    spotify_popularity: float = 0.0
    spotify_url: str = ""
    youtube_subscribers: float = 0.0
    youtube_views: float = 0.0
    youtube_video_count: float = 0.0
    average_views_per_video: float = 0.0
    youtube_has_vevo: bool = False
    ai_cost_estimate: float | None = None
    estimated_draw: str = "Unknown"
    key_strengths: str = "No strengths identified yet"
    main_concerns: str = "No concerns identified yet"
    last_updated: str = ""
    date_analyzed: str = ""
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    ai_analysis_notes: str = "No analysis notes available"

    # History view
    overall_vibe: int | None = None
    attendance: float | None = None
    booking_cost: float | None = None
    would_book_again: BookAgain | None = None
    slot: Slot | None = None
    most_recent_performance: str | None = None

    # Rejected view
    rejection_reasons: list[str] = Field(default_factory=list)
    date_rejected: str | None = None
    rejected_by: str | None = None


class ViewStats(BaseModel):
    """Headline counts shown under a band list."""

    total: int = 0
    book_soon: int = 0
    strong_consider: int = 0
    booked: int = 0
    last_refresh: str | None = None


# ---------------------------------------------------------------------------
# Band status actions
# ---------------------------------------------------------------------------

class PerformanceReport(BaseModel):
    """Post-show report sent when a band is marked as played."""

    overall_vibe: int = Field(3, ge=1, le=5)
    attendance: int = Field(0, ge=0)
    booking_cost: float = Field(0.0, ge=0.0)
    would_book_again: BookAgain = BookAgain.MAYBE
    slot: Slot = Slot.OPENING


class RemovalReport(BaseModel):
    """Reasons recorded when a band is taken off the inquiry list."""

    reasons: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# DJ song queue
# ---------------------------------------------------------------------------

class SongRequest(BaseModel):
    """A listener request waiting in the DJ queue."""

    id: str
    title: str
    artist: str
    request_count: int = 1
    created_at: str | None = None


class CooldownSong(BaseModel):
    """A recently played song; not playable again before ``cooldown_until``."""

    id: str
    title: str
    artist: str
    cooldown_until: int = Field(description="Epoch milliseconds")
    played_at: str | None = None


class BlacklistedSong(BaseModel):
    """A song the DJ refuses to play until it is explicitly removed."""

    id: str
    title: str
    artist: str
    added_at: str | None = None


class QueueStats(BaseModel):
    requests: int = 0
    total_requests: int = 0
    cooldown: int = 0
    blacklist: int = 0


class DjSnapshot(BaseModel):
    """All three song collections as returned by ``GET /dj/requests``."""

    available_requests: list[SongRequest] = Field(default_factory=list)
    blacklist: list[BlacklistedSong] = Field(default_factory=list)
    active_cooldown: list[CooldownSong] = Field(default_factory=list)
    stats: QueueStats = Field(default_factory=QueueStats)


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------

class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class FinancialInputs(BaseModel):
    """Per-event inputs for the break-even calculator (money in dollars)."""

    expected_attendance: int = Field(0, ge=0)
    ticket_price: float = Field(15.0, ge=0.0)
    venue_ticket_split_pct: float = Field(0.0, ge=0.0, le=100.0)
    cover_charge: float = Field(10.0, ge=0.0)
    bar_revenue: float = Field(25.0, ge=0.0, description="Per guest")
    merchandise_revenue: float = Field(5.0, ge=0.0, description="Per guest")
    bar_cogs_pct: float = Field(30.0, ge=0.0, le=100.0)
    merchandise_cogs_pct: float = Field(40.0, ge=0.0, le=100.0)
    staff_costs: float = Field(800.0, ge=0.0)
    utilities_costs: float = Field(200.0, ge=0.0)
    facility_costs: float = Field(300.0, ge=0.0)
    marketing_costs: float = Field(150.0, ge=0.0)
    other_fixed_costs: float = Field(100.0, ge=0.0)
    band_guarantee: float = Field(0.0, ge=0.0)


class PartyResults(BaseModel):
    """Revenue and profit for one side of the deal (venue or act)."""

    total_revenue: float
    total_cogs: float
    total_fixed_costs: float
    gross_profit: float
    net_profit: float
    revenue_per_guest: float
    cost_per_guest: float
    profit_per_guest: float


class FinancialResults(BaseModel):
    venue: PartyResults
    act: PartyResults
    break_even_attendance: int
    profit_margin: float
    risk_level: RiskLevel
    recommendation: str


class Scenario(BaseModel):
    """A named, saved calculator run."""

    id: str
    name: str
    inputs: FinancialInputs
    results: FinancialResults
    created_at: datetime = Field(default_factory=datetime.now)
