"""Ranking-focus profiles for the band discovery view.

Every profile weighs the same six components:
  growth_momentum, fan_engagement, digital_popularity,
  live_potential, venue_fit, geographic_fit

cost_effectiveness is shown on the band card but never ranked.
Weights in a profile must total 1.0 (+-0.01); a profile that does not
fails validation at construction time.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

COMPONENTS: tuple[str, ...] = (
    "growth_momentum",
    "fan_engagement",
    "digital_popularity",
    "live_potential",
    "venue_fit",
    "geographic_fit",
)

WEIGHT_SUM_TOLERANCE = 0.01


class RankingProfile(BaseModel):
    """Weights for one ranking focus."""

    key: str
    label: str
    description: str = ""
    growth_momentum: float = Field(ge=0.0, le=1.0)
    fan_engagement: float = Field(ge=0.0, le=1.0)
    digital_popularity: float = Field(ge=0.0, le=1.0)
    live_potential: float = Field(ge=0.0, le=1.0)
    venue_fit: float = Field(ge=0.0, le=1.0)
    geographic_fit: float = Field(ge=0.0, le=1.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _weights_sum_to_one(self) -> RankingProfile:
        total = self.total()
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            msg = f"weights for profile {self.key!r} sum to {total:.3f}, expected 1.0"
            raise ValueError(msg)
        return self

    def weights(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in COMPONENTS}

    def total(self) -> float:
        return sum(self.weights().values())


PROFILES: dict[str, RankingProfile] = {
    p.key: p
    for p in (
        RankingProfile(
            key="hidden_gems",
            label="Hidden Gems",
            description="Emerging artists before they blow up",
            growth_momentum=0.25,
            fan_engagement=0.25,
            digital_popularity=0.125,
            live_potential=0.125,
            venue_fit=0.17,
            geographic_fit=0.08,
        ),
        RankingProfile(
            key="genre_fit",
            label="Best Genre Fit",
            description="Artists that match the room's sound",
            growth_momentum=0.09,
            fan_engagement=0.23,
            digital_popularity=0.05,
            live_potential=0.18,
            venue_fit=0.36,
            geographic_fit=0.09,
        ),
        RankingProfile(
            key="proven_draw",
            label="Proven Draw",
            description="Established acts with ticket-selling history",
            growth_momentum=0.04,
            fan_engagement=0.22,
            digital_popularity=0.22,
            live_potential=0.26,
            venue_fit=0.13,
            geographic_fit=0.13,
        ),
        RankingProfile(
            key="local_buzz",
            label="Local Buzz",
            description="Regional artists with local connections",
            growth_momentum=0.21,
            fan_engagement=0.25,
            digital_popularity=0.04,
            live_potential=0.08,
            venue_fit=0.25,
            geographic_fit=0.17,
        ),
        RankingProfile(
            key="rising_stars",
            label="Rising Stars",
            description="Artists showing explosive growth",
            growth_momentum=0.38,
            fan_engagement=0.19,
            digital_popularity=0.24,
            live_potential=0.10,
            venue_fit=0.05,
            geographic_fit=0.04,
        ),
    )
}

DEFAULT_FOCUS = "hidden_gems"


def get_profile(focus: str) -> RankingProfile | None:
    """Look up a profile by key; None for unknown keys."""
    return PROFILES.get(focus)
