"""Weighted overall score for band records.

overall_score = round_half_up( sum(component_i * weight_i) )

over the six components of the selected ranking profile. Scores are
recomputed from the components every time; the value stored upstream is
never trusted.
"""

from __future__ import annotations

import logging

from venue_ops.db.models import BandRecord
from venue_ops.ranking.weights import COMPONENTS, RankingProfile, get_profile
from venue_ops.records.normalize import round_half_up

logger = logging.getLogger(__name__)


def weighted_sum(band: BandRecord, profile: RankingProfile) -> float:
    """Unrounded weighted sum of a band's components."""
    weights = profile.weights()
    return sum(getattr(band, name) * weights[name] for name in COMPONENTS)


def compute_overall_score(band: BandRecord, profile: RankingProfile) -> int:
    return round_half_up(weighted_sum(band, profile))


def apply_weights(bands: list[BandRecord], focus: str) -> list[BandRecord]:
    """Return copies of ``bands`` with ``overall_score`` recomputed.

    An unknown ``focus`` is not an error: the input list is returned as is.
    Input records are never mutated.
    """
    profile = get_profile(focus)
    if profile is None:
        logger.debug("Unknown ranking focus %r, leaving scores untouched", focus)
        return bands

    return [
        band.model_copy(update={"overall_score": compute_overall_score(band, profile)})
        for band in bands
    ]
