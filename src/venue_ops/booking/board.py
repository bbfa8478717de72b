"""Band booking view model: fetch, rank, filter and update band status."""

from __future__ import annotations

import logging
from datetime import datetime

from venue_ops.booking.actions import performance_payload, removal_payload
from venue_ops.booking.refresh import REFRESH_WAIT_SECONDS, RefreshCountdown
from venue_ops.db.models import BandRecord, PerformanceReport, RemovalReport, ViewStats
from venue_ops.errors import RemoteCallError
from venue_ops.ranking.filters import BandQuery, query_bands, view_stats
from venue_ops.ranking.scoring import apply_weights
from venue_ops.ranking.weights import DEFAULT_FOCUS
from venue_ops.records.bands import View, bands_from_payload, partition
from venue_ops.remote.api import VenueApiClient

logger = logging.getLogger(__name__)


class BandBoard:
    """Holds the three band views for one session.

    Scores are recomputed whenever the focus changes or data is fetched.
    Remote failures set ``error`` instead of raising.
    """

    def __init__(
        self,
        api: VenueApiClient,
        *,
        venue: str = "",
        focus: str = DEFAULT_FOCUS,
        refresh_seconds: int = REFRESH_WAIT_SECONDS,
        tick: float = 1.0,
    ) -> None:
        self._api = api
        self._venue = venue
        self._closed = False
        self.focus = focus
        self.views: dict[View, list[BandRecord]] = {view: [] for view in View}
        self.error: str | None = None
        self.loading = False
        self.last_refresh: datetime | None = None
        self.countdown = RefreshCountdown(self.fetch, seconds=refresh_seconds, tick=tick)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._closed = True
        self.countdown.cancel()

    def dismiss_error(self) -> None:
        self.error = None

    async def fetch(self) -> bool:
        """Load all bands and rank them with the current focus."""
        self.loading = True
        self.error = None
        try:
            records = await self._api.fetch_bands()
        except RemoteCallError as exc:
            if not self._closed:
                logger.warning("Fetching bands failed: %s", exc)
                self.error = "Failed to load band data"
            return False
        finally:
            self.loading = False
        if self._closed:
            return False

        bands = apply_weights(bands_from_payload(records), self.focus)
        self.views = partition(bands)
        self.last_refresh = datetime.now()
        logger.info(
            "Loaded %d bands (%d discovery, %d history, %d rejected)",
            len(bands),
            len(self.views[View.DISCOVERY]),
            len(self.views[View.HISTORY]),
            len(self.views[View.REJECTED]),
        )
        return True

    async def refresh(self) -> bool:
        """Ask the workflow to re-analyze, then re-fetch once the countdown ends."""
        self.error = None
        last = self.last_refresh.isoformat() if self.last_refresh else None
        try:
            await self._api.trigger_refresh(last)
        except RemoteCallError as exc:
            # The workflow often answers slowly or not at all; the countdown still runs
            logger.warning("Refresh trigger failed (non-critical): %s", exc)
        if self._closed:
            return False
        self.countdown.start()
        return True

    # ------------------------------------------------------------------
    # Ranking and queries
    # ------------------------------------------------------------------

    def set_focus(self, focus: str) -> None:
        self.focus = focus
        self.views = {view: apply_weights(bands, focus) for view, bands in self.views.items()}

    def query(self, view: View, query: BandQuery | None = None) -> list[BandRecord]:
        return query_bands(self.views[view], query or BandQuery())

    def stats(self, view: View) -> ViewStats:
        return view_stats(self.views[view])

    def _find(self, band_id: str) -> BandRecord | None:
        return next((b for b in self.views[View.DISCOVERY] if b.id == band_id), None)

    def _drop(self, band_id: str) -> None:
        self.views[View.DISCOVERY] = [b for b in self.views[View.DISCOVERY] if b.id != band_id]

    # ------------------------------------------------------------------
    # Status actions
    # ------------------------------------------------------------------

    async def record_performance(self, band_id: str, report: PerformanceReport) -> bool:
        """Mark a band as played; it leaves the discovery list on success."""
        band = self._find(band_id)
        name = band.name if band else ""
        payload = performance_payload(band_id, name, report, self._venue)
        return await self._submit(band_id, payload, "Failed to submit performance data")

    async def remove_band(self, band_id: str, report: RemovalReport) -> bool:
        """Take a band off the list. Raises ValidationFailure with no reasons."""
        band = self._find(band_id)
        name = band.name if band else ""
        payload = removal_payload(band_id, name, report, self._venue)
        return await self._submit(band_id, payload, "Failed to submit band removal data")

    async def _submit(self, band_id: str, payload: dict, error_message: str) -> bool:
        try:
            await self._api.submit_band_action(payload)
        except RemoteCallError as exc:
            if not self._closed:
                logger.warning("%s for %s: %s", error_message, band_id, exc)
                self.error = error_message
            return False
        if self._closed:
            return False
        self._drop(band_id)
        return True
