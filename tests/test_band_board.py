"""Tests for the band booking view model and the refresh countdown."""

import asyncio

import httpx
import pytest

from venue_ops.booking.board import BandBoard
from venue_ops.booking.refresh import RefreshCountdown, format_seconds
from venue_ops.db.models import BookAgain, PerformanceReport, RemovalReport, Slot
from venue_ops.errors import ValidationFailure
from venue_ops.ranking.filters import BandQuery, BandSort
from venue_ops.records.bands import View
from venue_ops.remote.api import VenueApiClient

BASE_URL = "http://venue.test"


def _run(transport, scenario, **board_kwargs):
    async def main():
        async with VenueApiClient(BASE_URL, transport=transport) as api:
            board = BandBoard(api, venue="The Test Saloon", **board_kwargs)
            return await scenario(board)

    return asyncio.run(main())


class TestFetch:
    def test_fetch_partitions_and_scores(self, app_transport):
        async def scenario(board):
            assert await board.fetch()
            return board

        board = _run(app_transport, scenario)
        assert [b.id for b in board.views[View.DISCOVERY]] == ["rec1"]
        assert [b.id for b in board.views[View.HISTORY]] == ["rec2"]
        assert [b.id for b in board.views[View.REJECTED]] == ["rec3"]
        assert board.views[View.DISCOVERY][0].overall_score == 70
        assert board.last_refresh is not None
        assert board.error is None

    def test_fetch_failure_sets_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))

        async def scenario(board):
            return await board.fetch(), board

        ok, board = _run(transport, scenario)
        assert ok is False
        assert board.error == "Failed to load band data"
        assert board.loading is False

    def test_set_focus_rescores(self, app_transport):
        async def scenario(board):
            await board.fetch()
            board.set_focus("genre_fit")
            return board

        board = _run(app_transport, scenario)
        # 80*.09 + 70*.23 + 60*.05 + 50*.18 + 90*.36 + 40*.09 = 71.3
        assert board.views[View.DISCOVERY][0].overall_score == 71

    def test_query_and_stats(self, app_transport):
        async def scenario(board):
            await board.fetch()
            return board

        board = _run(app_transport, scenario)
        assert board.query(View.DISCOVERY, BandQuery(search="rodeo"))[0].name == "Midnight Rodeo"
        assert board.query(View.HISTORY, BandQuery(sort=BandSort.VIBE))[0].id == "rec2"
        stats = board.stats(View.DISCOVERY)
        assert stats.total == 1
        assert stats.book_soon == 1
        assert stats.last_refresh == "2025-03-01T10:00:00Z"


class TestStatusActions:
    def test_record_performance_removes_band(self, app_transport, workflow_recorder):
        report = PerformanceReport(
            overall_vibe=4, attendance=150, booking_cost=400,
            would_book_again=BookAgain.YES, slot=Slot.HEADLINER,
        )

        async def scenario(board):
            await board.fetch()
            return await board.record_performance("rec1", report), board

        ok, board = _run(app_transport, scenario)
        assert ok is True
        assert board.views[View.DISCOVERY] == []
        _, body = workflow_recorder.calls[-1]
        assert body["bandAction"] == "Yes"
        assert body["bandName"] == "Midnight Rodeo"
        assert body["overallVibe"] == 4
        assert body["openingHeadliner"] == "Headliner"
        assert body["venue"] == "The Test Saloon"
        assert "datePerformed" in body

    def test_remove_band(self, app_transport, workflow_recorder):
        async def scenario(board):
            await board.fetch()
            return await board.remove_band("rec1", RemovalReport(reasons=["Too expensive"])), board

        ok, board = _run(app_transport, scenario)
        assert ok is True
        assert board.views[View.DISCOVERY] == []
        _, body = workflow_recorder.calls[-1]
        assert body["bandAction"] == "Band Removed"
        assert body["removalReasons"] == ["Too expensive"]
        assert "dateRemoved" in body

    def test_remove_without_reasons_is_rejected_locally(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"success": True})

        async def scenario(board):
            with pytest.raises(ValidationFailure):
                await board.remove_band("rec1", RemovalReport(reasons=["  "]))

        _run(httpx.MockTransport(handler), scenario)
        assert calls == []

    def test_failed_action_keeps_band(self, app_transport, workflow_recorder):
        async def scenario(board):
            await board.fetch()
            workflow_recorder.fail_with = 500
            return await board.remove_band("rec1", RemovalReport(reasons=["No reply"])), board

        ok, board = _run(app_transport, scenario)
        assert ok is False
        assert [b.id for b in board.views[View.DISCOVERY]] == ["rec1"]
        assert board.error == "Failed to submit band removal data"


class TestRefresh:
    def test_refresh_triggers_then_refetches(self, app_transport, workflow_recorder):
        async def scenario(board):
            await board.fetch()
            assert await board.refresh()
            assert board.countdown.running
            await board.countdown.wait()
            return board

        board = _run(app_transport, scenario, refresh_seconds=3, tick=0)
        urls = [url for url, _ in workflow_recorder.calls]
        assert urls.count("http://workflow.test/refresh") == 1
        assert urls.count("http://workflow.test/retrieve") == 2
        assert board.countdown.remaining == 0

    def test_refresh_trigger_failure_still_counts_down(self):
        def handler(request):
            if request.url.path == "/bands/refresh":
                return httpx.Response(502, json={"success": False, "error": "down"})
            return httpx.Response(200, json={"success": True, "data": []})

        async def scenario(board):
            ok = await board.refresh()
            await board.countdown.wait()
            return ok, board

        ok, board = _run(httpx.MockTransport(handler), scenario, refresh_seconds=2, tick=0)
        assert ok is True
        assert board.error is None

    def test_close_cancels_countdown(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"success": True}))

        async def scenario(board):
            await board.refresh()
            board.close()
            return board

        board = _run(transport, scenario, refresh_seconds=240)
        assert not board.countdown.running


class TestRefreshCountdown:
    def test_format(self):
        assert format_seconds(240) == "4:00"
        assert format_seconds(65) == "1:05"
        assert format_seconds(0) == "0:00"
        assert format_seconds(-3) == "0:00"

    def test_ticks_then_fires(self):
        ticks, fired = [], []

        async def on_done():
            fired.append(True)

        async def main():
            countdown = RefreshCountdown(on_done, seconds=3, tick=0, on_tick=ticks.append)
            assert countdown.display() == "0:00"
            countdown.start()
            assert countdown.display() == "0:03"
            await countdown.wait()

        asyncio.run(main())
        assert ticks == [2, 1, 0]
        assert fired == [True]

    def test_cancel_prevents_callback(self):
        fired = []

        async def on_done():
            fired.append(True)

        async def main():
            countdown = RefreshCountdown(on_done, seconds=240, tick=1.0)
            countdown.start()
            await asyncio.sleep(0)
            countdown.cancel()
            await asyncio.sleep(0)
            return countdown

        countdown = asyncio.run(main())
        assert fired == []
        assert not countdown.running

    def test_restart_resets(self):
        async def on_done():
            pass

        async def main():
            countdown = RefreshCountdown(on_done, seconds=240, tick=1.0)
            countdown.start()
            countdown.remaining = 10
            countdown.start()
            remaining = countdown.remaining
            countdown.cancel()
            return remaining

        assert asyncio.run(main()) == 240
