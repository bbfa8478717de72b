"""Tests for the workflow webhook client and the async API client."""

import asyncio
import json

import httpx
import pytest

from venue_ops.db.models import BlacklistedSong, CooldownSong
from venue_ops.errors import RemoteCallError
from venue_ops.remote.api import VenueApiClient
from venue_ops.remote.workflow import WorkflowClient

from conftest import REFRESH_URL, RETRIEVE_URL, STATUS_URL


class TestWorkflowClient:
    def test_retrieve_sends_action_envelope(self, workflow, workflow_recorder, raw_records):
        payload = workflow.retrieve_bands()
        assert payload == {"records": raw_records}
        url, body = workflow_recorder.calls[0]
        assert url == RETRIEVE_URL
        assert body["action"] == "retrieve"
        assert "timestamp" in body
        assert len(body["requestId"]) == 6

    def test_refresh_forwards_last_refresh(self, workflow, workflow_recorder):
        workflow.refresh_bands("2025-03-01T00:00:00Z")
        url, body = workflow_recorder.calls[0]
        assert url == REFRESH_URL
        assert body["action"] == "refresh"
        assert body["lastRefresh"] == "2025-03-01T00:00:00Z"

    def test_status_update_has_no_envelope(self, workflow, workflow_recorder):
        workflow.update_band_status({"bandId": "rec1", "bandAction": "Yes"})
        url, body = workflow_recorder.calls[0]
        assert url == STATUS_URL
        assert body == {"bandId": "rec1", "bandAction": "Yes"}

    def test_http_error_raises(self, workflow, workflow_recorder):
        workflow_recorder.fail_with = 500
        with pytest.raises(RemoteCallError) as info:
            workflow.retrieve_bands()
        assert info.value.status_code == 500

    def test_unreachable_raises(self):
        def boom(request):
            raise httpx.ConnectError("refused", request=request)

        with WorkflowClient(
            retrieve_url=RETRIEVE_URL,
            refresh_url=REFRESH_URL,
            band_status_url=STATUS_URL,
            transport=httpx.MockTransport(boom),
        ) as client:
            with pytest.raises(RemoteCallError):
                client.retrieve_bands()

    def test_plain_text_and_empty_bodies(self):
        responses = iter([httpx.Response(200, text="Workflow was started"), httpx.Response(200)])

        def handler(request):
            return next(responses)

        with WorkflowClient(
            retrieve_url=RETRIEVE_URL,
            refresh_url=REFRESH_URL,
            band_status_url=STATUS_URL,
            transport=httpx.MockTransport(handler),
        ) as client:
            assert client.refresh_bands() == {"message": "Workflow was started"}
            assert client.refresh_bands() is None


class TestVenueApiClient:
    @staticmethod
    def _call(handler, method_name, *args):
        async def main():
            async with VenueApiClient("http://venue.test", transport=httpx.MockTransport(handler)) as api:
                return await getattr(api, method_name)(*args)

        return asyncio.run(main())

    def test_fetch_bands_unwraps(self):
        def handler(request):
            assert request.url.path == "/bands"
            return httpx.Response(200, json={"success": True, "data": [{"id": "x"}]})

        assert self._call(handler, "fetch_bands") == [{"id": "x"}]

    def test_add_request_body(self):
        seen = {}

        def handler(request):
            seen.update(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        self._call(handler, "add_request", "a-b", "B", "A", "The Saloon")
        assert seen["action"] == "requests.add"
        assert seen["data"]["songId"] == "a-b"
        assert seen["data"]["venue"] == "The Saloon"
        assert seen["data"]["requestCount"] == 1

    def test_play_and_blacklist_bodies(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"success": True})

        self._call(handler, "play_song", CooldownSong(id="a-b", title="B", artist="A", cooldown_until=99))
        self._call(handler, "add_blacklist", BlacklistedSong(id="a-b", title="B", artist="A"))
        self._call(handler, "remove_blacklist", "a-b")
        assert seen == [
            ("POST", "/dj/play-song", {"songId": "a-b", "title": "B", "artist": "A", "cooldownUntil": 99}),
            ("POST", "/dj/blacklist", {"songId": "a-b", "title": "B", "artist": "A"}),
            ("DELETE", "/dj/blacklist", {"songId": "a-b"}),
        ]

    def test_error_message_from_body(self):
        def handler(request):
            return httpx.Response(409, json={"success": False, "error": "blacklisted"})

        with pytest.raises(RemoteCallError) as info:
            self._call(handler, "add_request", "a-b", "B", "A", "")
        assert str(info.value) == "blacklisted"
        assert info.value.status_code == 409

    def test_success_false_raises(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "nope"})

        with pytest.raises(RemoteCallError):
            self._call(handler, "trigger_refresh")

    def test_snapshot_parsing(self):
        def handler(request):
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": {
                        "availableRequests": [
                            {"songId": "a-b", "title": "B", "artist": "A", "requestCount": 3},
                            {"title": "Remember When", "artist": "Alan Jackson"},
                            "junk",
                        ],
                        "blacklist": [{"id": "c-d", "title": "D", "artist": "C"}],
                        "activeCooldown": [
                            {"songId": "e-f", "title": "F", "artist": "E", "cooldownUntil": "123"}
                        ],
                    },
                },
            )

        snap = self._call(handler, "fetch_dj_snapshot")
        assert [r.id for r in snap.available_requests] == ["a-b", "alan-jackson-remember-when"]
        assert snap.available_requests[1].request_count == 1
        assert snap.blacklist[0].id == "c-d"
        assert snap.active_cooldown[0].cooldown_until == 123
        assert snap.stats.total_requests == 4

    def test_snapshot_bad_shape_is_empty(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "data": []})

        snap = self._call(handler, "fetch_dj_snapshot")
        assert snap.available_requests == []
        assert snap.stats.requests == 0
