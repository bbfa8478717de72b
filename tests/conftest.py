"""Shared test fixtures for venue-ops."""

import json

import httpx
import pytest

from venue_ops.config import Settings
from venue_ops.db.database import Database
from venue_ops.db.models import BandRecord, PlayedState, Recommendation
from venue_ops.db.scenarios import ScenarioStore
from venue_ops.db.songs import InMemorySongStore
from venue_ops.remote.workflow import WorkflowClient
from venue_ops.web.app import create_app

FIXED_NOW = 1_700_000_000_000  # epoch ms

RETRIEVE_URL = "http://workflow.test/retrieve"
REFRESH_URL = "http://workflow.test/refresh"
STATUS_URL = "http://workflow.test/status"


class FakeClock:
    """Callable millisecond clock that tests advance by hand."""

    def __init__(self, now: int = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Band data
# ---------------------------------------------------------------------------


@pytest.fixture
def raw_records():
    """Three records in the shapes the workflow actually sends."""
    return [
        {
            "id": "rec1",
            "Band Name": "Midnight Rodeo",
            "Growth Momentum Score": 80,
            "Fan Engagement Score": {"value": 70},
            "Digital Popularity Score": [60],
            "Live Potential Score": "50",
            "Venue Fit Score": 90,
            "Geographic Fit Score": 40,
            "Recommendation Level": "BOOK_SOON",
            "Spotify Followers": 12000,
            "Has Played?": "No",
            "Date Analyzed": "2025-03-01T10:00:00Z",
        },
        {
            "id": "rec2",
            "bandName": "Dusty Boots",
            "growthMomentumScore": 20,
            "fanEngagementScore": 30,
            "hasPlayed": "Yes",
            "Overall Vibe": 5,
            "Overall Attendance": 180,
            "Band Booking Cost": 600,
            "Would Book Again?": "Yes",
            "Opener/Headliner?": "Headliner",
            "Most Recent Performance Date": "2025-02-14",
        },
        {
            "id": "rec3",
            "Band Name": "Gravel Road",
            "Has Played?": "Band Removed",
            "Reasons for Removal": '["Too expensive", "Genre mismatch"]',
            "Date Rejected": "2025-01-20",
            "Venue Fit Score": {"state": "error"},
        },
    ]


@pytest.fixture
def make_band():
    """Factory for BandRecords with sensible defaults."""

    def _make(band_id="b1", name="Band", **kwargs):
        return BandRecord(id=band_id, name=name, **kwargs)

    return _make


@pytest.fixture
def discovery_bands(make_band):
    return [
        make_band("a", "Alpha", overall_score=70, spotify_followers=500,
                  recommendation=Recommendation.BOOK_SOON),
        make_band("b", "bravo", overall_score=90, spotify_followers=100,
                  recommendation=Recommendation.MAYBE),
        make_band("c", "Charlie", overall_score=70, spotify_followers=900,
                  recommendation=Recommendation.STRONG_CONSIDER),
        make_band("d", "Delta", overall_score=40, has_played=PlayedState.NO),
    ]


# ---------------------------------------------------------------------------
# Workflow webhooks
# ---------------------------------------------------------------------------


class WorkflowRecorder:
    """MockTransport handler standing in for the workflow service."""

    def __init__(self, records):
        self.records = records
        self.calls: list[tuple[str, dict]] = []
        self.fail_with: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        self.calls.append((str(request.url), body))
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, text="workflow down")
        if str(request.url) == RETRIEVE_URL:
            return httpx.Response(200, json={"records": self.records})
        if str(request.url) == REFRESH_URL:
            return httpx.Response(200, json={"status": "started"})
        return httpx.Response(200, json={"ok": True})


@pytest.fixture
def workflow_recorder(raw_records):
    return WorkflowRecorder(raw_records)


@pytest.fixture
def workflow(workflow_recorder):
    client = WorkflowClient(
        retrieve_url=RETRIEVE_URL,
        refresh_url=REFRESH_URL,
        band_status_url=STATUS_URL,
        transport=httpx.MockTransport(workflow_recorder),
    )
    yield client
    client.close()


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path):
    return Settings(
        venue_name="The Test Saloon",
        db_path=tmp_path / "test.db",
        retrieve_webhook=RETRIEVE_URL,
        refresh_webhook=REFRESH_URL,
        band_status_webhook=STATUS_URL,
        secret_key="test-secret",
        username="dj",
        password="spin",
    )


@pytest.fixture
def db():
    database = Database(":memory:")
    yield database
    database.close()


@pytest.fixture
def song_store(clock):
    return InMemorySongStore(clock=clock)


@pytest.fixture
def app(settings, song_store, workflow, db):
    flask_app = create_app(
        settings, song_store, workflow, scenario_store=ScenarioStore(db.connection)
    )
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_transport(client):
    """httpx transport that routes requests into the Flask test client."""

    def handler(request: httpx.Request) -> httpx.Response:
        response = client.open(
            request.url.path,
            method=request.method,
            data=request.content,
            content_type=request.headers.get("content-type"),
        )
        return httpx.Response(
            response.status_code,
            content=response.get_data(),
            headers={"content-type": response.content_type},
        )

    return httpx.MockTransport(handler)
