"""Tests for the SQLite schema and saved finance scenarios."""

import pytest

from venue_ops.db.database import Database
from venue_ops.db.models import FinancialInputs
from venue_ops.db.scenarios import ScenarioStore


@pytest.fixture
def store(db):
    return ScenarioStore(db.connection)


class TestSchema:
    def test_tables_created(self, db):
        rows = db.connection.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
        names = {r["name"] for r in rows}
        assert {"song_requests", "cooldown_songs", "blacklist", "scenarios"} <= names

    def test_create_tables_is_repeatable(self, db):
        db.create_tables()
        db.create_tables()

    def test_file_database_persists(self, tmp_path):
        path = tmp_path / "venue.db"
        first = Database(path)
        ScenarioStore(first.connection).save_scenario("Keep me", FinancialInputs(expected_attendance=50))
        first.close()

        second = Database(path)
        names = [s.name for s in ScenarioStore(second.connection).get_all_scenarios()]
        second.close()
        assert names == ["Keep me"]


class TestScenarioStore:
    def test_save_computes_results(self, store):
        scenario = store.save_scenario("Friday", FinancialInputs(expected_attendance=200))
        assert scenario.name == "Friday"
        assert scenario.results.break_even_attendance > 0

    def test_round_trip(self, store):
        saved = store.save_scenario("Friday", FinancialInputs(expected_attendance=200, ticket_price=20))
        loaded = store.get_scenario(saved.id)
        assert loaded == saved

    def test_get_missing(self, store):
        assert store.get_scenario("nope") is None

    def test_newest_first(self, store):
        store.save_scenario("First", FinancialInputs())
        store.save_scenario("Second", FinancialInputs())
        assert [s.name for s in store.get_all_scenarios()] == ["Second", "First"]

    def test_delete(self, store):
        saved = store.save_scenario("Gone", FinancialInputs())
        assert store.delete_scenario(saved.id) is True
        assert store.delete_scenario(saved.id) is False
        assert store.get_all_scenarios() == []
