"""Saved break-even scenarios."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from uuid import uuid4

from venue_ops.db.models import FinancialInputs, FinancialResults, Scenario
from venue_ops.finance.breakeven import compute

logger = logging.getLogger(__name__)


class ScenarioStore:
    """CRUD operations for named calculator runs stored in SQLite."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def save_scenario(self, name: str, inputs: FinancialInputs) -> Scenario:
        """Compute results for ``inputs`` and store them under ``name``."""
        scenario = Scenario(
            id=str(uuid4()),
            name=name,
            inputs=inputs,
            results=compute(inputs),
            created_at=datetime.now(),
        )
        self._conn.execute(
            """
            INSERT INTO scenarios (id, name, inputs_json, results_json, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                scenario.id,
                scenario.name,
                scenario.inputs.model_dump_json(),
                scenario.results.model_dump_json(),
                scenario.created_at.isoformat(),
            ),
        )
        self._conn.commit()
        logger.info("Saved scenario %s (%s)", scenario.name, scenario.id)
        return scenario

    def get_all_scenarios(self) -> list[Scenario]:
        """All scenarios, newest first."""
        rows = self._conn.execute(
            "SELECT * FROM scenarios ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
        return [self._row_to_scenario(r) for r in rows]

    def get_scenario(self, scenario_id: str) -> Scenario | None:
        row = self._conn.execute(
            "SELECT * FROM scenarios WHERE id = ?", (scenario_id,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_scenario(row)

    def delete_scenario(self, scenario_id: str) -> bool:
        removed = self._conn.execute(
            "DELETE FROM scenarios WHERE id = ?", (scenario_id,)
        ).rowcount
        self._conn.commit()
        return removed > 0

    @staticmethod
    def _row_to_scenario(row: sqlite3.Row) -> Scenario:
        return Scenario(
            id=row["id"],
            name=row["name"],
            inputs=FinancialInputs.model_validate_json(row["inputs_json"]),
            results=FinancialResults.model_validate_json(row["results_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
