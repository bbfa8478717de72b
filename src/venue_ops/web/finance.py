"""Break-even calculator and saved scenarios."""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from venue_ops.db.models import FinancialInputs
from venue_ops.db.scenarios import ScenarioStore
from venue_ops.errors import ValidationFailure
from venue_ops.finance.breakeven import compute
from venue_ops.web.app import error_response, services
from venue_ops.web.serializers import serialize_results, serialize_scenario

logger = logging.getLogger(__name__)

bp = Blueprint("finance", __name__, url_prefix="/finance")

# camelCase request keys accepted alongside the model's own field names
_INPUT_ALIASES = {
    "expectedAttendance": "expected_attendance",
    "estimatedAttendance": "expected_attendance",
    "ticketPrice": "ticket_price",
    "venueTicketSplitPct": "venue_ticket_split_pct",
    "ticketSplitPct": "venue_ticket_split_pct",
    "coverCharge": "cover_charge",
    "barRevenue": "bar_revenue",
    "merchandiseRevenue": "merchandise_revenue",
    "barCOGS": "bar_cogs_pct",
    "merchandiseCOGS": "merchandise_cogs_pct",
    "staffCosts": "staff_costs",
    "utilitiesCosts": "utilities_costs",
    "facilityCosts": "facility_costs",
    "marketingCosts": "marketing_costs",
    "otherFixedCosts": "other_fixed_costs",
    "bandGuarantee": "band_guarantee",
    "bandOffer": "band_guarantee",
}


def parse_inputs(raw: Any) -> FinancialInputs:
    if not isinstance(raw, dict):
        raise ValidationFailure("inputs must be a JSON object")
    fields = {_INPUT_ALIASES.get(key, key): value for key, value in raw.items()}
    try:
        return FinancialInputs.model_validate(fields)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic("Invalid calculator inputs", exc) from exc


def _scenarios() -> ScenarioStore | None:
    return services().scenarios


@bp.post("/break-even")
def break_even():
    inputs = parse_inputs(request.get_json(silent=True))
    return jsonify({"success": True, "data": serialize_results(compute(inputs))})


@bp.get("/scenarios")
def list_scenarios():
    store = _scenarios()
    if store is None:
        return error_response("Scenario storage is not configured", 503)
    return jsonify(
        {"success": True, "data": [serialize_scenario(s) for s in store.get_all_scenarios()]}
    )


@bp.post("/scenarios")
def save_scenario():
    store = _scenarios()
    if store is None:
        return error_response("Scenario storage is not configured", 503)
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        raise ValidationFailure("Request body must be a JSON object")
    name = str(body.get("name") or "").strip()
    if not name:
        raise ValidationFailure("name is required")
    scenario = store.save_scenario(name, parse_inputs(body.get("inputs") or {}))
    return jsonify({"success": True, "data": serialize_scenario(scenario)}), 201


@bp.delete("/scenarios/<scenario_id>")
def delete_scenario(scenario_id: str):
    store = _scenarios()
    if store is None:
        return error_response("Scenario storage is not configured", 503)
    if not store.delete_scenario(scenario_id):
        return error_response("Scenario not found", 404)
    return jsonify({"success": True})
