"""Band endpoints: pass-through retrieve, ranked views, refresh and status."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from venue_ops.booking.actions import validate_status_body
from venue_ops.errors import ValidationFailure
from venue_ops.ranking.filters import BandQuery, query_bands, view_stats
from venue_ops.ranking.scoring import apply_weights
from venue_ops.ranking.weights import DEFAULT_FOCUS
from venue_ops.records.bands import View, bands_from_payload, partition
from venue_ops.records.normalize import unwrap_records
from venue_ops.web.app import services
from venue_ops.web.serializers import serialize_band, serialize_view_stats

logger = logging.getLogger(__name__)

bp = Blueprint("bands", __name__, url_prefix="/bands")


@bp.get("")
def list_bands():
    records = unwrap_records(services().workflow.retrieve_bands())
    logger.info("Retrieved %d raw band records", len(records))
    return jsonify({"success": True, "data": records})


def _query_from_args() -> BandQuery:
    fields = {
        key: request.args[arg]
        for key, arg in (
            ("search", "search"),
            ("recommendation", "recommendation"),
            ("booking_status", "bookingStatus"),
            ("vibe", "vibe"),
            ("would_book_again", "wouldBookAgain"),
            ("slot", "slot"),
            ("reason", "reason"),
            ("sort", "sort"),
        )
        if request.args.get(arg)
    }
    try:
        return BandQuery.model_validate(fields)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic("Invalid band query", exc) from exc


@bp.get("/views")
def band_view():
    focus = request.args.get("focus") or DEFAULT_FOCUS
    try:
        view = View(request.args.get("view") or View.DISCOVERY.value)
    except ValueError as exc:
        raise ValidationFailure(
            "view must be discovery, history or rejected",
            details={"view": request.args.get("view")},
        ) from exc
    query = _query_from_args()

    records = unwrap_records(services().workflow.retrieve_bands())
    bands = partition(apply_weights(bands_from_payload(records), focus))[view]
    return jsonify(
        {
            "success": True,
            "view": view.value,
            "focus": focus,
            "stats": serialize_view_stats(view_stats(bands)),
            "data": [serialize_band(b) for b in query_bands(bands, query)],
        }
    )


@bp.post("/refresh")
def refresh_bands():
    body = request.get_json(silent=True) or {}
    if not isinstance(body, Mapping):
        raise ValidationFailure("Request body must be a JSON object")
    result = services().workflow.refresh_bands(body.get("lastRefresh"))
    return jsonify({"success": True, "message": "Refresh triggered", "data": result})


@bp.post("/status")
def update_status():
    svc = services()
    payload = validate_status_body(request.get_json(silent=True), svc.settings.venue_name)
    result = svc.workflow.update_band_status(payload)
    logger.info("Band %s marked %r", payload["bandId"], payload["bandAction"])
    return jsonify({"success": True, "data": result})
