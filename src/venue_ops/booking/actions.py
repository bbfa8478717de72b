"""Band-status payloads: marking a band as played or removing it.

The same builders serve the view model (outgoing) and the server (the
incoming body is re-validated before it is forwarded to the workflow).
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from venue_ops.db.models import PerformanceReport, PlayedState, RemovalReport
from venue_ops.errors import ValidationFailure

BAND_ACTIONS = (PlayedState.YES.value, PlayedState.REMOVED.value)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def performance_payload(
    band_id: str, band_name: str, report: PerformanceReport, venue: str
) -> dict[str, Any]:
    return {
        "bandId": band_id,
        "bandName": band_name,
        "bandAction": PlayedState.YES.value,
        "overallVibe": report.overall_vibe,
        "attendance": report.attendance,
        "bandBookingCost": report.booking_cost,
        "wouldBookAgain": report.would_book_again.value,
        "openingHeadliner": report.slot.value,
        "datePerformed": _now_iso(),
        "venue": venue,
    }


def removal_payload(
    band_id: str, band_name: str, report: RemovalReport, venue: str
) -> dict[str, Any]:
    """Raises ValidationFailure when no reason was given."""
    reasons = [r.strip() for r in report.reasons if r and r.strip()]
    if not reasons:
        raise ValidationFailure("At least one removal reason is required")
    return {
        "bandId": band_id,
        "bandName": band_name,
        "bandAction": PlayedState.REMOVED.value,
        "removalReasons": reasons,
        "dateRemoved": _now_iso(),
        "venue": venue,
    }


def validate_status_body(body: Any, venue: str) -> dict[str, Any]:
    """Check an incoming ``POST /bands/status`` body and rebuild the payload.

    Raises:
        ValidationFailure: On a missing band id, an unknown action, an
            out-of-range performance field or an empty reason list.
    """
    if not isinstance(body, Mapping):
        raise ValidationFailure("Request body must be a JSON object")

    band_id = str(body.get("bandId") or "").strip()
    band_name = str(body.get("bandName") or "").strip()
    action = body.get("bandAction")
    if not band_id:
        raise ValidationFailure("bandId is required")
    if action not in BAND_ACTIONS:
        raise ValidationFailure(
            f"bandAction must be one of {', '.join(BAND_ACTIONS)}",
            details={"bandAction": action},
        )

    venue = str(body.get("venue") or venue)
    if action == PlayedState.REMOVED.value:
        reasons = body.get("removalReasons")
        if not isinstance(reasons, list):
            reasons = []
        return removal_payload(
            band_id, band_name, RemovalReport(reasons=[str(r) for r in reasons]), venue
        )

    try:
        report = PerformanceReport(
            overall_vibe=body.get("overallVibe", 3),
            attendance=body.get("attendance", 0),
            booking_cost=body.get("bandBookingCost", 0),
            would_book_again=body.get("wouldBookAgain", "Maybe"),
            slot=body.get("openingHeadliner", "Opening"),
        )
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic("Invalid performance report", exc) from exc
    return performance_payload(band_id, band_name, report, venue)
