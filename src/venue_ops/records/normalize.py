"""Best-effort coercion of loosely shaped external field values.

Records arrive from the workflow service with values wrapped in several
ways: plain scalars, ``{"value": ...}`` objects, single-element arrays and
``{"state": "error"}`` markers for failed lookups. Everything here turns
those into plain Python values and never raises.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize(raw: Any, fallback: T) -> Any:
    """Unwrap ``raw`` into a plain value, or return ``fallback``.

    Rules, applied in order until a plain value remains:
    - ``None`` -> fallback
    - mapping with ``state == "error"`` -> fallback
    - mapping with a ``value`` key -> its value (fallback if falsy)
    - list/tuple -> first element (fallback if empty)
    - anything else is returned unchanged

    Wrappers are peeled repeatedly, so ``normalize(normalize(x, f), f)``
    always equals ``normalize(x, f)``.
    """
    value = raw
    while True:
        if value is None:
            return fallback
        if isinstance(value, Mapping):
            if value.get("state") == "error":
                logger.warning("Dropping field with error marker: %r", value)
                return fallback
            if "value" in value:
                value = value["value"] or None
                continue
            return value
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
            continue
        return value


def to_number(raw: Any, fallback: float = 0.0) -> float:
    """Numeric cast of a normalized value; failures, NaN and infinities give 0."""
    value = normalize(raw, fallback)
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        value = value.strip() or 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Nearest integer, halves away from zero (``round`` would use banker's)."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def to_text(raw: Any, fallback: str = "") -> str:
    value = normalize(raw, fallback)
    if isinstance(value, str):
        return value
    return str(value)


def to_flag(raw: Any) -> bool:
    """True only for the literal ``True`` or the string ``"true"``."""
    value = normalize(raw, False)
    return value is True or value == "true"


def to_list(raw: Any) -> list[str]:
    """Parse a multi-value field.

    Accepts a real list, a JSON array string, or a comma-separated string.
    A string that looks like JSON but fails to parse becomes a single item.
    """
    value = raw
    if isinstance(value, Mapping):
        if value.get("state") == "error":
            return []
        value = value.get("value")
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    text = str(value).strip()
    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text)
        except ValueError:
            logger.warning("Could not parse list field %r", text)
            return [text]
        if isinstance(parsed, list):
            return [str(v).strip() for v in parsed if str(v).strip()]
        return [text]
    return [part.strip() for part in text.split(",") if part.strip()]


def unwrap_records(payload: Any) -> list[dict]:
    """Pull the record list out of a retrieve-webhook response.

    Three shapes are accepted: a bare list, ``{"records": [...]}`` and
    ``{"data": [...]}``. Anything else yields an empty list.
    """
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, Mapping) and isinstance(payload.get("records"), list):
        records = payload["records"]
    elif isinstance(payload, Mapping) and isinstance(payload.get("data"), list):
        records = payload["data"]
    else:
        keys = list(payload.keys()) if isinstance(payload, Mapping) else type(payload).__name__
        logger.warning("Unexpected band payload shape: %s", keys)
        return []
    return [r for r in records if isinstance(r, Mapping)]
