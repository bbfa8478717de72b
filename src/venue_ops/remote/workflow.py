"""HTTP client for the external workflow automation webhooks.

Every webhook is a POST with a JSON body carrying an ``action`` name, an
ISO timestamp and a short request id, plus whatever the action needs.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone
from typing import Any

import httpx

from venue_ops.errors import RemoteCallError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def _request_id() -> str:
    return secrets.token_hex(3)


class WorkflowClient:
    """Thin wrapper over the retrieve, refresh and band-status webhooks."""

    def __init__(
        self,
        *,
        retrieve_url: str,
        refresh_url: str,
        band_status_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._retrieve_url = retrieve_url
        self._refresh_url = refresh_url
        self._band_status_url = band_status_url
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "WorkflowClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _post(self, url: str, action: str | None, body: dict[str, Any]) -> Any:
        request_id = _request_id()
        payload: dict[str, Any] = {}
        if action is not None:
            payload["action"] = action
            payload["timestamp"] = datetime.now(timezone.utc).isoformat()
            payload["requestId"] = request_id
        payload.update(body)

        logger.info("[%s] POST %s action=%s", request_id, url, action)
        try:
            response = self._client.post(url, json=payload)
        except httpx.RequestError as exc:
            logger.error("[%s] Webhook unreachable: %s", request_id, exc)
            raise RemoteCallError(f"workflow webhook unreachable: {exc}") from exc

        logger.debug("[%s] Webhook status %s", request_id, response.status_code)
        if response.is_error:
            logger.error(
                "[%s] Webhook error %s: %s",
                request_id,
                response.status_code,
                response.text[:500],
            )
            raise RemoteCallError(
                f"workflow HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            # Some workflows answer with plain text; the body is opaque to us
            return {"message": response.text}

    def retrieve_bands(self) -> Any:
        """Raw retrieve payload: a list, ``{"records": ...}`` or ``{"data": ...}``."""
        return self._post(self._retrieve_url, "retrieve", {})

    def refresh_bands(self, last_refresh: str | None = None) -> Any:
        """Ask the workflow to re-analyze bands. The reply is not needed."""
        return self._post(self._refresh_url, "refresh", {"lastRefresh": last_refresh})

    def update_band_status(self, payload: dict[str, Any]) -> Any:
        """Forward a band-status change (played or removed)."""
        return self._post(self._band_status_url, None, payload)
