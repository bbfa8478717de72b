"""Exception hierarchy shared by the server and the client view models."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError


class VenueOpsError(Exception):
    """Base class for all venue-ops errors.

    ``details`` is an optional JSON-serializable mapping echoed back in
    error responses.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RemoteCallError(VenueOpsError):
    """A remote call failed: unreachable, non-2xx, or ``success: false``."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class ValidationFailure(VenueOpsError):
    """User input was rejected before any remote call was made."""

    @classmethod
    def from_pydantic(cls, message: str, exc: ValidationError) -> "ValidationFailure":
        """Wrap a pydantic error, keeping one ``field: message`` line per problem."""
        lines = [f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()]
        return cls(message, details={"errors": lines})


class SongConflictError(VenueOpsError):
    """A write would put one song in two exclusive collections."""
