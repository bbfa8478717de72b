"""Runtime settings read from the environment and an optional ``.env`` file."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "VENUE_OPS_"


class Settings(BaseModel):
    """Everything the app needs to start. Defaults run locally against nothing."""

    venue_name: str = "The Venue"
    db_path: Path = Path("venue_ops.db")

    retrieve_webhook: str = "http://localhost:5678/webhook/retrieve-bands"
    refresh_webhook: str = "http://localhost:5678/webhook/refresh-bands"
    band_status_webhook: str = "http://localhost:5678/webhook/band-status"
    http_timeout: float = Field(15.0, gt=0)

    secret_key: str = "dev-secret-change-me"
    username: str = "admin"
    password: str = "admin"

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(5000, ge=1, le=65535)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``VENUE_OPS_*`` variables.

        When ``environ`` is omitted, a ``.env`` file in the working directory
        is loaded first; variables already set in the process win.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)
