"""Flask application factory."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from venue_ops.auth import CredentialVerifier, StaticCredentialVerifier
from venue_ops.config import Settings
from venue_ops.db.scenarios import ScenarioStore
from venue_ops.db.songs import SongStore
from venue_ops.errors import RemoteCallError, SongConflictError, ValidationFailure, VenueOpsError
from venue_ops.remote.workflow import WorkflowClient

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[VenueOpsError], int] = {
    ValidationFailure: 400,
    SongConflictError: 409,
    RemoteCallError: 502,
}


@dataclass
class Services:
    """Collaborators injected into the app; blueprints reach them via ``services()``."""

    settings: Settings
    songs: SongStore
    workflow: WorkflowClient
    verifier: CredentialVerifier
    scenarios: ScenarioStore | None = None


def services() -> Services:
    return current_app.extensions["venue_ops"]


def error_response(message: str, status: int, details: dict | None = None):
    return jsonify({"success": False, "error": message, "details": details or {}}), status


def _handle_venue_error(exc: VenueOpsError):
    status = 500
    for cls in type(exc).__mro__:
        if cls in _STATUS_CODES:
            status = _STATUS_CODES[cls]
            break
    if status >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    else:
        logger.info("%s: %s", type(exc).__name__, exc.message)
    return error_response(exc.message, status, exc.details)


def _handle_http_error(exc: HTTPException):
    return error_response(exc.description or exc.name, exc.code or 500)


def create_app(
    settings: Settings,
    song_store: SongStore,
    workflow: WorkflowClient,
    verifier: CredentialVerifier | None = None,
    scenario_store: ScenarioStore | None = None,
) -> Flask:
    """Build the app around injected stores and clients."""
    from venue_ops.web.bands import bp as bands_bp
    from venue_ops.web.dj import bp as dj_bp
    from venue_ops.web.finance import bp as finance_bp
    from venue_ops.web.session import bp as session_bp

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.json.sort_keys = False
    app.extensions["venue_ops"] = Services(
        settings=settings,
        songs=song_store,
        workflow=workflow,
        verifier=verifier or StaticCredentialVerifier(settings.username, settings.password),
        scenarios=scenario_store,
    )

    app.register_blueprint(bands_bp)
    app.register_blueprint(dj_bp)
    app.register_blueprint(session_bp)
    app.register_blueprint(finance_bp)

    app.register_error_handler(VenueOpsError, _handle_venue_error)
    app.register_error_handler(HTTPException, _handle_http_error)

    @app.after_request
    def _no_cache(response):
        response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        return response

    logger.info("App created for venue %r", settings.venue_name)
    return app
