"""Login flag kept in the Flask session. Gates UI only."""

from flask import Blueprint, jsonify, request, session

from venue_ops.errors import ValidationFailure
from venue_ops.web.app import error_response, services

bp = Blueprint("session", __name__)

SESSION_KEY = "authenticated"


@bp.post("/login")
def login():
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        raise ValidationFailure("Request body must be a JSON object")
    username = str(body.get("username") or "")
    password = str(body.get("password") or "")
    if not services().verifier.verify(username, password):
        return error_response("Invalid username or password", 401)
    session[SESSION_KEY] = True
    return jsonify({"success": True, "authenticated": True})


@bp.post("/logout")
def logout():
    session.pop(SESSION_KEY, None)
    return jsonify({"success": True, "authenticated": False})


@bp.get("/session")
def current_session():
    return jsonify({"success": True, "authenticated": bool(session.get(SESSION_KEY))})
