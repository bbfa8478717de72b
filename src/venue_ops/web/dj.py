"""DJ queue endpoints backed by the injected SongStore."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flask import Blueprint, jsonify, request

from venue_ops.dj.songs import cooldown_until, song_id
from venue_ops.errors import ValidationFailure
from venue_ops.records.normalize import to_number
from venue_ops.web.app import services
from venue_ops.web.serializers import (
    serialize_blacklisted,
    serialize_cooldown,
    serialize_request,
    serialize_snapshot,
)

logger = logging.getLogger(__name__)

bp = Blueprint("dj", __name__, url_prefix="/dj")


def _json_body() -> Mapping[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, Mapping):
        raise ValidationFailure("Request body must be a JSON object")
    return body


def _song_fields(data: Mapping[str, Any], *, need_title: bool = True) -> tuple[str, str, str]:
    """Return (song_id, title, artist); the id is derived when absent."""
    title = str(data.get("title") or "").strip()
    artist = str(data.get("artist") or "").strip()
    sid = str(data.get("songId") or "").strip()
    if need_title and (not title or not artist):
        raise ValidationFailure("title and artist are required")
    if not sid:
        if not title or not artist:
            raise ValidationFailure("songId is required")
        sid = song_id(artist, title)
    return sid, title, artist


@bp.get("/requests")
def get_requests():
    snapshot = services().songs.snapshot()
    return jsonify({"success": True, "data": serialize_snapshot(snapshot)})


@bp.post("/requests")
def add_request():
    body = _json_body()
    action = body.get("action")
    if action != "requests.add":
        raise ValidationFailure(f"Unknown action: {action}", details={"action": action})
    data = body.get("data")
    if not isinstance(data, Mapping):
        raise ValidationFailure("data is required")

    sid, title, artist = _song_fields(data)
    venue = str(data.get("venue") or services().settings.venue_name)
    song = services().songs.add_request(sid, title, artist, venue)
    logger.info("Request for %s (count %d)", sid, song.request_count)
    return jsonify({"success": True, "data": serialize_request(song)})


@bp.post("/play-song")
def play_song():
    body = _json_body()
    sid, title, artist = _song_fields(body)
    until = int(to_number(body.get("cooldownUntil"))) or cooldown_until()
    song = services().songs.play_song(sid, title, artist, until)
    logger.info("Played %s, cooling down until %d", sid, until)
    return jsonify({"success": True, "data": serialize_cooldown(song)})


@bp.post("/blacklist")
def add_blacklist():
    body = _json_body()
    sid, title, artist = _song_fields(body)
    entry = services().songs.add_blacklist(sid, title, artist)
    logger.info("Blacklisted %s", sid)
    return jsonify({"success": True, "data": serialize_blacklisted(entry)})


@bp.delete("/blacklist")
def remove_blacklist():
    body = _json_body()
    sid, _, _ = _song_fields(body, need_title=False)
    removed = services().songs.remove_blacklist(sid)
    if not removed:
        logger.debug("Blacklist removal for unknown song %s", sid)
    return jsonify({"success": True, "data": {"songId": sid, "removed": removed}})
