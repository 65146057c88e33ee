"""
project: MazeRun
module: status.py
License: MIT

Read-only JSON views of the live game session, for dashboards and smoke
checks. The Socket.IO events remain the authoritative client interface.
"""

from flask import Blueprint, current_app, jsonify

bp_status = Blueprint("status", __name__, url_prefix="/api")


def _session():
    return current_app.extensions["game_session"]


@bp_status.route("/dungeon")
def dungeon_snapshot():
    return jsonify(_session().snapshot())


@bp_status.route("/players")
def players():
    return jsonify({"players": _session().roster()})


@bp_status.route("/completions")
def completions():
    return jsonify({"completions": _session().completion_history()})


@bp_status.route("/status")
def status():
    return jsonify(_session().status())
