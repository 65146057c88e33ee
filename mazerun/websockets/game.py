"""Socket.IO game handlers.

Events (client -> server):
    - connect: join the session room; server replies with dungeon_data
    - id_request: request an identity; no payload
    - location_update: move one cell; payload { direction, playerId? }
    - disconnect

Emits (server -> client):
    - dungeon_data: { dungeon, startingPoint, endingPoint }
    - player_id: the caller's player
    - roster: every player, after any id_request, move or disconnect
    - timer: { minutes, seconds }, from the stopwatch background task

Bad payloads and out-of-order messages are logged and dropped; clients never
receive error events.
"""

from flask import current_app, request
from flask_socketio import join_room

from mazerun import socketio
from mazerun.game.session import GameSession
from mazerun.logging_utils import get_logger

from .validation import LOCATION_UPDATE, validate

_log = get_logger("ws.game")


def get_session() -> GameSession:
    return current_app.extensions["game_session"]


@socketio.on("connect")
def handle_connect(auth=None):
    session = get_session()
    join_room(session.room)
    session.connect(request.sid)


@socketio.on("disconnect")
def handle_disconnect(reason=None):
    get_session().disconnect(request.sid)


@socketio.on("id_request")
def handle_id_request(data=None):
    get_session().identify(request.sid)


@socketio.on("location_update")
def handle_location_update(data=None):
    ok, result = validate(data or {}, LOCATION_UPDATE)
    if not ok:
        _log.warn(
            event="invalid_payload",
            message="location_update",
            sid=request.sid,
            field=result["field"],
            code=result["code"],
        )
        return
    player_id = result.get("playerId")
    if player_id is None and "player" in result:
        legacy_id = result["player"].get("id")
        player_id = str(legacy_id) if legacy_id is not None else None
    get_session().move(request.sid, result["direction"], player_id=player_id)
