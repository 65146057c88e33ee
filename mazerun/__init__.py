"""
project: MazeRun
module: __init__.py
License: MIT

Flask application factory and Socket.IO setup.

The SocketIO extension is created once at import so handler modules can
register their events on it; ``create_app`` binds it to a fresh Flask app and
a fresh GameSession. Configuration is sourced from environment variables
(``.env`` is loaded first) with development defaults.
"""

import os

from dotenv import load_dotenv
from flask import Flask
from flask_socketio import SocketIO

from mazerun.config import GameConfig

# Load .env if present so SECRET_KEY, MAZERUN_* etc. can be supplied without
# exporting shell variables during development.
load_dotenv()

socketio = SocketIO()

__version__ = "0.2.0"


def _socketio_emit(event, payload, to=None):
    socketio.emit(event, payload, to=to)


def create_app(game_config: GameConfig | None = None, session=None, **overrides):
    """Build the Flask app, bind Socket.IO and start a new game session.

    A prebuilt ``session`` may be passed in (tests use this to supply a fixed
    maze provider); it is rebound to this app's Socket.IO server.

    Raises GenerationFailure if the first dungeon cannot be generated; there
    is nothing to serve without one.
    """
    from mazerun.game.session import GameSession

    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only deployments still work, they just lose the log file
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    )
    app.config.update(overrides)

    socketio.init_app(
        app,
        async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
        cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
        engineio_logger=bool(os.getenv("ENGINEIO_LOGGER", "0") == "1"),
        ping_interval=20,
        ping_timeout=10,
    )

    if session is None:
        session = GameSession(game_config or GameConfig.from_env())
    session.bind(_socketio_emit)
    app.extensions["game_session"] = session

    from mazerun.routes.status import bp_status

    app.register_blueprint(bp_status)
    return app


# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from mazerun.websockets import game as _ws_game  # noqa: F401,E402
