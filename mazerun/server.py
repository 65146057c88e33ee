"""
project: MazeRun
module: server.py
License: MIT

Server bootstrap: logging setup, the stopwatch background task and the
Socket.IO server loop.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from mazerun import create_app, socketio
from mazerun.logging_utils import log


def start_server(host="0.0.0.0", port=8080, debug: bool = False, app=None):  # pragma: no cover (runtime only)
    """Create the app (generating the first dungeon), start the stopwatch and serve.

    A GenerationFailure from the first dungeon propagates; the caller exits.
    """
    app = app or create_app()
    _configure_logging(app)
    session = app.extensions["game_session"]
    socketio.start_background_task(session.run_stopwatch, socketio.sleep)
    run_kwargs = {"host": host, "port": port, "debug": debug}
    if socketio.async_mode == "threading":
        # Werkzeug refuses to serve Socket.IO outside debug unless told otherwise
        run_kwargs["allow_unsafe_werkzeug"] = True
    try:
        print(f"[INFO] Starting Socket.IO server on {host}:{port} (async_mode={socketio.async_mode})")
        log.info(event="server_start", host=host, port=port, async_mode=socketio.async_mode)
        socketio.run(app, **run_kwargs)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)
    finally:
        session.stop()


def _configure_logging(app):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/server.log. Retains a few backups to avoid growth.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "server.log")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
