import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from mazerun import create_app, socketio  # noqa: E402
from mazerun.config import GameConfig  # noqa: E402
from mazerun.game.session import GameSession  # noqa: E402
from tests.maze_utils import SequenceProvider, mirrored_maze, two_room_maze  # noqa: E402


class Recorder:
    """Stand-in for the Socket.IO emitter; keeps (event, payload, to) tuples."""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload, to=None):
        self.events.append((event, payload, to))

    def named(self, event, to=None):
        return [p for e, p, t in self.events if e == event and (to is None or t == to)]

    def clear(self):
        self.events.clear()


@pytest.fixture()
def recorder():
    return Recorder()


@pytest.fixture()
def provider():
    return SequenceProvider(two_room_maze(), mirrored_maze())


@pytest.fixture()
def session(recorder, provider):
    """Session over the fixed two-room layouts: start (2, 2), end (5, 2)."""
    return GameSession(GameConfig(seed=1), emit=recorder, provider=provider)


@pytest.fixture()
def test_app(provider):
    fixed = GameSession(GameConfig(seed=1), provider=provider)
    app = create_app(session=fixed, TESTING=True)
    return app


@pytest.fixture()
def make_client(test_app):
    clients = []

    def _make(app=None):
        target = app or test_app
        c = socketio.test_client(target, flask_test_client=target.test_client())
        clients.append(c)
        return c

    yield _make
    for c in clients:
        if c.is_connected():
            c.disconnect()

