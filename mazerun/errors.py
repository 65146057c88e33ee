"""Exception taxonomy for the game session.

None of these are sent to clients. Handlers catch them, log an event and
carry on; only a GenerationFailure during startup is allowed to escape.
"""

from __future__ import annotations


class MazeRunError(Exception):
    """Base class for all game-level errors."""


class InvalidMove(MazeRunError):
    def __init__(self, x: int, y: int, direction: str, reason: str):
        super().__init__(f"cannot move {direction} from ({x}, {y}): {reason}")
        self.x = x
        self.y = y
        self.direction = direction
        self.reason = reason


class GenerationFailure(MazeRunError):
    """The maze provider could not produce a playable dungeon."""


class UnknownConnection(MazeRunError):
    def __init__(self, sid: str, message: str = "connection is not identified"):
        super().__init__(f"{sid}: {message}")
        self.sid = sid


class DuplicateIdentity(MazeRunError):
    def __init__(self, sid: str, player_id: str):
        super().__init__(f"{sid} already identified as {player_id}")
        self.sid = sid
        self.player_id = player_id


__all__ = [
    "MazeRunError",
    "InvalidMove",
    "GenerationFailure",
    "UnknownConnection",
    "DuplicateIdentity",
]
