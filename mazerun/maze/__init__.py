"""Public maze provider interface."""

from .generator import Maze, generate, render_ascii
from .rooms import Room
from .tiles import CORRIDOR, FIRST_ROOM_ID, WALL  # noqa: F401

__all__ = [
    "Maze",
    "Room",
    "generate",
    "render_ascii",
    "WALL",
    "CORRIDOR",
    "FIRST_ROOM_ID",
]
