"""Maze provider.

Builds a dungeon grid in three phases:
    * Start from solid WALL.
    * Scatter non-overlapping rectangular rooms, stamping each with its id.
    * Join rooms along a minimum spanning tree with L-shaped corridors.

The grid is row-major (``grid[y][x]``) and uses the cell values from
``tiles``: 0 wall, 1 corridor, 2+ room id. Room ids are sequential from 2 in
placement order, so ``next_room_id - 1`` is always the last room.

The provider never judges whether a layout is playable. It may place fewer
rooms than requested on a crowded grid; callers validate.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .rooms import Room, place_rooms
from .tiles import FIRST_ROOM_ID, WALL, is_room, is_walkable
from .tunnels import connect_rooms


@dataclass(frozen=True)
class Maze:
    grid: Tuple[Tuple[int, ...], ...]
    width: int
    height: int
    rooms: Tuple[Room, ...]
    room_size: int
    next_room_id: int = field(default=FIRST_ROOM_ID)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> int:
        return self.grid[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and is_walkable(self.grid[y][x])

    def room(self, room_id: int) -> Optional[Room]:
        for r in self.rooms:
            if r.id == room_id:
                return r
        return None

    def to_dict(self) -> Dict:
        return {
            "grid": [list(row) for row in self.grid],
            "width": self.width,
            "height": self.height,
            "rooms": [r.to_dict() for r in self.rooms],
            "roomSize": self.room_size,
            "nextRoomId": self.next_room_id,
        }


def generate(height: int, width: int, room_count: int, avg_room_size: int, rng=None) -> Maze:
    """Generate a maze. ``rng`` is any object with the ``random.Random`` API."""
    if width <= 0 or height <= 0:
        raise ValueError("maze dimensions must be positive")
    if room_count <= 0 or avg_room_size <= 0:
        raise ValueError("room_count and avg_room_size must be positive")
    if rng is None:
        rng = random.Random()
    grid: List[List[int]] = [[WALL for _ in range(width)] for _ in range(height)]
    rooms = place_rooms(grid, width, height, room_count, avg_room_size, rng)
    connect_rooms(grid, rooms, rng)
    return Maze(
        grid=tuple(tuple(row) for row in grid),
        width=width,
        height=height,
        rooms=tuple(rooms),
        room_size=avg_room_size,
        next_room_id=FIRST_ROOM_ID + len(rooms),
    )


def render_ascii(maze: Maze, marks: Optional[Dict[Tuple[int, int], str]] = None) -> str:
    """Render the maze as text: '#' wall, '.' corridor, room id digit (mod 10).

    ``marks`` overrides individual cells, e.g. {(x, y): "S"}.
    """
    marks = marks or {}
    lines = []
    for y, row in enumerate(maze.grid):
        chars = []
        for x, cell in enumerate(row):
            if (x, y) in marks:
                chars.append(marks[(x, y)])
            elif cell == WALL:
                chars.append("#")
            elif is_room(cell):
                chars.append(str(cell % 10))
            else:
                chars.append(".")
        lines.append("".join(chars))
    return "\n".join(lines)


__all__ = ["Maze", "generate", "render_ascii"]
