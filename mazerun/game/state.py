"""
project: MazeRun
module: state.py
License: MIT

Dungeon state holder.

Wraps the current maze with its start point (center of the first room) and
end point (center of the last room). The live maze is only ever replaced
wholesale, and only after the replacement has been validated, so a failed
regeneration leaves the previous dungeon authoritative.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from mazerun.config import GameConfig
from mazerun.errors import GenerationFailure, InvalidMove
from mazerun.logging_utils import get_logger
from mazerun.maze import FIRST_ROOM_ID, Maze, generate

_log = get_logger("dungeon")

# direction -> (dx, dy); y grows downward
MOVES: Dict[str, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


class Point(NamedTuple):
    x: int
    y: int

    def to_dict(self):
        return {"x": self.x, "y": self.y}


MazeProvider = Callable[..., Maze]


class DungeonState:
    def __init__(
        self,
        config: GameConfig,
        provider: MazeProvider = generate,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self._provider = provider
        self._rng = rng if rng is not None else random.Random(config.seed)
        self.maze: Optional[Maze] = None
        self.start: Optional[Point] = None
        self.end: Optional[Point] = None
        self.generation = 0

    def regenerate(self, config: Optional[GameConfig] = None) -> Maze:
        """Generate a new maze and make it live.

        Raises GenerationFailure without touching the live state when the
        provider errors or returns fewer than two rooms.
        """
        cfg = config or self.config
        try:
            maze = self._provider(cfg.height, cfg.width, cfg.room_count, cfg.avg_room_size, rng=self._rng)
        except GenerationFailure:
            raise
        except Exception as exc:
            raise GenerationFailure(f"maze provider failed: {exc}") from exc
        start, end = self._endpoints(maze)
        self.maze = maze
        self.start = start
        self.end = end
        self.config = cfg
        self.generation += 1
        _log.info(
            event="dungeon_generated",
            generation=self.generation,
            rooms=len(maze.rooms),
            start=f"{start.x},{start.y}",
            end=f"{end.x},{end.y}",
        )
        return maze

    @staticmethod
    def _endpoints(maze: Maze) -> Tuple[Point, Point]:
        if len(maze.rooms) < 2:
            raise GenerationFailure(f"need at least 2 rooms, got {len(maze.rooms)}")
        first = maze.room(FIRST_ROOM_ID)
        last = maze.room(maze.next_room_id - 1)
        if first is None or last is None:
            raise GenerationFailure("room ids are not sequential")
        start = Point(*first.center)
        end = Point(*last.center)
        if start == end:
            raise GenerationFailure("start and end points coincide")
        return start, end

    def _require(self) -> Maze:
        if self.maze is None:
            raise GenerationFailure("no dungeon has been generated")
        return self.maze

    def snapshot(self) -> Dict:
        maze = self._require()
        return {
            "dungeon": maze.to_dict(),
            "startingPoint": self.start.to_dict(),
            "endingPoint": self.end.to_dict(),
        }

    def is_walkable(self, x: int, y: int) -> bool:
        return self._require().is_walkable(x, y)

    def step(self, x: int, y: int, direction: str) -> Point:
        """Return the cell one step from (x, y), or raise InvalidMove."""
        delta = MOVES.get(direction)
        if delta is None:
            raise InvalidMove(x, y, str(direction), "unknown direction")
        nx, ny = x + delta[0], y + delta[1]
        maze = self._require()
        if not maze.in_bounds(nx, ny):
            raise InvalidMove(x, y, direction, "out of bounds")
        if not maze.is_walkable(nx, ny):
            raise InvalidMove(x, y, direction, "wall")
        return Point(nx, ny)

    def is_goal(self, x: int, y: int) -> bool:
        return self.end is not None and (x, y) == (self.end.x, self.end.y)


__all__ = ["DungeonState", "Point", "MOVES"]
