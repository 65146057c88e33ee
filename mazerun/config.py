"""Game configuration.

Values come from environment variables (``.env`` is loaded by the app factory
before this is read) with defaults matching the classic 20x20, seven room
dungeon.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class GameConfig:
    width: int = 20
    height: int = 20
    room_count: int = 7
    avg_room_size: int = 8
    seed: Optional[int] = None
    tick_ms: int = 100
    completion_history: int = 100

    def __post_init__(self):
        if self.width < 3 or self.height < 3:
            raise ValueError("dungeon must be at least 3x3")
        if self.room_count < 2:
            raise ValueError("room_count must be at least 2")
        if self.avg_room_size < 1:
            raise ValueError("avg_room_size must be positive")
        if self.tick_ms <= 0:
            raise ValueError("tick_ms must be positive")

    @property
    def tick_seconds(self) -> float:
        return self.tick_ms / 1000.0

    @classmethod
    def from_env(cls) -> "GameConfig":
        seed_raw = os.getenv("MAZERUN_SEED")
        seed = None
        if seed_raw not in (None, ""):
            try:
                seed = int(seed_raw)
            except ValueError:
                seed = None
        return cls(
            width=_env_int("MAZERUN_DUNGEON_WIDTH", 20),
            height=_env_int("MAZERUN_DUNGEON_HEIGHT", 20),
            room_count=_env_int("MAZERUN_ROOM_COUNT", 7),
            avg_room_size=_env_int("MAZERUN_AVG_ROOM_SIZE", 8),
            seed=seed,
            tick_ms=_env_int("MAZERUN_TICK_MS", 100),
            completion_history=_env_int("MAZERUN_COMPLETION_HISTORY", 100),
        )


__all__ = ["GameConfig"]
