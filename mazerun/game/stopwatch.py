"""Elapsed-time counter for the current dungeon run.

Counts fixed-length ticks rather than reading a wall clock, so a stalled
background task shows up as a slow stopwatch instead of a jump.
"""

from __future__ import annotations

from typing import Dict


class Stopwatch:
    def __init__(self, tick_ms: int = 100):
        if tick_ms <= 0:
            raise ValueError("tick_ms must be positive")
        self.tick_ms = tick_ms
        self.ticks = 0

    def tick(self, count: int = 1) -> int:
        self.ticks += count
        return self.ticks

    def reset(self):
        self.ticks = 0

    @property
    def elapsed_ms(self) -> int:
        return self.ticks * self.tick_ms

    @property
    def minutes(self) -> int:
        return self.elapsed_ms // 60000

    @property
    def seconds(self) -> int:
        return (self.elapsed_ms // 1000) % 60

    def to_dict(self) -> Dict[str, int]:
        return {"minutes": self.minutes, "seconds": self.seconds}

    def formatted(self) -> str:
        """'MM : SS', zero padded."""
        return f"{self.minutes:02d} : {self.seconds:02d}"


__all__ = ["Stopwatch"]
