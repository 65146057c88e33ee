"""Game state: dungeon holder, player registry, stopwatch and session."""

from .players import Player, PlayerRegistry
from .session import CompletionRecord, ConnectionState, GameSession
from .state import DungeonState, Point
from .stopwatch import Stopwatch

__all__ = [
    "CompletionRecord",
    "ConnectionState",
    "DungeonState",
    "GameSession",
    "Player",
    "PlayerRegistry",
    "Point",
    "Stopwatch",
]
