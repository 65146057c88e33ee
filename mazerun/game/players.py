"""Player registry.

Authoritative positions for every identified connection. Players are keyed by
a UUID assigned on registration; a second index maps Socket.IO session ids to
player ids so a connection can only ever own one player.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from mazerun.errors import DuplicateIdentity, InvalidMove, UnknownConnection
from mazerun.logging_utils import get_logger

from .state import DungeonState, Point

_log = get_logger("players")

# Sprite sheet row for each facing, as laid out in the client atlas
FACING_ROWS = {"down": 0, "up": 1, "left": 2, "right": 3}
ANIMATION_FRAMES = 4
DEFAULT_FACING = "down"


@dataclass
class Player:
    id: str
    x: int
    y: int
    facing: str = DEFAULT_FACING
    current_frame: int = 0

    @property
    def current_row(self) -> int:
        return FACING_ROWS[self.facing]

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def to_dict(self):
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "facing": self.facing,
            "currentRow": self.current_row,
            "currentFrame": self.current_frame,
        }


class PlayerRegistry:
    def __init__(self, dungeon: DungeonState):
        self._dungeon = dungeon
        self._players: Dict[str, Player] = {}
        self._by_sid: Dict[str, str] = {}

    def __len__(self):
        return len(self._players)

    def __contains__(self, player_id):
        return player_id in self._players

    def create(self, sid: str) -> Player:
        """Create a player for ``sid``; raises DuplicateIdentity if one exists."""
        existing = self._by_sid.get(sid)
        if existing is not None:
            raise DuplicateIdentity(sid, existing)
        player_id = uuid.uuid4().hex
        while player_id in self._players:
            player_id = uuid.uuid4().hex
        start = self._dungeon.start
        player = Player(id=player_id, x=start.x, y=start.y)
        self._players[player_id] = player
        self._by_sid[sid] = player_id
        _log.info(event="player_registered", sid=sid, player=player_id, x=player.x, y=player.y)
        return player

    def register(self, sid: str) -> Player:
        """Return the player for ``sid``, creating it on first call."""
        try:
            return self.create(sid)
        except DuplicateIdentity as exc:
            _log.info(event="duplicate_identity", sid=sid, player=exc.player_id)
            return self._players[exc.player_id]

    def player_for(self, sid: str) -> Optional[Player]:
        player_id = self._by_sid.get(sid)
        if player_id is None:
            return None
        return self._players.get(player_id)

    def get(self, player_id: str) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise UnknownConnection(player_id, "no such player") from None

    def apply_move(self, player_id: str, direction: str) -> Player:
        """Move a player one cell, or leave it untouched if the move is blocked.

        Blocked moves are logged and never raised; the returned player is the
        live record either way.
        """
        player = self.get(player_id)
        try:
            target = self._dungeon.step(player.x, player.y, direction)
        except InvalidMove as exc:
            _log.info(event="invalid_move", player=player_id, direction=direction, reason=exc.reason)
            return player
        if player.facing == direction:
            player.current_frame = (player.current_frame + 1) % ANIMATION_FRAMES
        else:
            player.facing = direction
            player.current_frame = 0
        player.x, player.y = target
        return player

    def remove(self, sid: str) -> Optional[Player]:
        player_id = self._by_sid.pop(sid, None)
        if player_id is None:
            return None
        player = self._players.pop(player_id, None)
        _log.info(event="player_removed", sid=sid, player=player_id)
        return player

    def relocate_all(self, point: Point):
        for player in self._players.values():
            player.x, player.y = point
            player.facing = DEFAULT_FACING
            player.current_frame = 0

    def snapshot_all(self) -> List[dict]:
        return [p.to_dict() for p in self._players.values()]


__all__ = ["Player", "PlayerRegistry", "FACING_ROWS", "ANIMATION_FRAMES"]
