"""
project: MazeRun
module: session.py
License: MIT

Game session: the single owner of the dungeon, player registry, stopwatch and
completion history, plus the per-connection protocol state machine.

Connection lifecycle:
    CONNECTED   -> dungeon_data sent to the new connection
    IDENTIFIED  -> after id_request; player created at the dungeon start
    DISCONNECTED (terminal) -> player removed, roster rebroadcast

Every mutation and the broadcast it triggers run under one re-entrant lock,
so a roster broadcast can never be interleaved with a dungeon swap.

The session is transport-agnostic. It is handed an ``emit(event, payload,
to)`` callable; ``to`` is either a connection sid (direct reply) or the
session room (broadcast to every connection).
"""

from __future__ import annotations

import enum
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional

from mazerun.config import GameConfig
from mazerun.errors import GenerationFailure, UnknownConnection
from mazerun.logging_utils import get_logger
from mazerun.maze import generate

from .players import PlayerRegistry
from .state import DungeonState
from .stopwatch import Stopwatch

_log = get_logger("session")

Emitter = Callable[[str, Any, Optional[str]], None]

DEFAULT_ROOM = "dungeon"


class ConnectionState(enum.Enum):
    CONNECTED = "connected"
    IDENTIFIED = "identified"
    DISCONNECTED = "disconnected"


@dataclass
class Connection:
    sid: str
    state: ConnectionState = ConnectionState.CONNECTED
    player_id: Optional[str] = None


@dataclass(frozen=True)
class CompletionRecord:
    player_id: str
    minutes: int
    seconds: int
    elapsed_ms: int
    time: str
    generation: int
    completed_at: float

    def to_dict(self):
        return {
            "playerId": self.player_id,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "elapsedMs": self.elapsed_ms,
            "time": self.time,
            "generation": self.generation,
            "completedAt": self.completed_at,
        }


def _discard(event, payload, to=None):
    pass


class GameSession:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        emit: Optional[Emitter] = None,
        provider=generate,
        rng=None,
        room: str = DEFAULT_ROOM,
    ):
        self.config = config or GameConfig()
        self.room = room
        self._emit = emit or _discard
        self._lock = threading.RLock()
        self._running = False
        self.dungeon = DungeonState(self.config, provider=provider, rng=rng)
        # No fallback exists yet, so a failure here is fatal
        self.dungeon.regenerate()
        self.players = PlayerRegistry(self.dungeon)
        self.stopwatch = Stopwatch(self.config.tick_ms)
        self.completions: Deque[CompletionRecord] = deque(maxlen=max(1, self.config.completion_history))
        self.connections: Dict[str, Connection] = {}

    def bind(self, emit: Emitter):
        self._emit = emit

    def _send(self, sid: str, event: str, payload):
        self._emit(event, payload, sid)

    def _broadcast(self, event: str, payload):
        self._emit(event, payload, self.room)

    # ------------------------------------------------------------------
    # Protocol handlers
    # ------------------------------------------------------------------
    def connect(self, sid: str) -> Connection:
        with self._lock:
            conn = self.connections.get(sid)
            if conn is None:
                conn = Connection(sid)
                self.connections[sid] = conn
                _log.info(event="connect", sid=sid, connections=len(self.connections))
            self._send(sid, "dungeon_data", self.dungeon.snapshot())
            return conn

    def identify(self, sid: str) -> Optional[Dict]:
        with self._lock:
            conn = self.connections.get(sid)
            if conn is None:
                _log.warn(event="unknown_connection", sid=sid, message="id_request")
                return None
            player = self.players.register(sid)
            if conn.state is ConnectionState.IDENTIFIED:
                # register() already logged the duplicate; just repeat the answer
                self._send(sid, "player_id", player.to_dict())
                return player.to_dict()
            conn.state = ConnectionState.IDENTIFIED
            conn.player_id = player.id
            self._send(sid, "player_id", player.to_dict())
            self._broadcast("roster", self.players.snapshot_all())
            return player.to_dict()

    def move(self, sid: str, direction: str, player_id: Optional[str] = None) -> Optional[Dict]:
        """Apply a location_update.

        The roster is broadcast whether or not the move was accepted, then
        the mover is checked against the end point.
        """
        with self._lock:
            conn = self.connections.get(sid)
            if conn is None or conn.state is not ConnectionState.IDENTIFIED:
                _log.warn(event="unknown_connection", sid=sid, message="location_update")
                return None
            if player_id is not None and player_id != conn.player_id:
                _log.warn(
                    event="unknown_connection",
                    sid=sid,
                    message="location_update",
                    claimed=player_id,
                    owner=conn.player_id,
                )
                return None
            try:
                before = self.players.get(conn.player_id).position
                player = self.players.apply_move(conn.player_id, direction)
            except UnknownConnection as exc:
                _log.warn(event="unknown_connection", sid=sid, message="location_update", error=str(exc))
                return None
            self._broadcast("roster", self.players.snapshot_all())
            # only arriving on the end point counts; bumping a wall while on it does not
            if player.position != before and self.dungeon.is_goal(*player.position):
                self._complete(player.id)
            return player.to_dict()

    def disconnect(self, sid: str) -> Optional[Connection]:
        with self._lock:
            conn = self.connections.pop(sid, None)
            if conn is None:
                _log.warn(event="unknown_connection", sid=sid, message="disconnect")
                return None
            conn.state = ConnectionState.DISCONNECTED
            removed = self.players.remove(sid)
            _log.info(event="disconnect", sid=sid, player=conn.player_id, connections=len(self.connections))
            if removed is not None:
                self._broadcast("roster", self.players.snapshot_all())
            return conn

    def _complete(self, player_id: str):
        completed = self.dungeon.generation
        try:
            self.dungeon.regenerate()
        except GenerationFailure as exc:
            _log.error(event="generation_failure", generation=self.dungeon.generation, error=str(exc))
        else:
            self.players.relocate_all(self.dungeon.start)
            self._broadcast("dungeon_data", self.dungeon.snapshot())
            self._broadcast("roster", self.players.snapshot_all())
        record = CompletionRecord(
            player_id=player_id,
            minutes=self.stopwatch.minutes,
            seconds=self.stopwatch.seconds,
            elapsed_ms=self.stopwatch.elapsed_ms,
            time=self.stopwatch.formatted(),
            generation=completed,
            completed_at=time.time(),
        )
        self.completions.appendleft(record)
        _log.info(event="dungeon_completed", player=player_id, time=record.time, generation=record.generation)
        self.stopwatch.reset()

    # ------------------------------------------------------------------
    # Stopwatch
    # ------------------------------------------------------------------
    def tick(self) -> Optional[Dict[str, int]]:
        """Advance the stopwatch one tick and broadcast it.

        Does nothing while nobody is connected.
        """
        with self._lock:
            if not self.connections:
                return None
            self.stopwatch.tick()
            payload = self.stopwatch.to_dict()
            self._broadcast("timer", payload)
            return payload

    def run_stopwatch(self, sleep: Callable[[float], Any] = time.sleep):
        """Tick forever at the configured interval until stop() is called."""
        self._running = True
        _log.info(event="stopwatch_started", tick_ms=self.config.tick_ms)
        while self._running:
            sleep(self.config.tick_seconds)
            self.tick()

    def stop(self):
        self._running = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict:
        with self._lock:
            return self.dungeon.snapshot()

    def roster(self) -> List[Dict]:
        with self._lock:
            return self.players.snapshot_all()

    def completion_history(self) -> List[Dict]:
        with self._lock:
            return [r.to_dict() for r in self.completions]

    def status(self) -> Dict:
        with self._lock:
            return {
                "players": len(self.players),
                "connections": len(self.connections),
                "generation": self.dungeon.generation,
                "timer": self.stopwatch.to_dict(),
                "completions": len(self.completions),
            }


__all__ = ["GameSession", "Connection", "ConnectionState", "CompletionRecord", "DEFAULT_ROOM"]
