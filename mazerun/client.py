"""Headless game client.

Mirrors what a browser client keeps in memory (dungeon, own player, roster,
timer) and drives it from the Socket.IO events. Used by ``run.py watch`` to
follow a live server from a terminal, and by tests to check that broadcasts
reconstruct the server's state.

Run with: `python run.py watch --server http://127.0.0.1:8080`
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

import socketio

from mazerun.game.state import MOVES
from mazerun.logging_utils import get_logger

_log = get_logger("client")


def parse_roster(payload: List[Dict]) -> Set[Tuple[str, int, int]]:
    return {(str(p["id"]), int(p["x"]), int(p["y"])) for p in payload}


def can_move(dungeon: Dict, x: int, y: int, direction: str) -> bool:
    """Client-side topology pre-check; the server re-validates every move."""
    delta = MOVES.get(direction)
    if delta is None:
        return False
    nx, ny = x + delta[0], y + delta[1]
    if not (0 <= nx < dungeon["width"] and 0 <= ny < dungeon["height"]):
        return False
    return dungeon["grid"][ny][nx] > 0


class ClientView:
    def __init__(self):
        self.dungeon: Optional[Dict] = None
        self.start: Optional[Dict] = None
        self.end: Optional[Dict] = None
        self.me: Optional[Dict] = None
        self.players: Dict[str, Dict] = {}
        self.timer = {"minutes": 0, "seconds": 0}
        self.dungeons_seen = 0

    def on_dungeon_data(self, data):
        self.dungeon = data["dungeon"]
        self.start = data["startingPoint"]
        self.end = data["endingPoint"]
        self.dungeons_seen += 1

    def on_player_id(self, data):
        self.me = data

    def on_roster(self, data):
        self.players = {str(p["id"]): p for p in data}
        if self.me is not None and self.me["id"] in self.players:
            self.me = self.players[self.me["id"]]

    def on_timer(self, data):
        self.timer = {"minutes": int(data["minutes"]), "seconds": int(data["seconds"])}

    def positions(self) -> Set[Tuple[str, int, int]]:
        return parse_roster(list(self.players.values()))

    def can_move(self, direction: str) -> bool:
        if self.dungeon is None or self.me is None:
            return False
        return can_move(self.dungeon, self.me["x"], self.me["y"], direction)

    def describe(self) -> str:
        t = self.timer
        return f"{t['minutes']:02d}:{t['seconds']:02d} players={len(self.players)} dungeons={self.dungeons_seen}"


def attach(sio, view: ClientView, identify: bool = False, echo=print):
    """Wire ``view`` to a python-socketio client's events."""

    @sio.on("dungeon_data")
    def _dungeon(data):
        view.on_dungeon_data(data)
        echo(f"[dungeon] {data['dungeon']['width']}x{data['dungeon']['height']} rooms={len(data['dungeon']['rooms'])}")
        if identify and view.me is None:
            sio.emit("id_request")

    @sio.on("player_id")
    def _player_id(data):
        view.on_player_id(data)
        echo(f"[player] id={data['id']} at {data['x']},{data['y']}")

    @sio.on("roster")
    def _roster(data):
        view.on_roster(data)
        echo(f"[roster] {view.describe()}")

    @sio.on("timer")
    def _timer(data):
        view.on_timer(data)

    return sio


def watch(server_url: str, identify: bool = False, duration: Optional[float] = None) -> ClientView:  # pragma: no cover
    """Connect to a running server and print state changes until interrupted."""
    sio = socketio.Client(reconnection=False)
    view = ClientView()
    attach(sio, view, identify=identify)
    _log.info(event="watch_connect", server=server_url, identify=identify)
    sio.connect(server_url, transports=["websocket", "polling"])
    try:
        if duration is None:
            sio.wait()
        else:
            sio.sleep(duration)
    finally:
        sio.disconnect()
    return view


__all__ = ["ClientView", "attach", "can_move", "parse_roster", "watch"]
