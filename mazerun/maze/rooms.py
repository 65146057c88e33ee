import math
import random
from dataclasses import dataclass
from typing import List, Tuple

from .tiles import FIRST_ROOM_ID

MIN_SIDE = 2
ATTEMPTS_PER_ROOM = 15


@dataclass(frozen=True)
class Room:
    id: int
    x: int
    y: int
    w: int
    h: int

    def cells(self):
        for iy in range(self.y, self.y + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def to_dict(self):
        cx, cy = self.center
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.w,
            "height": self.h,
            "centerX": cx,
            "centerY": cy,
        }


def side_range(avg_room_size: int) -> Tuple[int, int]:
    """Side-length bounds for rooms whose average area is ``avg_room_size``."""
    base = max(MIN_SIDE, round(math.sqrt(avg_room_size)))
    return max(MIN_SIDE, base - 1), base + 1


def place_rooms(grid, width: int, height: int, room_count: int, avg_room_size: int, rng=None) -> List[Room]:
    """Scatter up to ``room_count`` non-overlapping rooms onto ``grid``.

    Rooms keep a one-cell wall margin from each other and from the border.
    Ids are handed out in placement order starting at FIRST_ROOM_ID and the
    room interiors are stamped into the grid with their id.
    """
    if rng is None:
        rng = random
    lo, hi = side_range(avg_room_size)
    attempts = room_count * ATTEMPTS_PER_ROOM
    rooms: List[Room] = []
    while len(rooms) < room_count and attempts > 0:
        attempts -= 1
        w = rng.randint(lo, hi)
        h = rng.randint(lo, hi)
        if w > width - 2 or h > height - 2:
            continue
        x = rng.randint(1, width - w - 1)
        y = rng.randint(1, height - h - 1)
        candidate = Room(FIRST_ROOM_ID + len(rooms), x, y, w, h)
        if _room_overlaps(candidate, rooms):
            continue
        for ix, iy in candidate.cells():
            grid[iy][ix] = candidate.id
        rooms.append(candidate)
    return rooms


def _room_overlaps(room: Room, existing: List[Room]) -> bool:
    pad = 1  # one wall cell between neighbours
    for r in existing:
        if (
            room.x - pad < r.x + r.w
            and room.x + room.w + pad > r.x
            and room.y - pad < r.y + r.h
            and room.y + room.h + pad > r.y
        ):
            return True
    return False
