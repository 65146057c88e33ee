# Cell values shared with clients: 0 wall, 1 corridor, 2+ room id
WALL = 0
CORRIDOR = 1
FIRST_ROOM_ID = 2


def is_walkable(cell: int) -> bool:
    return cell != WALL


def is_room(cell: int) -> bool:
    return cell >= FIRST_ROOM_ID


__all__ = ["WALL", "CORRIDOR", "FIRST_ROOM_ID", "is_walkable", "is_room"]
