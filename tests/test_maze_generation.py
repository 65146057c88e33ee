"""Maze provider structural tests.

Covered:
1. Room ids are sequential from 2 and next_room_id - 1 is the last room.
2. Room interiors carry their id; rooms keep a wall margin and stay off the border.
3. Every room is reachable from the first room.
4. A seeded random source reproduces the same maze.
"""

from __future__ import annotations

import random

import pytest

from mazerun.maze import CORRIDOR, FIRST_ROOM_ID, WALL, generate, render_ascii
from mazerun.maze.rooms import side_range
from mazerun.maze.tunnels import carve_corridor, spanning_edges
from tests.maze_utils import bfs_reachable

SEEDS = range(20)


def gen(seed: int, width=20, height=20, rooms=7, size=8):
    return generate(height, width, rooms, size, rng=random.Random(seed))


@pytest.mark.parametrize("seed", SEEDS)
def test_room_ids_sequential(seed):
    m = gen(seed)
    ids = [r.id for r in m.rooms]
    assert ids == list(range(FIRST_ROOM_ID, FIRST_ROOM_ID + len(ids)))
    assert m.next_room_id - 1 == m.rooms[-1].id


@pytest.mark.parametrize("seed", SEEDS)
def test_room_cells_hold_room_id(seed):
    m = gen(seed)
    for room in m.rooms:
        for x, y in room.cells():
            assert m.cell(x, y) == room.id, f"room {room.id} cell {(x, y)} overwritten"


@pytest.mark.parametrize("seed", SEEDS)
def test_rooms_keep_margin_and_border(seed):
    m = gen(seed)
    for room in m.rooms:
        assert room.x >= 1 and room.y >= 1
        assert room.x + room.w <= m.width - 1
        assert room.y + room.h <= m.height - 1
    for i, a in enumerate(m.rooms):
        for b in m.rooms[i + 1 :]:
            separated = a.x + a.w < b.x or b.x + b.w < a.x or a.y + a.h < b.y or b.y + b.h < a.y
            assert separated, f"rooms {a.id} and {b.id} touch"


@pytest.mark.parametrize("seed", SEEDS)
def test_all_rooms_reachable(seed):
    m = gen(seed)
    reach = bfs_reachable(m.grid, m.rooms[0].center)
    for room in m.rooms:
        assert room.center in reach, f"room {room.id} unreachable"


def test_cells_are_wall_corridor_or_room():
    m = gen(3, width=30, height=25, rooms=10, size=12)
    assert (m.width, m.height) == (30, 25)
    assert len(m.grid) == 25 and all(len(row) == 30 for row in m.grid)
    ids = {r.id for r in m.rooms}
    for row in m.grid:
        for cell in row:
            assert cell in (WALL, CORRIDOR) or cell in ids


def test_seeded_generation_is_reproducible():
    assert gen(99) == gen(99)


def test_successive_generations_differ():
    rng = random.Random(5)
    first = generate(20, 20, 7, 8, rng=rng)
    second = generate(20, 20, 7, 8, rng=rng)
    assert first.grid != second.grid


def test_crowded_grid_places_fewer_rooms():
    # A 5x5 grid has a 3x3 interior: room for one room at most
    m = gen(1, width=5, height=5, rooms=10, size=8)
    assert len(m.rooms) <= 1
    assert m.next_room_id == FIRST_ROOM_ID + len(m.rooms)


@pytest.mark.parametrize(
    "args",
    [(0, 20, 7, 8), (20, -1, 7, 8), (20, 20, 0, 8), (20, 20, 7, 0)],
)
def test_invalid_arguments_rejected(args):
    with pytest.raises(ValueError):
        generate(*args)


def test_side_range_tracks_average_area():
    assert side_range(8) == (2, 4)
    assert side_range(1) == (2, 3)
    assert side_range(36) == (5, 7)


def test_spanning_tree_has_one_edge_less_than_rooms():
    m = gen(11)
    assert len(spanning_edges(list(m.rooms))) == len(m.rooms) - 1


def test_carve_corridor_keeps_room_cells():
    grid = [[WALL] * 6 for _ in range(3)]
    grid[1][2] = 2
    carve_corridor(grid, (0, 1), (5, 1))
    assert grid[1] == [WALL, CORRIDOR, 2, CORRIDOR, CORRIDOR, CORRIDOR]


def test_carve_corridor_vertical_first():
    grid = [[WALL] * 3 for _ in range(3)]
    carve_corridor(grid, (0, 0), (2, 2), horizontal_first=False)
    assert grid[1][0] == CORRIDOR and grid[2][0] == CORRIDOR
    assert grid[2][1] == CORRIDOR and grid[2][2] == CORRIDOR
    assert grid[0][1] == WALL


def test_render_ascii_with_marks():
    m = gen(2)
    start = m.rooms[0].center
    text = render_ascii(m, marks={start: "S"})
    lines = text.splitlines()
    assert len(lines) == m.height
    assert all(len(line) == m.width for line in lines)
    assert lines[start[1]][start[0]] == "S"
    assert lines[0] == "#" * m.width


def test_room_to_dict_shape():
    room = gen(4).rooms[0]
    d = room.to_dict()
    assert set(d) == {"id", "x", "y", "width", "height", "centerX", "centerY"}
    assert (d["centerX"], d["centerY"]) == room.center


def test_render_ascii_cell_symbols():
    m = gen(4)
    lines = render_ascii(m).splitlines()
    for y, row in enumerate(m.grid):
        for x, cell in enumerate(row):
            expected = "#" if cell == WALL else "." if cell == CORRIDOR else str(cell % 10)
            assert lines[y][x] == expected
