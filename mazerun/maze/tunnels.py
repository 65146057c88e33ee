import random
from typing import List, Tuple

from .rooms import Room
from .tiles import CORRIDOR, WALL


def spanning_edges(rooms: List[Room]) -> List[Tuple[int, int]]:
    """Minimum spanning tree over room centers using Manhattan distance.

    Returns index pairs into ``rooms``; ties are broken by index so the tree
    only depends on room placement.
    """
    centers = [r.center for r in rooms]
    edges = []
    for i in range(len(centers)):
        x1, y1 = centers[i]
        for j in range(i + 1, len(centers)):
            x2, y2 = centers[j]
            edges.append((abs(x1 - x2) + abs(y1 - y2), i, j))
    edges.sort()
    parent = list(range(len(centers)))

    def find(a):
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    mst = []
    for _dist, i, j in edges:
        fi, fj = find(i), find(j)
        if fi != fj:
            parent[fi] = fj
            mst.append((i, j))
    return mst


def connect_rooms(grid, rooms: List[Room], rng=None):
    if rng is None:
        rng = random
    for i, j in spanning_edges(rooms):
        carve_corridor(grid, rooms[i].center, rooms[j].center, horizontal_first=rng.random() < 0.5)


def carve_corridor(grid, a: Tuple[int, int], b: Tuple[int, int], horizontal_first: bool = True):
    """Carve an L-shaped corridor between two points.

    Only WALL cells are converted; room cells crossed on the way keep their id.
    """
    x, y = a
    gx, gy = b
    if horizontal_first:
        legs = ((gx, y), (gx, gy))
    else:
        legs = ((x, gy), (gx, gy))
    for tx, ty in legs:
        while (x, y) != (tx, ty):
            if x != tx:
                x += 1 if tx > x else -1
            else:
                y += 1 if ty > y else -1
            if grid[y][x] == WALL:
                grid[y][x] = CORRIDOR
