"""Maze carving on the odd sub-lattice.

Lattice nodes sit on odd (x, y); the even cell between two neighbouring nodes
is the wall that gets carved when the DFS moves across it. Rooms and their
perimeter ring are never touched.
"""
from __future__ import annotations

from typing import List, NamedTuple, Optional, Tuple

from .cells import ROOM_OR_PERIM, Cell, Point, Segment
from .config import DungeonOptions
from .grid import Grid
from .rng import RandomSource, rand_below, shuffle

START_RETRIES = 1000


class Direction(NamedTuple):
    dx: int
    dy: int
    key: str


LATTICE_DIRECTIONS: Tuple[Direction, ...] = (
    Direction(0, -2, "N"),
    Direction(2, 0, "E"),
    Direction(0, 2, "S"),
    Direction(-2, 0, "W"),
)


class CarveOutcome(NamedTuple):
    start: Optional[Point]
    start_retries: int
    cells_carved: int
    segments: List[Segment]


def random_node(grid: Grid, rng: RandomSource) -> Point:
    x = 2 * rand_below(rng, (grid.width - 1) // 2) + 1
    y = 2 * rand_below(rng, (grid.height - 1) // 2) + 1
    return Point(x, y)


def pick_start(grid: Grid, rng: RandomSource) -> Tuple[Optional[Point], int]:
    """Random lattice node outside every room.

    After 1000 unlucky re-rolls the first free node in row-major order is
    used instead; ``None`` means rooms cover the whole lattice.
    """
    start = random_node(grid, rng)
    retries = 0
    while grid.has(start.x, start.y, ROOM_OR_PERIM) and retries < START_RETRIES:
        retries += 1
        start = random_node(grid, rng)
    if grid.has(start.x, start.y, ROOM_OR_PERIM):
        free = (
            Point(x, y)
            for y in range(1, grid.height - 1, 2)
            for x in range(1, grid.width - 1, 2)
            if not grid.has(x, y, ROOM_OR_PERIM)
        )
        return next(free, None), retries
    return start, retries


def ordered_directions(rng: RandomSource, previous: Optional[str], straight_bias: float) -> List[Direction]:
    dirs = shuffle(rng, list(LATTICE_DIRECTIONS))
    if previous is None or rng.random() > straight_bias:
        return dirs
    # stable: the previous heading moves to the front, the rest keep their shuffled order
    return sorted(dirs, key=lambda d: d.key != previous)


def carve_maze(grid: Grid, options: DungeonOptions, rng: RandomSource) -> CarveOutcome:
    """Randomized depth-first maze with an explicit stack.

    With probability ``straight_bias`` the DFS tries its previous heading
    first, which favours long straight runs. Only the lattice reachable from
    the start node is carved.
    """
    w, h = grid.width, grid.height
    start, retries = pick_start(grid, rng)
    if start is None:
        return CarveOutcome(None, retries, 0, [])
    visited = [[False] * w for _ in range(h)]
    visited[start.y][start.x] = True
    grid.set(start.x, start.y, Cell.CORRIDOR)
    carved = 1
    segments: List[Segment] = []
    stack: List[Tuple[int, int, Optional[str]]] = [(start.x, start.y, None)]

    while stack:
        x, y, heading = stack[-1]
        advanced = False
        for d in ordered_directions(rng, heading, options.straight_bias):
            nx, ny = x + d.dx, y + d.dy
            if nx <= 0 or nx >= w - 1 or ny <= 0 or ny >= h - 1:
                continue
            if visited[ny][nx]:
                continue
            if grid.has(nx, ny, ROOM_OR_PERIM):
                continue
            wx, wy = x + d.dx // 2, y + d.dy // 2
            if grid.has(wx, wy, ROOM_OR_PERIM):
                continue
            grid.set(wx, wy, Cell.CORRIDOR)
            grid.set(nx, ny, Cell.CORRIDOR)
            visited[ny][nx] = True
            carved += 2
            stack.append((nx, ny, d.key))
            segments.append(Segment(Point(x, y), Point(nx, ny)))
            advanced = True
            break
        if not advanced:
            stack.pop()
    return CarveOutcome(start, retries, carved, segments)


__all__ = ["carve_maze", "pick_start", "ordered_directions", "LATTICE_DIRECTIONS", "CarveOutcome"]
