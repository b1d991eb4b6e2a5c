"""Dead-end pruning for the carved corridor network.

Two passes, mirroring how the map looks once doors are in place:

* peel corridor cells with at most one open neighbour until nothing changes
  (or the pass budget runs out), never touching doors, stairs or the corridor
  cell right outside a door;
* flood from every door/stair and block any corridor the flood never reached.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, List, NamedTuple, Set, Tuple

from .cells import NEIGHBORS, STAIRS, Cell
from .grid import Grid

Coord2D = Tuple[int, int]


class PruneStats(NamedTuple):
    passes: int
    peeled: int
    unreachable: int


def protected_cells(grid: Grid) -> Set[Coord2D]:
    """Doors, stairs, and corridor cells orthogonally next to a door."""
    keep: Set[Coord2D] = set()
    for x, y in grid.interior():
        if not grid.has(x, y, Cell.DOOR | STAIRS):
            continue
        keep.add((x, y))
        if grid.has(x, y, Cell.DOOR):
            for dx, dy in NEIGHBORS:
                nx, ny = x + dx, y + dy
                if grid.in_bounds(nx, ny) and grid.is_corridor(nx, ny):
                    keep.add((nx, ny))
    return keep


def peel_dead_ends(grid: Grid, max_passes: int, keep: Set[Coord2D]) -> Tuple[int, int]:
    """Iteratively block unprotected dead-end corridors; returns (passes, cells)."""
    passes = peeled = 0
    for _ in range(max(1, max_passes)):
        passes += 1
        to_fill: List[Coord2D] = [
            (x, y)
            for x, y in grid.interior()
            if grid.is_corridor(x, y) and (x, y) not in keep and grid.open_degree(x, y) <= 1
        ]
        if not to_fill:
            break
        for x, y in to_fill:
            grid.block(x, y)
        peeled += len(to_fill)
    return passes, peeled


def flood_from_entrances(grid: Grid) -> Set[Coord2D]:
    """BFS over open cells seeded by doors, stairs and door-adjacent corridors."""
    seen: Set[Coord2D] = set()
    q: Deque[Coord2D] = deque()
    for x, y in grid.interior():
        if not grid.has(x, y, Cell.DOOR | STAIRS):
            continue
        if (x, y) not in seen:
            seen.add((x, y))
            q.append((x, y))
        if grid.has(x, y, Cell.DOOR):
            for dx, dy in NEIGHBORS:
                nx, ny = x + dx, y + dy
                if grid.in_bounds(nx, ny) and grid.is_corridor(nx, ny) and (nx, ny) not in seen:
                    seen.add((nx, ny))
                    q.append((nx, ny))
    while q:
        cx, cy = q.popleft()
        for dx, dy in NEIGHBORS:
            nx, ny = cx + dx, cy + dy
            if not grid.in_bounds(nx, ny) or (nx, ny) in seen:
                continue
            if not grid.is_open(nx, ny):
                continue
            seen.add((nx, ny))
            q.append((nx, ny))
    return seen


def prune_unreachable(grid: Grid) -> int:
    reached = flood_from_entrances(grid)
    pruned = 0
    for x, y in grid.interior():
        if grid.is_corridor(x, y) and (x, y) not in reached:
            grid.block(x, y)
            pruned += 1
    return pruned


def remove_dead_ends(grid: Grid, max_passes: int = 50) -> PruneStats:
    keep = protected_cells(grid)
    passes, peeled = peel_dead_ends(grid, max_passes, keep)
    unreachable = prune_unreachable(grid)
    return PruneStats(passes, peeled, unreachable)


__all__ = [
    "PruneStats",
    "protected_cells",
    "peel_dead_ends",
    "flood_from_entrances",
    "prune_unreachable",
    "remove_dead_ends",
]
