"""Corridor topology reduction.

Shrinks the carved network down to the shortest paths that join the doors:
BFS from every terminal (the first corridor cell outside each door), Prim's
algorithm over the pairwise BFS distances, then every corridor cell that is
not on a chosen path (or on a short retained spur) is filled back in.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from .cells import NEIGHBORS, Point
from .doors import Door
from .grid import Grid

Coord2D = Tuple[int, int]
INF = float("inf")


class BFSMap(NamedTuple):
    dist: Dict[Coord2D, int]
    prev: Dict[Coord2D, Optional[Coord2D]]

    def distance(self, cell: Coord2D) -> float:
        return self.dist.get(cell, INF)


class MstStats(NamedTuple):
    terminals: int
    paths: int
    pruned: int
    kept: int


def bfs_from(grid: Grid, start: Coord2D) -> BFSMap:
    """Distances and predecessors from ``start`` to every reachable open cell."""
    dist: Dict[Coord2D, int] = {start: 0}
    prev: Dict[Coord2D, Optional[Coord2D]] = {start: None}
    q: Deque[Coord2D] = deque([start])
    while q:
        x, y = q.popleft()
        for dx, dy in NEIGHBORS:
            nx, ny = x + dx, y + dy
            if not grid.in_bounds(nx, ny) or not grid.is_open(nx, ny):
                continue
            if (nx, ny) in dist:
                continue
            dist[(nx, ny)] = dist[(x, y)] + 1
            prev[(nx, ny)] = (x, y)
            q.append((nx, ny))
    return BFSMap(dist, prev)


def find_terminals(grid: Grid, doors: Sequence[Door]) -> List[Point]:
    """First corridor neighbour of each door (one terminal per door)."""
    terms: List[Point] = []
    for door in doors:
        for dx, dy in NEIGHBORS:
            nx, ny = door.x + dx, door.y + dy
            if grid.in_bounds(nx, ny) and grid.is_corridor(nx, ny):
                terms.append(Point(nx, ny))
                break
    return terms


def distance_edges(terms: Sequence[Point], maps: Sequence[BFSMap]) -> List[Tuple[int, int, int]]:
    """Finite pairwise terminal distances as ``(i, j, weight)`` with ``i < j``."""
    edges: List[Tuple[int, int, int]] = []
    for i in range(len(terms)):
        for j in range(i + 1, len(terms)):
            d = maps[i].distance(terms[j])
            if d < INF:
                edges.append((i, j, int(d)))
    return edges


def prim_paths(terms: Sequence[Point], maps: Sequence[BFSMap], edges: Sequence[Tuple[int, int, int]]) -> Tuple[Set[Coord2D], int]:
    """Cells on the Prim's tree paths between terminals, plus the path count.

    Ties go to the first minimum in edge order. When no edge reaches the
    unconnected terminals the next one starts a tree of its own.
    """
    n = len(terms)
    keep: Set[Coord2D] = set()
    in_tree = [False] * n
    in_tree[0] = True
    keep.add(tuple(terms[0]))
    paths = 0
    for _ in range(n - 1):
        best = None
        for i, j, w in edges:
            if in_tree[i] != in_tree[j] and (best is None or w < best[2]):
                best = (i, j, w)
        if best is None:
            k = in_tree.index(False)
            in_tree[k] = True
            keep.add(tuple(terms[k]))
            continue
        i, j, _w = best
        a, b = (i, j) if in_tree[i] else (j, i)
        keep.update(_trace(maps[a], tuple(terms[a]), tuple(terms[b])))
        in_tree[b] = True
        paths += 1
    return keep, paths


def _trace(bfs: BFSMap, source: Coord2D, target: Coord2D) -> List[Coord2D]:
    cells: List[Coord2D] = []
    cur: Optional[Coord2D] = target
    while cur is not None and cur != source:
        cells.append(cur)
        cur = bfs.prev.get(cur)
    cells.append(source)
    return cells


def grow_spurs(grid: Grid, keep: Set[Coord2D], max_len: int) -> Set[Coord2D]:
    """Open cells within ``max_len`` steps of the kept network."""
    if max_len <= 0:
        return set()
    seen = set(keep)
    added: Set[Coord2D] = set()
    q: Deque[Tuple[int, int, int]] = deque((x, y, 0) for x, y in sorted(keep))
    while q:
        x, y, d = q.popleft()
        if d >= max_len:
            continue
        for dx, dy in NEIGHBORS:
            nx, ny = x + dx, y + dy
            if not grid.in_bounds(nx, ny) or not grid.is_open(nx, ny):
                continue
            if (nx, ny) in seen:
                continue
            seen.add((nx, ny))
            added.add((nx, ny))
            q.append((nx, ny, d + 1))
    return added


def prune_to_mst(grid: Grid, doors: Sequence[Door], spur_max_len: int = 0) -> MstStats:
    """Keep only the minimal corridor network joining the door terminals.

    With fewer than two terminals, or when no two terminals are connected,
    the grid is left untouched.
    """
    terms = find_terminals(grid, doors)
    if len(terms) <= 1:
        return MstStats(len(terms), 0, 0, 0)
    maps = [bfs_from(grid, tuple(t)) for t in terms]
    edges = distance_edges(terms, maps)
    if not edges:
        return MstStats(len(terms), 0, 0, 0)

    keep, paths = prim_paths(terms, maps, edges)
    keep |= grow_spurs(grid, keep, spur_max_len)

    pruned = 0
    for x, y in grid.interior():
        if grid.is_corridor(x, y) and (x, y) not in keep:
            grid.block(x, y)
            pruned += 1
    return MstStats(len(terms), paths, pruned, len(keep))


__all__ = [
    "BFSMap",
    "MstStats",
    "bfs_from",
    "find_terminals",
    "distance_edges",
    "prim_paths",
    "grow_spurs",
    "prune_to_mst",
]
