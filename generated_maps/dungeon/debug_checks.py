"""Post-generation invariant checks.

``analyze`` re-reads a finished result and lists every structural problem it
finds instead of fixing anything. Used by ``scripts/diagnose_seeds.py`` and the
test-suite; generation itself never calls it.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple

from .cells import NEIGHBORS, OPEN, STAIRS, Cell

Coord2D = Tuple[int, int]


@dataclass
class Analysis:
    ring: List[Coord2D] = field(default_factory=list)
    room_overlaps: List[Tuple[str, str]] = field(default_factory=list)
    room_margin: List[Coord2D] = field(default_factory=list)
    unreachable_corridors: List[Coord2D] = field(default_factory=list)
    stairs: List[str] = field(default_factory=list)
    doors: List[Coord2D] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(
            (self.ring, self.room_overlaps, self.room_margin, self.unreachable_corridors, self.stairs, self.doors)
        )

    def counts(self) -> Dict[str, int]:
        return {
            "ring": len(self.ring),
            "room_overlaps": len(self.room_overlaps),
            "room_margin": len(self.room_margin),
            "unreachable_corridors": len(self.unreachable_corridors),
            "stairs": len(self.stairs),
            "doors": len(self.doors),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, **self.counts()}


def analyze(result, *, check_reachability: bool = True) -> Analysis:
    """Check ring, room spacing, corridor reachability, stairs and doors.

    BSP results carry a 0/1 grid and only get the ring and room-bounds checks.
    Reachability only holds once dead ends or the MST pass have run, so callers
    that disabled both pass ``check_reachability=False``.
    """
    report = Analysis()
    grid = result.grid
    width, height = result.width, result.height
    binary = getattr(result, "algorithm", "donjon") != "donjon"
    blocked_value = 0 if binary else int(Cell.BLOCKED)

    for x, y in _ring(width, height):
        if grid[y][x] != blocked_value:
            report.ring.append((x, y))

    rooms = list(result.rooms)
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            # one clear cell must separate any two rooms
            if _overlaps(a.x - 1, a.y - 1, a.width + 2, a.height + 2, b):
                report.room_overlaps.append((a.label, b.label))

    if binary:
        for room in rooms:
            if room.x < 1 or room.y < 1 or room.x + room.width > width - 1 or room.y + room.height > height - 1:
                report.room_overlaps.append((room.label, "bounds"))
        return report

    for room in rooms:
        for x, y in _ring_around(room):
            if 0 <= x < width and 0 <= y < height and grid[y][x] & Cell.CORRIDOR:
                report.room_margin.append((x, y))

    if check_reachability:
        reached = _flood(grid, width, height)
        for y in range(height):
            for x in range(width):
                if grid[y][x] & Cell.CORRIDOR and (x, y) not in reached:
                    report.unreachable_corridors.append((x, y))

    _check_stairs(result, report)
    _check_doors(result, report)
    return report


def _ring(width: int, height: int):
    for x in range(width):
        yield x, 0
        yield x, height - 1
    for y in range(1, height - 1):
        yield 0, y
        yield width - 1, y


def _ring_around(room):
    for x in range(room.x - 1, room.x + room.width + 1):
        yield x, room.y - 1
        yield x, room.y + room.height
    for y in range(room.y, room.y + room.height):
        yield room.x - 1, y
        yield room.x + room.width, y


def _overlaps(x: int, y: int, w: int, h: int, room) -> bool:
    return x < room.x + room.width and room.x < x + w and y < room.y + room.height and room.y < y + h


def _flood(grid, width: int, height: int) -> Set[Coord2D]:
    seeds = [(x, y) for y in range(height) for x in range(width) if grid[y][x] & (Cell.DOOR | STAIRS)]
    seen: Set[Coord2D] = set(seeds)
    q = deque(seeds)
    while q:
        x, y = q.popleft()
        for dx, dy in NEIGHBORS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in seen and grid[ny][nx] & OPEN:
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen


def _check_stairs(result, report: Analysis) -> None:
    stairs = result.stairs
    if not stairs.placed:
        return
    up, down = stairs.up, stairs.down
    if up == down:
        report.stairs.append("coincident")
    for name, point, flag in (("up", up, Cell.STAIR_UP), ("down", down, Cell.STAIR_DN)):
        value = result.grid[point.y][point.x]
        if not value & Cell.CORRIDOR:
            report.stairs.append(f"{name}_not_corridor")
        if not value & flag:
            report.stairs.append(f"{name}_flag_missing")


def _check_doors(result, report: Analysis) -> None:
    grid = result.grid
    for door in result.doors:
        value = grid[door.y][door.x]
        rooms_adjacent = open_adjacent = 0
        for dx, dy in NEIGHBORS:
            n = grid[door.y + dy][door.x + dx]
            if n & Cell.ROOM:
                rooms_adjacent += 1
            elif n & OPEN:
                open_adjacent += 1
        if not (value & Cell.DOOR and value & Cell.PERIM) or rooms_adjacent != 1 or open_adjacent == 0:
            report.doors.append((door.x, door.y))


__all__ = ["Analysis", "analyze"]
