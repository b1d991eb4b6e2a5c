from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from .cells import Cell, Point
from .config import DungeonOptions
from .grid import Grid
from .rng import RandomSource, odd_between

FEET_PER_CELL = 5
ATTEMPTS_PER_ROOM = 8


@dataclass(frozen=True)
class Room:
    x: int
    y: int
    width: int
    height: int
    label: str = ""
    description: str = ""

    def cells(self) -> Iterator[Tuple[int, int]]:
        for iy in range(self.y, self.y + self.height):
            for ix in range(self.x, self.x + self.width):
                yield ix, iy

    @property
    def center(self) -> Point:
        return Point(self.x + self.width // 2, self.y + self.height // 2)

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "label": self.label,
            "description": self.description,
        }


@dataclass(frozen=True)
class Label:
    x: int
    y: int
    text: str

    def to_dict(self):
        return {"x": self.x, "y": self.y, "text": self.text}


def describe_room(width: int, height: int) -> str:
    return f"{width * FEET_PER_CELL} x {height * FEET_PER_CELL} ft room"


def make_room(x: int, y: int, width: int, height: int, index: int) -> Room:
    """Room numbered ``index + 1`` with its size description filled in."""
    return Room(x, y, width, height, label=str(index + 1), description=describe_room(width, height))


def place_rooms(grid: Grid, target_rooms: int, options: DungeonOptions, rng: RandomSource):
    """Scatter non-overlapping odd-aligned rooms onto the grid.

    Makes ``target_rooms * 8`` attempts and stops early once the target is
    met. Returns ``(rooms, labels, descriptions, attempts_used)``; a shortfall
    is only visible through ``len(rooms)``.
    """
    # largest side that still leaves room for the perimeter inside the ring
    side_cap = max(1, min(grid.width, grid.height) - 4)
    room_min = min(options.room_min, side_cap)
    room_max = max(room_min, min(options.room_max, side_cap))

    rooms: List[Room] = []
    labels: List[Label] = []
    descriptions: Dict[str, str] = {}
    attempts = max(0, target_rooms) * ATTEMPTS_PER_ROOM
    used = 0
    while used < attempts and len(rooms) < target_rooms:
        used += 1
        rw = odd_between(rng, room_min, room_max)
        rh = odd_between(rng, room_min, room_max)
        rx = odd_between(rng, 1, grid.width - rw - 2)
        ry = odd_between(rng, 1, grid.height - rh - 2)
        if not _fits(grid, rx, ry, rw, rh):
            continue
        room = make_room(rx, ry, rw, rh, len(rooms))
        _stamp(grid, room)
        rooms.append(room)
        cx, cy = room.center
        labels.append(Label(cx, cy, room.label))
        descriptions[room.label] = room.description
    return rooms, labels, descriptions, used


def _fits(grid: Grid, rx: int, ry: int, rw: int, rh: int) -> bool:
    # room must end before the last interior column/row so its perimeter stays inside the ring
    if rx + rw > grid.width - 2 or ry + rh > grid.height - 2:
        return False
    x0, y0 = max(0, rx - 1), max(0, ry - 1)
    x1 = min(grid.width - 1, rx + rw)
    y1 = min(grid.height - 1, ry + rh)
    busy = Cell.ROOM | Cell.CORRIDOR
    for y in range(y0, y1 + 1):
        for x in range(x0, x1 + 1):
            if grid.has(x, y, busy):
                return False
    return True


def _stamp(grid: Grid, room: Room) -> None:
    for ix, iy in room.cells():
        grid.clear_flags(ix, iy, Cell.BLOCKED)
        grid.add_flags(ix, iy, Cell.ROOM)
    rx, ry, rw, rh = room.x, room.y, room.width, room.height
    for x in range(rx - 1, rx + rw + 1):
        for y in (ry - 1, ry + rh):
            if grid.in_bounds(x, y):
                grid.add_flags(x, y, Cell.PERIM)
    for y in range(ry - 1, ry + rh + 1):
        for x in (rx - 1, rx + rw):
            if grid.in_bounds(x, y):
                grid.add_flags(x, y, Cell.PERIM)


__all__ = ["Room", "Label", "FEET_PER_CELL", "describe_room", "make_room", "place_rooms"]
