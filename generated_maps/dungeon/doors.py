"""Door placement: open room perimeter cells that face a carved corridor.

Functions mutate the grid in place and report per-room door counts so the
pipeline can fill its metrics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Sequence, Tuple

from .cells import Cell
from .config import DungeonOptions
from .grid import Grid
from .rng import RandomSource, rand_below
from .rooms import Room

MAX_DOORS_PER_ROOM = 3


@dataclass(frozen=True)
class Door:
    x: int
    y: int
    orientation: str
    kind: str = "door"

    def to_dict(self):
        return {"x": self.x, "y": self.y, "orientation": self.orientation, "type": self.kind}


class DoorSite(NamedTuple):
    x: int
    y: int
    out_x: int
    out_y: int
    orientation: str


def door_sites(room: Room) -> List[DoorSite]:
    """Straight-side perimeter cells of ``room`` paired with the cell beyond them.

    Corners are left out: a corner cell never touches the room orthogonally.
    """
    sites: List[DoorSite] = []
    top, bottom = room.y - 1, room.y + room.height
    left, right = room.x - 1, room.x + room.width
    for x in range(room.x, room.x + room.width):
        sites.append(DoorSite(x, top, x, top - 1, "N"))
        sites.append(DoorSite(x, bottom, x, bottom + 1, "S"))
    for y in range(room.y, room.y + room.height):
        sites.append(DoorSite(left, y, left - 1, y, "W"))
        sites.append(DoorSite(right, y, right + 1, y, "E"))
    return sites


def open_doors(grid: Grid, rooms: Sequence[Room], options: DungeonOptions, rng: RandomSource) -> Tuple[List[Door], Dict[str, int]]:
    """Open up to three doors per room where the perimeter abuts a corridor.

    Each attempt removes one random candidate site; a room whose sampled
    sites never face a corridor ends up with no door and stays isolated.
    Returns ``(doors, doors_per_room)``.
    """
    doors: List[Door] = []
    per_room: Dict[str, int] = {}
    for room in rooms:
        sites = door_sites(room)
        attempts = opened = 0
        while attempts < options.door_attempts_per_room and opened < MAX_DOORS_PER_ROOM and sites:
            attempts += 1
            site = sites.pop(rand_below(rng, len(sites)))
            if not (grid.in_bounds(site.x, site.y) and grid.in_bounds(site.out_x, site.out_y)):
                continue
            if not grid.is_corridor(site.out_x, site.out_y):
                continue
            grid.clear_flags(site.x, site.y, Cell.BLOCKED)
            grid.add_flags(site.x, site.y, Cell.DOOR)
            doors.append(Door(site.x, site.y, site.orientation))
            opened += 1
        per_room[room.label] = opened
    return doors, per_room


__all__ = ["Door", "DoorSite", "door_sites", "open_doors", "MAX_DOORS_PER_ROOM"]
