from enum import IntFlag
from typing import NamedTuple, Tuple


class Cell(IntFlag):
    """Bit flags stored in every grid cell.

    The numeric values are part of the map contract shared with renderers and
    must not change.
    """

    NONE = 0
    BLOCKED = 0x01
    ROOM = 0x02
    CORRIDOR = 0x04
    PERIM = 0x08
    DOOR = 0x10
    STAIR_UP = 0x20
    STAIR_DN = 0x40


OPEN = Cell.CORRIDOR | Cell.DOOR | Cell.STAIR_UP | Cell.STAIR_DN
STAIRS = Cell.STAIR_UP | Cell.STAIR_DN
ROOM_OR_PERIM = Cell.ROOM | Cell.PERIM

# 4-neighbourhood in the probe order used by every flood fill
NEIGHBORS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Point(NamedTuple):
    x: int
    y: int

    def manhattan(self, other: "Point") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_dict(self):
        return {"x": self.x, "y": self.y}


class Segment(NamedTuple):
    start: Point
    end: Point

    def to_dict(self):
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


__all__ = ["Cell", "OPEN", "STAIRS", "ROOM_OR_PERIM", "NEIGHBORS", "Point", "Segment"]
