"""Mutable bitmask grid shared by every generation stage.

Rows are indexed ``[y][x]``. Cells hold plain ints built from :class:`Cell`
flags; the outermost ring is never written by the pipeline so it stays
``BLOCKED``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .cells import NEIGHBORS, OPEN, Cell, Point

MIN_DIMENSION = 21


@dataclass
class Grid:
    width: int
    height: int
    rows: List[List[int]]

    @classmethod
    def create(cls, width: int, height: int) -> "Grid":
        width = max(MIN_DIMENSION, int(width))
        height = max(MIN_DIMENSION, int(height))
        rows = [[int(Cell.BLOCKED)] * width for _ in range(height)]
        return cls(width=width, height=height, rows=rows)

    def get(self, x: int, y: int) -> int:
        return self.rows[y][x]

    def set(self, x: int, y: int, value: int) -> None:
        self.rows[y][x] = int(value)

    def add_flags(self, x: int, y: int, flags: int) -> None:
        self.rows[y][x] |= int(flags)

    def clear_flags(self, x: int, y: int, flags: int) -> None:
        self.rows[y][x] &= ~int(flags)

    def has(self, x: int, y: int, flags: int) -> bool:
        return (self.rows[y][x] & int(flags)) != 0

    def block(self, x: int, y: int) -> None:
        self.rows[y][x] = int(Cell.BLOCKED)

    def in_bounds(self, x: int, y: int) -> bool:
        """Strict interior test: the outer ring is out of bounds."""
        return 0 < x < self.width - 1 and 0 < y < self.height - 1

    def is_open(self, x: int, y: int) -> bool:
        return (self.rows[y][x] & OPEN) != 0

    def is_corridor(self, x: int, y: int) -> bool:
        return (self.rows[y][x] & Cell.CORRIDOR) != 0

    def open_degree(self, x: int, y: int) -> int:
        return sum(1 for dx, dy in NEIGHBORS if self.is_open(x + dx, y + dy))

    def interior(self) -> Iterator[Tuple[int, int]]:
        for y in range(1, self.height - 1):
            for x in range(1, self.width - 1):
                yield x, y

    def cells_with(self, flags: int) -> List[Point]:
        """Interior cells carrying any of ``flags``, in row-major order."""
        return [Point(x, y) for x, y in self.interior() if self.rows[y][x] & flags]

    def count(self, flags: int) -> int:
        return sum(1 for row in self.rows for v in row if v & flags)

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(row) for row in self.rows)


__all__ = ["Grid", "MIN_DIMENSION"]
