from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cells import Cell, Point
from .grid import Grid
from .rng import RandomSource, rand_below

STAIR_SAMPLES = 50


@dataclass(frozen=True)
class Stairs:
    up: Optional[Point] = None
    down: Optional[Point] = None

    @property
    def placed(self) -> bool:
        return self.up is not None and self.down is not None

    def to_dict(self):
        return {
            "up": self.up.to_dict() if self.up else None,
            "down": self.down.to_dict() if self.down else None,
        }


def place_stairs(grid: Grid, rng: RandomSource) -> Stairs:
    """Put an up and a down stair on two far-apart corridor cells.

    ``a`` is a random corridor cell; ``b`` is the farthest (Manhattan) of 50
    random samples drawn from the remaining corridor cells, so the two never
    coincide. With fewer than two corridor cells no stairs are placed.
    """
    cells = grid.cells_with(Cell.CORRIDOR)
    if len(cells) < 2:
        return Stairs()
    a = cells.pop(rand_below(rng, len(cells)))
    best, best_d = None, -1
    for _ in range(STAIR_SAMPLES):
        b = cells[rand_below(rng, len(cells))]
        d = a.manhattan(b)
        if d > best_d:
            best, best_d = b, d
    grid.add_flags(a.x, a.y, Cell.STAIR_UP)
    grid.add_flags(best.x, best.y, Cell.STAIR_DN)
    return Stairs(up=a, down=best)


__all__ = ["Stairs", "place_stairs", "STAIR_SAMPLES"]
