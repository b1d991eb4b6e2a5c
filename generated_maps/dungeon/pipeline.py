"""Pipeline orchestration for dungeon generation.

Runs the Donjon-style stages in a fixed order over one shared grid:

    rooms -> maze -> doors -> [dead ends] -> [MST] -> stairs

No stage is retried or rolled back; each one relies on what the previous
stages left in the grid. Per-phase timings land in ``metrics['phase_ms']``.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from ..logging_utils import get_logger
from . import bsp
from .cells import Cell, Segment
from .config import DungeonOptions
from .connectivity import prune_to_mst
from .doors import Door, open_doors
from .grid import Grid
from .maze import carve_maze
from .metrics import init_metrics
from .pruning import remove_dead_ends
from .rng import RandomSource, make_rng
from .rooms import Label, Room, place_rooms
from .stairs import Stairs, place_stairs

log = get_logger("dungeon", stderr=True)

OptionsLike = Union[DungeonOptions, Mapping[str, Any], None]


@dataclass(frozen=True)
class DungeonResult:
    grid: Tuple[Tuple[int, ...], ...]
    rooms: Tuple[Room, ...]
    doors: Tuple[Door, ...]
    labels: Tuple[Label, ...]
    room_descriptions: Mapping[str, str]
    stairs: Stairs
    width: int
    height: int
    corridors: Tuple[Segment, ...] = ()
    metrics: Mapping[str, Any] = field(default_factory=dict)
    algorithm: str = "donjon"

    def cell(self, x: int, y: int) -> int:
        return self.grid[y][x]

    def has(self, x: int, y: int, flags: int) -> bool:
        return (self.grid[y][x] & int(flags)) != 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "grid": [list(row) for row in self.grid],
            "rooms": [r.to_dict() for r in self.rooms],
            "doors": [d.to_dict() for d in self.doors],
            "labels": [lab.to_dict() for lab in self.labels],
            "roomDescriptions": dict(self.room_descriptions),
            "stairs": self.stairs.to_dict(),
            "corridors": [c.to_dict() for c in self.corridors],
            "width": self.width,
            "height": self.height,
            "metrics": _plain(self.metrics),
        }


def resolve_options(options: OptionsLike) -> DungeonOptions:
    if isinstance(options, DungeonOptions):
        return options.normalized()
    return DungeonOptions.from_mapping(options).normalized()


def generate(
    width: int,
    height: int,
    target_rooms: int = 12,
    options: OptionsLike = None,
    rng: Optional[RandomSource] = None,
    *,
    seed: Optional[int] = None,
) -> DungeonResult:
    """Generate one Donjon-style dungeon.

    ``rng`` is the only source of randomness; when omitted a
    ``random.Random(seed)`` is created. Identical random sequences give
    identical grids.
    """
    opts = resolve_options(options)
    rng = rng if rng is not None else make_rng(seed)
    target_rooms = max(0, int(target_rooms))
    metrics = init_metrics(target_rooms)
    phase_times: Dict[str, float] = {}
    start = time.perf_counter()

    def _phase(label: str, fn: Callable, *a, **k):
        ps = time.perf_counter()
        r = fn(*a, **k)
        phase_times[label] = round((time.perf_counter() - ps) * 1000, 3)
        return r

    grid = Grid.create(width, height)

    rooms, labels, descriptions, attempts = _phase(
        "rooms", place_rooms, grid, target_rooms, opts, rng
    )
    metrics["rooms_placed"] = len(rooms)
    metrics["room_attempts"] = attempts

    carve = _phase("maze", carve_maze, grid, opts, rng)
    metrics["maze_start_retries"] = carve.start_retries
    metrics["maze_cells_carved"] = carve.cells_carved

    doors, per_room = _phase("doors", open_doors, grid, rooms, opts, rng)
    metrics["doors_opened"] = len(doors)
    metrics["doors_per_room"] = per_room
    metrics["rooms_without_doors"] = sum(1 for n in per_room.values() if n == 0)
    metrics["corridor_cells_after_doors"] = grid.count(Cell.CORRIDOR)

    if opts.remove_dead_ends:
        stats = _phase("dead_ends", remove_dead_ends, grid, opts.dead_end_max_passes)
        metrics["dead_end_passes"] = stats.passes
        metrics["dead_ends_pruned"] = stats.peeled
        metrics["unreachable_pruned"] = stats.unreachable

    if opts.prune_mst:
        mst = _phase("mst", prune_to_mst, grid, doors, opts.spur_max_len)
        metrics["mst_terminals"] = mst.terminals
        metrics["mst_paths"] = mst.paths
        metrics["mst_cells_pruned"] = mst.pruned

    stairs = _phase("stairs", place_stairs, grid, rng)
    metrics["stairs_placed"] = stairs.placed
    metrics["corridor_cells_final"] = grid.count(Cell.CORRIDOR)
    metrics["runtime_ms"] = round((time.perf_counter() - start) * 1000, 3)
    metrics["phase_ms"] = phase_times

    _report(grid, metrics)
    return DungeonResult(
        grid=grid.snapshot(),
        rooms=tuple(rooms),
        doors=tuple(doors),
        labels=tuple(labels),
        room_descriptions=MappingProxyType(dict(descriptions)),
        stairs=stairs,
        width=grid.width,
        height=grid.height,
        corridors=tuple(carve.segments),
        metrics=_frozen(metrics),
    )


def generate_map(
    algorithm: str,
    width: int,
    height: int,
    target_rooms: int,
    options: OptionsLike = None,
    rng: Optional[RandomSource] = None,
    *,
    seed: Optional[int] = None,
):
    """Dispatch to the Donjon pipeline or, for any other name, the BSP generator."""
    rng = rng if rng is not None else make_rng(seed)
    if (algorithm or "").lower() == "donjon":
        return generate(width, height, target_rooms, options, rng)
    return bsp.generate(width, height, target_rooms, rng)


def _report(grid: Grid, metrics: Dict[str, Any]) -> None:
    if metrics["rooms_placed"] < metrics["rooms_requested"]:
        log.info(event="rooms_short", requested=metrics["rooms_requested"], placed=metrics["rooms_placed"])
    if metrics["rooms_without_doors"]:
        log.info(event="rooms_isolated", count=metrics["rooms_without_doors"])
    if not metrics["stairs_placed"]:
        log.info(event="stairs_skipped", corridor_cells=metrics["corridor_cells_final"])
    log.debug(
        event="dungeon_generated",
        width=grid.width,
        height=grid.height,
        rooms=metrics["rooms_placed"],
        doors=metrics["doors_opened"],
        corridors=metrics["corridor_cells_final"],
        runtime_ms=metrics["runtime_ms"],
    )


def _frozen(metrics: Dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(
        {k: MappingProxyType(dict(v)) if isinstance(v, dict) else v for k, v in metrics.items()}
    )


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    return value


__all__ = ["DungeonResult", "generate", "generate_map", "resolve_options"]
