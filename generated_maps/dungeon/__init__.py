"""Public dungeon package interface.

Donjon-style pipeline, the BSP alternative and the helpers shared by the API
and CLI.
"""

from .cells import Cell, Point, Segment  # noqa: F401
from .config import CAMEL_KEYS, PRESETS, DungeonOptions  # noqa: F401
from .debug_checks import Analysis, analyze  # noqa: F401
from .grid import MIN_DIMENSION, Grid  # noqa: F401
from .pipeline import DungeonResult, generate, generate_map  # noqa: F401
from .rng import RandomSource, SequenceRandom, make_rng  # noqa: F401
from .tiles import render_ascii, summary_line  # noqa: F401

__all__ = [
    "Cell",
    "Point",
    "Segment",
    "DungeonOptions",
    "PRESETS",
    "CAMEL_KEYS",
    "Analysis",
    "analyze",
    "Grid",
    "MIN_DIMENSION",
    "DungeonResult",
    "generate",
    "generate_map",
    "RandomSource",
    "SequenceRandom",
    "make_rng",
    "render_ascii",
    "summary_line",
]
