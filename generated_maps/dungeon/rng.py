"""Injectable uniform random source.

Every stage draws from one object exposing ``random() -> float`` in
``[0, 1)``. A :class:`random.Random` instance satisfies the protocol; the
helpers below derive integers and shuffles from that single call so two runs
fed the same sequence carve identical grids.
"""
from __future__ import annotations

import random
from typing import List, MutableSequence, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...


class SequenceRandom:
    """Replays a fixed list of floats, wrapping around when exhausted."""

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        self._values: List[float] = [float(v) % 1.0 for v in values]
        self._pos = 0

    def random(self) -> float:
        v = self._values[self._pos]
        self._pos = (self._pos + 1) % len(self._values)
        return v


def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


def rand_below(rng: RandomSource, n: int) -> int:
    """Uniform int in ``[0, n)``; 0 when ``n <= 0``."""
    if n <= 0:
        return 0
    return min(int(rng.random() * n), n - 1)


def shuffle(rng: RandomSource, items: MutableSequence[T]) -> MutableSequence[T]:
    # Fisher-Yates, in place
    for i in range(len(items) - 1, 0, -1):
        j = rand_below(rng, i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def odd_between(rng: RandomSource, lo: int, hi: int) -> int:
    """Random odd number in ``[lo, hi]`` (``lo`` floored at 1).

    When the range holds no odd number the smallest odd ``>= lo`` is returned.
    """
    lo = max(int(lo), 1)
    hi = max(int(hi), lo)
    first = lo | 1
    if first > hi:
        return first
    count = (hi - first) // 2 + 1
    return first + 2 * rand_below(rng, count)


__all__ = [
    "RandomSource",
    "SequenceRandom",
    "make_rng",
    "rand_below",
    "shuffle",
    "odd_between",
]
