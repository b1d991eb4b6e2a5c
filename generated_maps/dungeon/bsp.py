"""Binary space partition generator.

The simpler of the two generators: split the map into rectangles, drop one
room in each leaf and join sibling subtrees with L-shaped corridors. Output
is a plain 0/1 grid (1 = floor) with the same room list shape as the Donjon
pipeline, so callers that only need grid/rooms/size can use either.

The partition tree lives in an arena: nodes are addressed by index and keep
explicit parent/left/right indices (-1 when absent).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .cells import Point, Segment
from .grid import MIN_DIMENSION
from .rng import RandomSource, make_rng, rand_below
from .rooms import Room, make_room

MIN_LEAF = 6
ROOM_MIN = 4
ROOM_MAX = 10
INITIAL_DEPTH = 6
AGGRESSIVE_DEPTH = 8
RETRIES = 5


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def center_x(self) -> int:
        return self.x + self.width // 2

    @property
    def center_y(self) -> int:
        return self.y + self.height // 2


@dataclass
class BSPNode:
    rect: Rect
    parent: int = -1
    left: int = -1
    right: int = -1
    room: Optional[Rect] = None
    corridors: List[Segment] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.left < 0 and self.right < 0


class BSPTree:
    def __init__(self, root: Rect, rng: RandomSource):
        self.rng = rng
        self.nodes: List[BSPNode] = [BSPNode(root)]

    def add(self, rect: Rect, parent: int) -> int:
        self.nodes.append(BSPNode(rect, parent=parent))
        return len(self.nodes) - 1

    def split(self, idx: int, min_size: int = MIN_LEAF) -> bool:
        node = self.nodes[idx]
        if not node.is_leaf:
            return False
        x, y, w, h = node.rect
        if w < min_size * 2 or h < min_size * 2:
            return False
        if self.rng.random() > 0.5:
            cut = min_size + rand_below(self.rng, h - min_size * 2)
            first, second = Rect(x, y, w, cut), Rect(x, y + cut, w, h - cut)
        else:
            cut = min_size + rand_below(self.rng, w - min_size * 2)
            first, second = Rect(x, y, cut, h), Rect(x + cut, y, w - cut, h)
        node.left = self.add(first, idx)
        node.right = self.add(second, idx)
        return True

    def split_recursively(self, idx: int = 0, depth: int = 0, max_depth: int = INITIAL_DEPTH) -> None:
        if depth >= max_depth:
            return
        if self.split(idx):
            node = self.nodes[idx]
            self.split_recursively(node.left, depth + 1, max_depth)
            self.split_recursively(node.right, depth + 1, max_depth)

    def split_aggressively(self, idx: int, target_leaves: int, depth: int = 0) -> None:
        if self.count_leaves(idx) < target_leaves and depth < AGGRESSIVE_DEPTH:
            if self.split(idx):
                node = self.nodes[idx]
                self.split_aggressively(node.left, target_leaves, depth + 1)
                self.split_aggressively(node.right, target_leaves, depth + 1)

    def count_leaves(self, idx: int = 0) -> int:
        node = self.nodes[idx]
        if node.is_leaf:
            return 1
        return sum(self.count_leaves(c) for c in (node.left, node.right) if c >= 0)

    def create_rooms(self, idx: int = 0) -> None:
        """Room per leaf; each internal node then links one room from each side."""
        node = self.nodes[idx]
        if node.is_leaf:
            x, y, w, h = node.rect
            rw = min(ROOM_MAX, max(ROOM_MIN, w - 2))
            rh = min(ROOM_MAX, max(ROOM_MIN, h - 2))
            rx = x + 1 + rand_below(self.rng, w - rw - 1)
            ry = y + 1 + rand_below(self.rng, h - rh - 1)
            node.room = Rect(rx, ry, rw, rh)
            return
        for child in (node.left, node.right):
            if child >= 0:
                self.create_rooms(child)
        if node.left >= 0 and node.right >= 0:
            self._link(node, self.pick_room(node.left), self.pick_room(node.right))

    def pick_room(self, idx: int) -> Optional[Rect]:
        node = self.nodes[idx]
        if node.is_leaf:
            return node.room
        left = self.pick_room(node.left) if node.left >= 0 else None
        right = self.pick_room(node.right) if node.right >= 0 else None
        if left is None or right is None:
            return left or right
        return left if self.rng.random() > 0.5 else right

    def _link(self, node: BSPNode, a: Optional[Rect], b: Optional[Rect]) -> None:
        if a is None or b is None:
            return
        p1 = Point(a.center_x, a.center_y)
        p2 = Point(b.center_x, b.center_y)
        bend = Point(p2.x, p1.y) if self.rng.random() > 0.5 else Point(p1.x, p2.y)
        node.corridors.append(Segment(p1, bend))
        node.corridors.append(Segment(bend, p2))

    def rooms(self) -> List[Rect]:
        return [n.room for n in self._walk() if n.is_leaf and n.room is not None]

    def corridors(self) -> List[Segment]:
        return [seg for n in self._walk() for seg in n.corridors]

    def _walk(self):
        # pre-order from the root, left before right
        stack = [0]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(c for c in (node.right, node.left) if c >= 0)


@dataclass(frozen=True)
class BSPResult:
    grid: Tuple[Tuple[int, ...], ...]
    rooms: Tuple[Room, ...]
    corridors: Tuple[Segment, ...]
    width: int
    height: int
    algorithm: str = "bsp"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "grid": [list(row) for row in self.grid],
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [c.to_dict() for c in self.corridors],
            "width": self.width,
            "height": self.height,
        }


def draw_line(grid: List[List[int]], start: Point, end: Point) -> None:
    """Bresenham line of floor cells, clipped to the grid."""
    height, width = len(grid), len(grid[0])
    dx, dy = abs(end.x - start.x), abs(end.y - start.y)
    sx = 1 if start.x < end.x else -1
    sy = 1 if start.y < end.y else -1
    err = dx - dy
    x, y = start
    while True:
        if 0 <= x < width and 0 <= y < height:
            grid[y][x] = 1
        if x == end.x and y == end.y:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def generate(width: int, height: int, target_rooms: int = 10, rng: Optional[RandomSource] = None) -> BSPResult:
    """Partition, place rooms, connect siblings; retry deeper if short of rooms."""
    rng = rng if rng is not None else make_rng()
    width = max(MIN_DIMENSION, int(width))
    height = max(MIN_DIMENSION, int(height))
    bounds = Rect(0, 0, width, height)

    tree = BSPTree(bounds, rng)
    tree.split_recursively()
    tree.create_rooms()
    rects, segments = tree.rooms(), tree.corridors()

    for attempt in range(RETRIES):
        if len(rects) >= target_rooms:
            break
        retry = BSPTree(bounds, rng)
        retry.split_aggressively(0, target_rooms + attempt * 2)
        retry.create_rooms()
        candidate = retry.rooms()
        if len(candidate) > len(rects):
            rects, segments = candidate, retry.corridors()

    grid = [[0] * width for _ in range(height)]
    for r in rects:
        for yy in range(r.y, r.y + r.height):
            for xx in range(r.x, r.x + r.width):
                if 0 <= xx < width and 0 <= yy < height:
                    grid[yy][xx] = 1
    for seg in segments:
        draw_line(grid, seg.start, seg.end)

    rooms = tuple(make_room(r.x, r.y, r.width, r.height, i) for i, r in enumerate(rects))
    return BSPResult(
        grid=tuple(tuple(row) for row in grid),
        rooms=rooms,
        corridors=tuple(segments),
        width=width,
        height=height,
    )


__all__ = ["Rect", "BSPNode", "BSPTree", "BSPResult", "draw_line", "generate"]
