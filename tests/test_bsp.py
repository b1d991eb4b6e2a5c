from generated_maps.dungeon import analyze
from generated_maps.dungeon.bsp import ROOM_MAX, ROOM_MIN, BSPTree, Rect, draw_line, generate
from generated_maps.dungeon.cells import Point
from generated_maps.dungeon.rng import make_rng
from tests.dungeon_test_utils import ring_cells


def test_binary_grid_with_clear_ring():
    for seed in range(5):
        r = generate(60, 40, 10, make_rng(seed))
        assert (r.width, r.height) == (60, 40)
        assert {v for row in r.grid for v in row} <= {0, 1}
        for x, y in ring_cells(r.width, r.height):
            assert r.grid[y][x] == 0


def test_dimensions_clamped():
    r = generate(4, 4, 3, make_rng(1))
    assert (r.width, r.height) == (21, 21)


def test_rooms_inside_bounds_and_drawn_as_floor():
    r = generate(80, 60, 12, make_rng(7))
    assert r.rooms
    for room in r.rooms:
        assert ROOM_MIN <= room.width <= ROOM_MAX
        assert ROOM_MIN <= room.height <= ROOM_MAX
        assert room.x >= 1 and room.y >= 1
        assert room.x + room.width <= r.width - 1
        assert room.y + room.height <= r.height - 1
        assert all(r.grid[y][x] == 1 for x, y in room.cells())
    assert [room.label for room in r.rooms] == [str(i + 1) for i in range(len(r.rooms))]
    assert analyze(r).ok


def test_arena_links_are_consistent():
    tree = BSPTree(Rect(0, 0, 80, 60), make_rng(3))
    tree.split_recursively()
    for idx, node in enumerate(tree.nodes):
        if idx == 0:
            assert node.parent == -1
        else:
            parent = tree.nodes[node.parent]
            assert idx in (parent.left, parent.right)
        if not node.is_leaf:
            left, right = tree.nodes[node.left], tree.nodes[node.right]
            assert left.parent == idx and right.parent == idx
            assert left.rect.width * left.rect.height + right.rect.width * right.rect.height == (
                node.rect.width * node.rect.height
            )
    leaves = [n for n in tree.nodes if n.is_leaf]
    assert tree.count_leaves() == len(leaves)
    assert all(n.rect.width >= 6 and n.rect.height >= 6 for n in leaves)


def test_leaf_rooms_stay_in_their_leaf():
    tree = BSPTree(Rect(0, 0, 70, 50), make_rng(5))
    tree.split_recursively()
    tree.create_rooms()
    for node in tree.nodes:
        if node.is_leaf:
            room, leaf = node.room, node.rect
            assert leaf.x < room.x and room.x + room.width < leaf.x + leaf.width
            assert leaf.y < room.y and room.y + room.height < leaf.y + leaf.height


def test_small_area_cannot_split():
    tree = BSPTree(Rect(0, 0, 11, 30), make_rng(1))
    assert tree.split(0) is False
    assert tree.count_leaves() == 1


def test_same_seed_same_map():
    a = generate(64, 48, 10, make_rng(77))
    b = generate(64, 48, 10, make_rng(77))
    assert a == b


def test_draw_line_marks_every_cell():
    grid = [[0] * 10 for _ in range(10)]
    draw_line(grid, Point(2, 3), Point(7, 3))
    draw_line(grid, Point(7, 3), Point(7, 8))
    assert all(grid[3][x] == 1 for x in range(2, 8))
    assert all(grid[y][7] == 1 for y in range(3, 9))
    assert sum(map(sum, grid)) == 6 + 5


def test_to_dict_shape():
    d = generate(40, 40, 6, make_rng(2)).to_dict()
    assert d["algorithm"] == "bsp"
    assert set(d) == {"algorithm", "grid", "rooms", "corridors", "width", "height"}
