from generated_maps.dungeon.cells import Cell
from generated_maps.dungeon.config import DungeonOptions
from generated_maps.dungeon.grid import Grid
from generated_maps.dungeon.rng import make_rng
from generated_maps.dungeon.rooms import describe_room, make_room, place_rooms


def _place(seed=7, size=41, target=6, **opts):
    grid = Grid.create(size, size)
    rooms, labels, descriptions, attempts = place_rooms(grid, target, DungeonOptions(**opts), make_rng(seed))
    return grid, rooms, labels, descriptions, attempts


def test_describe_room_uses_five_foot_cells():
    assert describe_room(3, 5) == "15 x 25 ft room"
    room = make_room(1, 3, 5, 7, 0)
    assert room.label == "1"
    assert room.description == "25 x 35 ft room"


def test_rooms_are_odd_aligned_and_inside_ring():
    for seed in range(5):
        grid, rooms, *_ = _place(seed)
        assert 0 < len(rooms) <= 6
        for r in rooms:
            assert r.x % 2 == 1 and r.y % 2 == 1
            assert r.width % 2 == 1 and r.height % 2 == 1
            assert 3 <= r.width <= 11 and 3 <= r.height <= 11
            assert r.x + r.width <= grid.width - 2
            assert r.y + r.height <= grid.height - 2


def test_rooms_keep_one_cell_margin():
    grid, rooms, *_ = _place(seed=11, target=10)
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            separated = (
                a.x + a.width < b.x
                or b.x + b.width < a.x
                or a.y + a.height < b.y
                or b.y + b.height < a.y
            )
            assert separated, (a, b)


def test_room_cells_and_perimeter_are_stamped():
    grid, rooms, *_ = _place(seed=3)
    r = rooms[0]
    for x, y in r.cells():
        assert grid.has(x, y, Cell.ROOM)
        assert not grid.has(x, y, Cell.BLOCKED)
    assert grid.has(r.x + r.width, r.y + r.height // 2, Cell.PERIM)
    assert grid.has(r.x + r.width, r.y + r.height, Cell.PERIM)
    # the ring is never stamped
    assert all(v == Cell.BLOCKED for v in grid.rows[0])


def test_labels_and_descriptions_follow_placement_order():
    grid, rooms, labels, descriptions, _ = _place(seed=5)
    assert [r.label for r in rooms] == [str(i + 1) for i in range(len(rooms))]
    assert [lab.text for lab in labels] == [r.label for r in rooms]
    for r, lab in zip(rooms, labels):
        assert (lab.x, lab.y) == tuple(r.center)
        assert descriptions[r.label] == describe_room(r.width, r.height)


def test_attempt_budget():
    _, rooms, _, _, attempts = _place(seed=1, size=21, target=50)
    assert len(rooms) < 50
    assert attempts <= 50 * 8


def test_zero_target_places_nothing():
    grid, rooms, _, _, attempts = _place(target=0)
    assert rooms == [] and attempts == 0
    assert grid.count(Cell.ROOM) == 0


def test_room_sides_capped_to_grid():
    grid, rooms, *_ = _place(seed=2, size=21, target=3, room_min=30, room_max=40)
    for r in rooms:
        assert r.width <= 17 and r.height <= 17
        assert r.x + r.width <= grid.width - 2
