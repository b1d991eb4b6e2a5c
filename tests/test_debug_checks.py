import dataclasses

from generated_maps.dungeon import Cell, DungeonOptions, analyze, generate
from generated_maps.dungeon.doors import Door
from generated_maps.dungeon.stairs import Stairs


def _with_cell(result, x, y, value):
    rows = [list(row) for row in result.grid]
    rows[y][x] = value
    return dataclasses.replace(result, grid=tuple(tuple(r) for r in rows))


def test_clean_result_reports_nothing():
    report = analyze(generate(41, 41, 8, seed=21))
    assert report.ok
    assert report.to_dict() == {
        "ok": True,
        "ring": 0,
        "room_overlaps": 0,
        "room_margin": 0,
        "unreachable_corridors": 0,
        "stairs": 0,
        "doors": 0,
    }


def test_ring_violation_detected():
    r = _with_cell(generate(31, 31, 4, seed=1), 0, 7, int(Cell.CORRIDOR))
    report = analyze(r)
    assert (0, 7) in report.ring
    assert not report.ok


def test_isolated_corridor_detected():
    r = generate(41, 41, 6, seed=3)
    # an even/even lattice cell is never carved; opening one far from everything strands it
    target = next(
        (x, y)
        for y in range(2, r.height - 2, 2)
        for x in range(2, r.width - 2, 2)
        if r.grid[y][x] == Cell.BLOCKED
        and all(r.grid[y + dy][x + dx] == Cell.BLOCKED for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)))
    )
    report = analyze(_with_cell(r, target[0], target[1], int(Cell.CORRIDOR)))
    assert target in report.unreachable_corridors
    # skipping reachability hides it
    assert analyze(_with_cell(r, target[0], target[1], int(Cell.CORRIDOR)), check_reachability=False).ok


def test_unpruned_maze_is_not_checked_for_reachability():
    r = generate(41, 41, 6, DungeonOptions.from_preset("maze"), seed=4)
    assert not analyze(r, check_reachability=False).unreachable_corridors


def test_coincident_stairs_detected():
    r = generate(41, 41, 6, seed=5)
    assert r.stairs.placed
    bad = dataclasses.replace(r, stairs=Stairs(up=r.stairs.up, down=r.stairs.up))
    problems = analyze(bad).stairs
    assert "coincident" in problems
    assert "down_flag_missing" in problems


def test_bad_door_detected():
    r = generate(41, 41, 6, seed=6)
    room = r.rooms[0]
    # a room interior cell is not a valid door position
    bogus = Door(room.x + 1, room.y + 1, "N")
    report = analyze(dataclasses.replace(r, doors=r.doors + (bogus,)))
    assert (bogus.x, bogus.y) in report.doors


def test_room_overlap_detected():
    r = generate(41, 41, 6, seed=7)
    first = r.rooms[0]
    twin = dataclasses.replace(first, label="twin")
    report = analyze(dataclasses.replace(r, rooms=r.rooms + (twin,)))
    assert (first.label, "twin") in report.room_overlaps
