from generated_maps.dungeon import Cell, generate, generate_map
from generated_maps.dungeon.tiles import (
    BLOCKED,
    CORRIDOR,
    DOOR,
    PERIM,
    ROOM,
    STAIR_DN,
    STAIR_UP,
    glyph_for,
    render_ascii,
    summary_line,
)


def test_glyph_priority():
    assert glyph_for(Cell.BLOCKED) == BLOCKED
    assert glyph_for(Cell.ROOM) == ROOM
    assert glyph_for(Cell.CORRIDOR) == CORRIDOR
    assert glyph_for(Cell.BLOCKED | Cell.PERIM) == PERIM
    assert glyph_for(Cell.PERIM | Cell.DOOR) == DOOR
    assert glyph_for(Cell.CORRIDOR | Cell.STAIR_UP) == STAIR_UP
    assert glyph_for(Cell.CORRIDOR | Cell.STAIR_DN) == STAIR_DN


def test_render_ascii_matches_grid_shape():
    r = generate(33, 25, 5, seed=4)
    lines = render_ascii(r).split("\n")
    assert len(lines) == 25
    assert all(len(line) == 33 for line in lines)
    assert set(lines[0]) == {BLOCKED}
    if r.stairs.placed:
        text = render_ascii(r)
        assert text.count(STAIR_UP) == 1 and text.count(STAIR_DN) == 1


def test_render_ascii_binary_grid():
    r = generate_map("bsp", 30, 30, 4, seed=2)
    text = render_ascii(r)
    assert set(text) <= {"#", ".", "\n"}
    assert text.count(".") == sum(map(sum, r.grid))


def test_summary_line():
    r = generate(41, 41, 6, seed=3)
    line = summary_line(r)
    assert line.startswith("41x41 grid, ")
    assert f"{len(r.rooms)} rooms" in line
    assert line.endswith(f"{len(r.doors)} doors")
    bsp = generate_map("bsp", 30, 30, 4, seed=2)
    assert summary_line(bsp).endswith(", 0 doors")
