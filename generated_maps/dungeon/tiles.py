from .cells import Cell

# Glyphs for the plain-text map dump (diagnostics only)
BLOCKED = "#"
ROOM = "."
CORRIDOR = ","
PERIM = "+"
DOOR = "D"
STAIR_UP = "<"
STAIR_DN = ">"
FLOOR = "."
WALL = "#"


def glyph_for(value: int) -> str:
    """Most specific glyph for a bitmask cell (stairs > door > room > corridor)."""
    if value & Cell.STAIR_UP:
        return STAIR_UP
    if value & Cell.STAIR_DN:
        return STAIR_DN
    if value & Cell.DOOR:
        return DOOR
    if value & Cell.ROOM:
        return ROOM
    if value & Cell.CORRIDOR:
        return CORRIDOR
    if value & Cell.PERIM:
        return PERIM
    return BLOCKED


def render_ascii(result) -> str:
    """One text line per grid row. BSP results (0/1 grids) map to wall/floor."""
    binary = getattr(result, "algorithm", "donjon") != "donjon"
    lines = []
    for row in result.grid:
        if binary:
            lines.append("".join(FLOOR if v else WALL for v in row))
        else:
            lines.append("".join(glyph_for(v) for v in row))
    return "\n".join(lines)


def summary_line(result) -> str:
    doors = len(getattr(result, "doors", ()))
    return (
        f"{result.width}x{result.height} grid, {len(result.rooms)} rooms, "
        f"{len(result.corridors)} corridors, {doors} doors"
    )


__all__ = [
    "BLOCKED",
    "ROOM",
    "CORRIDOR",
    "PERIM",
    "DOOR",
    "STAIR_UP",
    "STAIR_DN",
    "FLOOR",
    "WALL",
    "glyph_for",
    "render_ascii",
    "summary_line",
]
