from typing import Any, Dict


def init_metrics(rooms_requested: int = 0) -> Dict[str, Any]:
    """Fresh diagnostic counters for one generation run.

    Shortfalls (fewer rooms, doorless rooms, missing stairs) only ever show up
    here and in the result data; they are never raised.
    """
    return {
        'rooms_requested': rooms_requested,
        'rooms_placed': 0,
        'room_attempts': 0,
        'maze_start_retries': 0,
        'maze_cells_carved': 0,
        'doors_opened': 0,
        'doors_per_room': {},
        'rooms_without_doors': 0,
        'corridor_cells_after_doors': 0,
        'dead_end_passes': 0,
        'dead_ends_pruned': 0,
        'unreachable_pruned': 0,
        'mst_terminals': 0,
        'mst_paths': 0,
        'mst_cells_pruned': 0,
        'corridor_cells_final': 0,
        'stairs_placed': False,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
