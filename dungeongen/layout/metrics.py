from typing import Dict


def init_metrics() -> Dict[str, int | float]:
    return {
        'rooms_placed': 0,
        'rooms_skipped': 0,
        'room_placement_failures': 0,
        'hallways_carved': 0,
        'hallways_empty': 0,
        'hallway_fallbacks': 0,
        'hallway_tiles': 0,
        'unreachable_rooms': 0,
        'runtime_ms': 0.0,
    }
