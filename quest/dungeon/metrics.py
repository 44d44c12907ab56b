from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_attempted': 0,
        'rooms_placed': 0,
        'connections': 0,
        'redundant_connections': 0,
        'early_stop': 0,
        'repairs_performed': 0,
        'doors': 0,
        'secret_doors': 0,
        'locked_doors': 0,
        'traps': 0,
        'monsters': 0,
        'items': 0,
        'unreachable_rooms': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
