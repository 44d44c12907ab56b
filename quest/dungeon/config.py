import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional, Tuple

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

# Smallest map that still holds one minimal room inside the 2-tile border.
MIN_MAP_SIZE = 8
# Largest width or height accepted by the generator.
MAX_MAP_SIZE = 512


@dataclass(frozen=True)
class GeneratorConfig:
    # Room placement
    min_rooms: int = 7
    max_rooms: int = 15
    min_room_size: int = 3
    max_room_size: int = 15
    placement_attempts: int = 500
    # Corridor routing
    early_stop_chance: float = 0.02
    extra_connection_chance: float = 0.5
    secret_door_chance: float = 0.2
    locked_door_chance: float = 0.1
    # Features
    trap_chance_per_room: float = 0.1
    graffiti_chance: float = 0.1
    lava_chance: float = 0.05
    # Population
    container_chance: float = 0.15
    item_chance: float = 0.25
    additional_item_chance: float = 0.2
    max_stacked_items: int = 5
    gold_chance: float = 0.2
    gold_base: int = 10
    asleep_chance: float = 0.3
    # Progression
    max_level: int = 100
    boss_levels: Tuple[int, ...] = (15, 30, 45, 60, 75, 90, 100)
    boss_layout_dir: Optional[Path] = field(default=DATA_DIR / "boss-levels")
    boss_layout_url: Optional[str] = None

    def with_overrides(self, **changes) -> "GeneratorConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ=None) -> "GeneratorConfig":
        """Build a config honoring ``QUEST_*`` environment overrides.

        Integer and float fields map to ``QUEST_<FIELD_NAME>``; boss levels
        accept a comma separated list. Unparseable values are ignored.
        """
        env = os.environ if environ is None else environ
        changes = {}
        for f in fields(cls):
            key = f"QUEST_{f.name.upper()}"
            raw = env.get(key)
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            default = f.default
            try:
                if f.name == "boss_levels":
                    changes[f.name] = tuple(int(p) for p in raw.split(",") if p.strip())
                elif f.name == "boss_layout_dir":
                    changes[f.name] = Path(raw)
                elif f.name == "boss_layout_url":
                    changes[f.name] = raw
                elif isinstance(default, int):
                    changes[f.name] = int(raw)
                elif isinstance(default, float):
                    changes[f.name] = float(raw)
            except ValueError:
                continue
        return cls(**changes)


__all__ = ["GeneratorConfig", "MIN_MAP_SIZE", "MAX_MAP_SIZE", "DATA_DIR"]
