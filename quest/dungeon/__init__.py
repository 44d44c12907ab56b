"""Public dungeon package interface."""

from .config import GeneratorConfig, MAX_MAP_SIZE, MIN_MAP_SIZE  # noqa: F401
from .dungeon import Dungeon, DungeonGenerator, generate  # noqa: F401
from .features import Stairs, Trap  # noqa: F401
from .grid import Point, TileGrid  # noqa: F401
from .rooms import Door, Room  # noqa: F401
from .themes import resolve_theme  # noqa: F401
from .tiles import (  # noqa: F401
    CORRIDOR,
    DOOR,
    FLOOR,
    LAVA,
    STAIRS_DOWN,
    STAIRS_UP,
    TRAP,
    WALL,
    WATER,
    Tile,
)

__all__ = [
    "Dungeon",
    "DungeonGenerator",
    "GeneratorConfig",
    "MIN_MAP_SIZE",
    "MAX_MAP_SIZE",
    "generate",
    "Stairs",
    "Trap",
    "Point",
    "TileGrid",
    "Door",
    "Room",
    "resolve_theme",
    "Tile",
    "WALL",
    "FLOOR",
    "CORRIDOR",
    "DOOR",
    "STAIRS_UP",
    "STAIRS_DOWN",
    "WATER",
    "LAVA",
    "TRAP",
]
