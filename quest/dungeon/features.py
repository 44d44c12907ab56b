"""Feature Placer: stairs, the special room, traps and theme dressing.

Runs after corridors and connectivity repair, so every room interior is
still plain floor when stairs go down. Traps, graffiti and lava only ever
land on plain floor tiles, which keeps stairs and each other intact.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .config import GeneratorConfig
from .grid import Point, TileGrid
from .rooms import SPECIAL_ROOM_TYPES, Room
from .themes import LAVA_THEME, theme_messages
from .tiles import FLOOR, LAVA, ROOM_INTERIOR, STAIRS_DOWN, STAIRS_UP

TRAP_TYPES = ("pit", "arrow", "dart", "boulder", "teleport", "poison", "polymorph", "alarm")


@dataclass
class Trap:
    x: int
    y: int
    type: str
    revealed: bool = False

    def __post_init__(self):
        if self.type not in TRAP_TYPES:
            raise ValueError(f"unknown trap type {self.type!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "type": self.type, "revealed": self.revealed}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trap":
        return cls(int(data["x"]), int(data["y"]), str(data["type"]), bool(data.get("revealed", False)))


@dataclass
class Stairs:
    up: Optional[Point] = None
    down: Optional[Point] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "up": self.up.to_dict() if self.up else None,
            "down": self.down.to_dict() if self.down else None,
        }


def trap_pool(level: int) -> Tuple[str, ...]:
    pool = ["pit", "arrow", "teleport", "alarm"]
    if level > 5:
        pool += ["dart", "boulder"]
    if level > 10:
        pool.append("poison")
    if level > 20:
        pool.append("polymorph")
    return tuple(pool)


def _plain_floor_cells(grid: TileGrid, room: Room) -> List[Tuple[int, int]]:
    cells = []
    for x, y in room.cells():
        tile = grid.get(x, y)
        if tile is not None and tile.type == FLOOR and not tile.trap:
            cells.append((x, y))
    return cells


def select_stair_rooms(rooms: List[Room]) -> Tuple[Optional[int], Optional[int]]:
    """Pick (entrance_room, exit_room) indices.

    The entrance is the first room in traversal order and the exit the last,
    chosen once right after sequencing so later passes cannot reorder them.
    A lone room serves as both; no rooms yields ``(None, None)``.
    """
    if not rooms:
        return None, None
    return rooms[0].index, rooms[-1].index


def place_stairs(
    grid: TileGrid,
    rooms: List[Room],
    entrance_index: Optional[int],
    exit_index: Optional[int],
    level: int,
    config: GeneratorConfig,
    rng: random.Random,
) -> Stairs:
    stairs = Stairs()
    if entrance_index is None:
        return stairs
    up_cells = _plain_floor_cells(grid, rooms[entrance_index])
    if up_cells:
        ux, uy = rng.choice(up_cells)
        grid.set(ux, uy, grid.cells[uy][ux].retyped(STAIRS_UP))
        stairs.up = Point(ux, uy)
    if exit_index is None or level >= config.max_level:
        return stairs
    down_cells = [c for c in _plain_floor_cells(grid, rooms[exit_index]) if c != stairs.up]
    if down_cells:
        dx, dy = rng.choice(down_cells)
        grid.set(dx, dy, grid.cells[dy][dx].retyped(STAIRS_DOWN))
        stairs.down = Point(dx, dy)
    return stairs


def assign_special_room(
    grid: TileGrid,
    rooms: List[Room],
    level: int,
    stair_rooms: Tuple[Optional[int], Optional[int]],
    rng: random.Random,
) -> Optional[Room]:
    if level < 2 or len(rooms) < 3:
        return None
    candidates = [r for r in rooms if r.index not in stair_rooms]
    if not candidates:
        return None
    room = rng.choice(candidates)
    room.type = rng.choice(SPECIAL_ROOM_TYPES)
    for x, y in room.cells():
        tile = grid.get(x, y)
        if tile is not None and tile.type in ROOM_INTERIOR:
            tile.special = room.type
    return room


def place_traps(
    grid: TileGrid, rooms: List[Room], level: int, config: GeneratorConfig, rng: random.Random
) -> List[Trap]:
    pool = trap_pool(level)
    traps: List[Trap] = []
    for room in rooms:
        if rng.random() >= config.trap_chance_per_room:
            continue
        cells = _plain_floor_cells(grid, room)
        if not cells:
            continue
        x, y = rng.choice(cells)
        traps.append(Trap(x, y, rng.choice(pool)))
        grid.cells[y][x].trap = True
    return traps


def apply_theme(
    grid: TileGrid, rooms: List[Room], theme: str, config: GeneratorConfig, rng: random.Random
) -> Dict[str, Any]:
    """Scatter theme graffiti and the balrog lava hazard; returns what was placed."""
    placed: Dict[str, Any] = {"graffiti": None, "lava": None}
    if not rooms:
        return placed
    if rng.random() < config.graffiti_chance:
        messages = theme_messages(theme)
        if messages:
            cells = _plain_floor_cells(grid, rng.choice(rooms))
            if cells:
                x, y = rng.choice(cells)
                grid.cells[y][x].graffiti = rng.choice(messages)
                placed["graffiti"] = Point(x, y)
    if theme == LAVA_THEME and rng.random() < config.lava_chance:
        cells = _plain_floor_cells(grid, rng.choice(rooms))
        if cells:
            x, y = rng.choice(cells)
            grid.set(x, y, grid.cells[y][x].retyped(LAVA))
            placed["lava"] = Point(x, y)
    return placed


__all__ = [
    "Trap",
    "Stairs",
    "TRAP_TYPES",
    "trap_pool",
    "select_stair_rooms",
    "place_stairs",
    "assign_special_room",
    "place_traps",
    "apply_theme",
]
