"""Corridor Router: joins sequenced rooms with carved corridors and doors.

Primary pass links room i to i+1 and may stop early; a second pass adds
optional i -> i+2 links that create loops. Corridors only replace WALL
tiles, and every corridor tile that ends up touching room floor becomes a
door.
"""
from __future__ import annotations

import random
from typing import Dict, List, Optional

from .config import GeneratorConfig
from .corridors import L_SHAPED, MAZE, Corridor
from .grid import TileGrid
from .rooms import Door, Room
from .tiles import CORRIDOR, FLOOR, WALL, Tile


def connect_rooms(
    grid: TileGrid,
    rooms: List[Room],
    a: Room,
    b: Room,
    config: GeneratorConfig,
    rng: random.Random,
    shape: str = L_SHAPED,
) -> Optional[Corridor]:
    """Carve a corridor between the centers of ``a`` and ``b``.

    Returns the corridor, or None when the pair is already connected.
    """
    if a is b or a.is_connected_to(b):
        return None
    corridor = Corridor(a.center, b.center, shape)
    corridor.generate(rng, bounds=(1, 1, grid.width - 2, grid.height - 2))
    carve_path(grid, corridor.path)
    place_doors(grid, rooms, config, rng)
    a.connect_to(b)
    return corridor


def carve_path(grid: TileGrid, path) -> int:
    carved = 0
    for x, y in path:
        if grid.type_at(x, y) == WALL:
            grid.set(x, y, Tile.corridor())
            carved += 1
    return carved


def place_doors(grid: TileGrid, rooms: List[Room], config: GeneratorConfig, rng: random.Random) -> int:
    """Turn every corridor tile orthogonally adjacent to room floor into a door.

    Each new door rolls secret and locked independently and is recorded on
    every room whose floor it touches. Returns the number of doors created;
    a second call on an unchanged grid creates none.
    """
    created = 0
    for x, y in grid.coords():
        if grid.cells[y][x].type != CORRIDOR:
            continue
        touching = set()
        for nx, ny in grid.neighbors(x, y):
            neighbor = grid.cells[ny][nx]
            if neighbor.type == FLOOR:
                touching.add(neighbor.room_index)
        if not touching:
            continue
        secret = rng.random() < config.secret_door_chance
        locked = rng.random() < config.locked_door_chance
        grid.set(x, y, Tile.door(secret=secret, locked=locked))
        created += 1
        for idx in touching:
            if idx is not None and 0 <= idx < len(rooms) and not rooms[idx].has_door_at(x, y):
                rooms[idx].doors.append(Door(x, y, open=False, locked=locked, secret=secret))
    return created


def route_corridors(
    grid: TileGrid,
    rooms: List[Room],
    config: GeneratorConfig,
    rng: random.Random,
    maze_influence: bool = False,
) -> Dict[str, int]:
    stats = {"connections": 0, "redundant_connections": 0, "early_stop": 0}
    if len(rooms) < 2:
        return stats
    for i in range(len(rooms) - 1):
        if connect_rooms(grid, rooms, rooms[i], rooms[i + 1], config, rng) is not None:
            stats["connections"] += 1
        if rng.random() < config.early_stop_chance:
            stats["early_stop"] = 1
            break
    extra_shape = MAZE if maze_influence else L_SHAPED
    for i in range(len(rooms) - 2):
        if rng.random() < config.extra_connection_chance:
            if connect_rooms(grid, rooms, rooms[i], rooms[i + 2], config, rng, shape=extra_shape) is not None:
                stats["redundant_connections"] += 1
    return stats


__all__ = ["connect_rooms", "carve_path", "place_doors", "route_corridors"]
