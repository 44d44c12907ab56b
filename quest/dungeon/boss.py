"""Boss Level Override.

Boss levels swap procedural layout for a hand-authored JSON document named
``level-<n>.json``, shaped ``{tiles, rooms, monsters, items, traps, stairs,
theme, entrance, exit, boss}``. Sources return ``None`` when the document
simply does not exist and raise :class:`BossLayoutError` for anything
broken; the generator turns both into a procedural fallback.

``tiles`` is a list of rows, each either a glyph string (``#.,+<>~&^SL``)
or a list of tile records.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

import requests

from ..errors import BossLayoutError
from ..logging_utils import get_logger
from .features import Stairs, Trap
from .grid import Point, TileGrid
from .population import ItemPlacement, MonsterPlacement
from .rooms import Room
from .tiles import ROOM_INTERIOR, STAIRS_DOWN, STAIRS_UP

log = get_logger("quest.dungeon.boss")


def layout_filename(level: int) -> str:
    return f"level-{level}.json"


class FileBossLayoutSource:
    """Reads layouts from a directory (the bundled ``quest/data/boss-levels`` by default)."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def fetch(self, level: int) -> Optional[Dict[str, Any]]:
        path = self.directory / layout_filename(level)
        if not path.is_file():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise BossLayoutError(level, f"unreadable {path.name}: {exc}") from exc


class HttpBossLayoutSource:
    def __init__(self, base_url: str, timeout: float = 5.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    def fetch(self, level: int) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/{layout_filename(level)}"
        getter = self.session.get if self.session is not None else requests.get
        try:
            r = getter(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise BossLayoutError(level, f"request failed: {exc}") from exc
        if r.status_code == 404:
            return None
        if r.status_code != 200:
            raise BossLayoutError(level, f"HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as exc:
            raise BossLayoutError(level, f"invalid JSON: {exc}") from exc


class BossLayout(NamedTuple):
    grid: TileGrid
    rooms: List[Room]
    traps: List[Trap]
    stairs: Stairs
    theme: Optional[str]
    entrance: Optional[Point]
    exit: Optional[Point]
    boss: Optional[Dict[str, Any]]
    monsters: List[MonsterPlacement]
    items: List[ItemPlacement]


def _point(raw) -> Optional[Point]:
    if raw is None:
        return None
    if isinstance(raw, dict):
        return Point(int(raw["x"]), int(raw["y"]))
    x, y = raw
    return Point(int(x), int(y))


def _find_tile(grid: TileGrid, tile_type: str) -> Optional[Point]:
    for x, y in grid.coords():
        if grid.cells[y][x].type == tile_type:
            return Point(x, y)
    return None


def adopt_layout(data: Any, level: int) -> BossLayout:
    """Validate a layout document and turn it into generator structures.

    Missing stairs are recovered from stair tiles in the grid; missing
    entrance/exit fall back to the stairs. Anything malformed raises
    :class:`BossLayoutError`.
    """
    if not isinstance(data, dict):
        raise BossLayoutError(level, "layout is not a JSON object")
    tiles = data.get("tiles")
    if not isinstance(tiles, list) or not tiles:
        raise BossLayoutError(level, "layout has no tiles")
    raw_stairs = data.get("stairs") or {}
    if not isinstance(raw_stairs, dict):
        raise BossLayoutError(level, "stairs must be an object")
    try:
        grid = TileGrid.from_rows(tiles)
        rooms = [Room.from_dict(r, i) for i, r in enumerate(data.get("rooms") or [])]
        traps = [Trap.from_dict(t) for t in data.get("traps") or []]
        monsters = [MonsterPlacement.from_dict(m) for m in data.get("monsters") or []]
        items = [ItemPlacement.from_dict(i) for i in data.get("items") or []]
        stairs = Stairs(up=_point(raw_stairs.get("up")), down=_point(raw_stairs.get("down")))
        entrance = _point(data.get("entrance"))
        exit_ = _point(data.get("exit"))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise BossLayoutError(level, f"malformed layout: {exc!r}") from exc
    for r in rooms:
        if r.width < 1 or r.height < 1:
            raise BossLayoutError(level, f"room {r.index} has an empty interior")
        if r.x < 0 or r.y < 0 or r.x + r.width > grid.width or r.y + r.height > grid.height:
            raise BossLayoutError(level, f"room {r.index} lies outside the {grid.width}x{grid.height} grid")
    for p in (stairs.up, stairs.down, entrance, exit_):
        if p is not None and not grid.in_bounds(p.x, p.y):
            raise BossLayoutError(level, f"point {tuple(p)} lies outside the grid")
    for r in rooms:
        for x, y in r.cells():
            tile = grid.cells[y][x]
            if tile.type in ROOM_INTERIOR and tile.room_index is None:
                tile.room_index = r.index
            if r.type != "normal" and tile.type in ROOM_INTERIOR:
                tile.special = r.type
    if stairs.up is None:
        stairs.up = _find_tile(grid, STAIRS_UP)
    if stairs.down is None:
        stairs.down = _find_tile(grid, STAIRS_DOWN)
    theme = data.get("theme")
    boss = data.get("boss")
    log.debug(event="boss_layout_adopted", depth=level, width=grid.width, height=grid.height, rooms=len(rooms))
    return BossLayout(
        grid=grid,
        rooms=rooms,
        traps=traps,
        stairs=stairs,
        theme=str(theme) if theme else None,
        entrance=entrance or stairs.up,
        exit=exit_ or stairs.down,
        boss=boss if isinstance(boss, dict) else ({"name": str(boss)} if boss else None),
        monsters=monsters,
        items=items,
    )


__all__ = [
    "FileBossLayoutSource",
    "HttpBossLayoutSource",
    "BossLayout",
    "adopt_layout",
    "layout_filename",
]
