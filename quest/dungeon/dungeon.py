"""Dungeon Facade and generation pipeline.

``DungeonGenerator.generate`` runs the ordered phases (room placement,
sequencing, stair-room selection, corridor routing, connectivity repair,
features, theme dressing, population) with a per-phase timing entry in
``metrics['phase_ms']``, or adopts a boss layout for configured levels.
The returned :class:`Dungeon` is a frozen value; only tile visibility
flags change after generation.
"""
from __future__ import annotations

import json
import math
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..errors import BossLayoutError, InvalidDimensionsError, InvalidLevelError
from ..events import LEVEL_BOSS_FALLBACK, LEVEL_GENERATED, LevelEvents
from ..logging_utils import get_logger
from .boss import FileBossLayoutSource, HttpBossLayoutSource, adopt_layout
from .config import MAX_MAP_SIZE, MIN_MAP_SIZE, GeneratorConfig
from .connectivity import ensure_connectivity, unreachable_rooms_by_tiles
from .features import (
    Stairs,
    Trap,
    apply_theme,
    assign_special_room,
    place_stairs,
    place_traps,
    select_stair_rooms,
)
from .grid import Point, TileGrid
from .metrics import init_metrics
from .population import ItemPlacement, MonsterPlacement, populate
from .rooms import Room, place_rooms, sequence_rooms
from .router import route_corridors
from .themes import MAZE_THEME, resolve_theme
from .tiles import DOOR, Tile

log = get_logger("quest.dungeon")

# Used by get_entrance when a level has neither entrance nor up stairs.
FALLBACK_ENTRANCE = Point(5, 5)


@dataclass(frozen=True)
class Dungeon:
    level: int
    width: int
    height: int
    seed: int
    theme: str
    grid: TileGrid = field(repr=False)
    rooms: Tuple[Room, ...] = ()
    traps: Tuple[Trap, ...] = ()
    stairs: Stairs = field(default_factory=Stairs)
    entrance: Optional[Point] = None
    exit: Optional[Point] = None
    monsters: Tuple[MonsterPlacement, ...] = ()
    items: Tuple[ItemPlacement, ...] = ()
    boss: Optional[Dict[str, Any]] = None
    is_boss_level: bool = False
    maze_influence: bool = False
    metrics: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        return self.grid.get(x, y)

    def is_walkable(self, x: int, y: int) -> bool:
        tile = self.grid.get(x, y)
        return tile is not None and not tile.blocked

    def get_entrance(self) -> Point:
        return self.entrance or self.stairs.up or FALLBACK_ENTRANCE

    def get_random_room(self, rng: Optional[random.Random] = None) -> Optional[Room]:
        if not self.rooms:
            return None
        # deterministic per level seed
        return (rng or random.Random(self.seed)).choice(self.rooms)

    def update_visibility(self, x: int, y: int, radius: int) -> int:
        """Flag tiles within ``radius`` (euclidean) of (x, y) visible and explored.

        This is the one mutation the renderer is allowed. Returns the number
        of tiles touched.
        """
        touched = 0
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                if math.sqrt(dx * dx + dy * dy) > radius:
                    continue
                tile = self.grid.get(x + dx, y + dy)
                if tile is not None:
                    tile.visible = True
                    tile.explored = True
                    touched += 1
        return touched

    def to_ascii(self) -> str:
        return self.grid.to_ascii()

    def to_dict(self, include_tiles: bool = True) -> Dict[str, Any]:
        out = {
            "level": self.level,
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "theme": self.theme,
            "boss_level": self.is_boss_level,
            "boss": self.boss,
            "maze_influence": self.maze_influence,
            "entrance": self.entrance.to_dict() if self.entrance else None,
            "exit": self.exit.to_dict() if self.exit else None,
            "stairs": self.stairs.to_dict(),
            "rooms": [r.to_dict() for r in self.rooms],
            "traps": [t.to_dict() for t in self.traps],
            "monsters": [m.to_dict() for m in self.monsters],
            "items": [i.to_dict() for i in self.items],
            "metrics": self.metrics,
        }
        if include_tiles:
            out["tiles"] = self.grid.to_rows()
        return out

    def to_json(self, include_tiles: bool = True) -> str:
        return json.dumps(self.to_dict(include_tiles=include_tiles), separators=(",", ":"))


def _door_metrics(grid: TileGrid, metrics: Dict[str, Any]) -> None:
    for row in grid.cells:
        for t in row:
            if t.type == DOOR:
                metrics["doors"] += 1
                if t.secret:
                    metrics["secret_doors"] += 1
                if t.locked:
                    metrics["locked_doors"] += 1


def _validate(level, width, height, max_level: int) -> None:
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= max_level:
        raise InvalidLevelError(f"level must be an integer between 1 and {max_level}, got {level!r}")
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_MAP_SIZE <= value <= MAX_MAP_SIZE:
            raise InvalidDimensionsError(
                f"{name} must be an integer between {MIN_MAP_SIZE} and {MAX_MAP_SIZE}, got {value!r}"
            )


class DungeonGenerator:
    """Builds :class:`Dungeon` values.

    Catalogs default to the static tables in ``quest.services``; the boss
    layout source defaults to HTTP when ``boss_layout_url`` is configured,
    otherwise to ``boss_layout_dir``.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        monster_catalog=None,
        item_catalog=None,
        layout_source=None,
        events: Optional[LevelEvents] = None,
    ):
        self.config = config or GeneratorConfig()
        if monster_catalog is None:
            from ..services.spawn_service import StaticMonsterCatalog

            monster_catalog = StaticMonsterCatalog()
        if item_catalog is None:
            from ..services.loot_service import StaticItemCatalog

            item_catalog = StaticItemCatalog()
        self.monster_catalog = monster_catalog
        self.item_catalog = item_catalog
        if layout_source is None:
            if self.config.boss_layout_url:
                layout_source = HttpBossLayoutSource(self.config.boss_layout_url)
            elif self.config.boss_layout_dir is not None:
                layout_source = FileBossLayoutSource(self.config.boss_layout_dir)
        self.layout_source = layout_source
        self.events = events or LevelEvents()

    def generate(self, level: int, width: int, height: int, seed: Optional[int] = None) -> Dungeon:
        _validate(level, width, height, self.config.max_level)
        # 0 is a valid deterministic seed; None => random
        if seed is None:
            seed = random.randint(1, 2_147_483_647)
        start = time.perf_counter()
        dungeon = None
        if level in self.config.boss_levels:
            dungeon = self._try_boss(level, seed)
        if dungeon is None:
            dungeon = self._generate_procedural(level, width, height, seed)
        dungeon.metrics["runtime_ms"] = round((time.perf_counter() - start) * 1000, 3)
        log.info(
            event="level_generated",
            depth=level,
            seed=seed,
            theme=dungeon.theme,
            boss=dungeon.is_boss_level,
            rooms=len(dungeon.rooms),
            runtime_ms=dungeon.metrics["runtime_ms"],
        )
        self.events.emit(
            LEVEL_GENERATED,
            {
                "level": level,
                "seed": seed,
                "theme": dungeon.theme,
                "width": dungeon.width,
                "height": dungeon.height,
                "boss": dungeon.is_boss_level,
            },
        )
        return dungeon

    # ---- boss override ----------------------------------------------------
    def _try_boss(self, level: int, seed: int) -> Optional[Dungeon]:
        if self.layout_source is None:
            log.warn(event="boss_layout_missing", depth=level, reason="no_source")
            self.events.emit(LEVEL_BOSS_FALLBACK, {"level": level, "reason": "no_source"})
            return None
        try:
            data = self.layout_source.fetch(level)
            if data is None:
                log.warn(event="boss_layout_missing", depth=level)
                self.events.emit(LEVEL_BOSS_FALLBACK, {"level": level, "reason": "missing"})
                return None
            layout = adopt_layout(data, level)
        except BossLayoutError as exc:
            log.error(event="boss_layout_failed", depth=level, error=exc.reason)
            self.events.emit(LEVEL_BOSS_FALLBACK, {"level": level, "reason": exc.reason})
            return None
        rng = random.Random(seed)
        metrics = init_metrics()
        items, monsters = populate(layout.rooms, level, self.config, rng, self.monster_catalog, self.item_catalog)
        items = layout.items + items
        monsters = layout.monsters + monsters
        grid = layout.grid
        entrance = layout.entrance
        entrance_room = next((r.index for r in layout.rooms if entrance and r.contains(*entrance)), None)
        metrics["rooms_placed"] = len(layout.rooms)
        metrics["traps"] = len(layout.traps)
        metrics["monsters"] = len(monsters)
        metrics["items"] = len(items)
        metrics["unreachable_rooms"] = len(unreachable_rooms_by_tiles(grid, layout.rooms, entrance_room))
        _door_metrics(grid, metrics)
        return Dungeon(
            level=level,
            width=grid.width,
            height=grid.height,
            seed=seed,
            theme=layout.theme or resolve_theme(level),
            grid=grid,
            rooms=tuple(layout.rooms),
            traps=tuple(layout.traps),
            stairs=layout.stairs,
            entrance=entrance,
            exit=layout.exit,
            monsters=tuple(monsters),
            items=tuple(items),
            boss=layout.boss,
            is_boss_level=True,
            metrics=metrics,
        )

    # ---- procedural pipeline ------------------------------------------------
    def _generate_procedural(self, level: int, width: int, height: int, seed: int) -> Dungeon:
        cfg = self.config
        rng = random.Random(seed)
        metrics = init_metrics()
        phase_times = metrics["phase_ms"]

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = round((time.perf_counter() - ps) * 1000, 3)
            return r

        grid = TileGrid(width, height)
        theme = resolve_theme(level)
        maze_influence = theme == MAZE_THEME

        rooms, target, placed = _phase("place_rooms", place_rooms, grid, cfg, rng)
        metrics["rooms_attempted"] = target
        metrics["rooms_placed"] = placed
        rooms = _phase("sequence_rooms", sequence_rooms, rooms, grid)
        entrance_room, exit_room = select_stair_rooms(rooms)

        routing = _phase("route_corridors", route_corridors, grid, rooms, cfg, rng, maze_influence)
        metrics.update(routing)
        metrics["repairs_performed"] = _phase(
            "connectivity", ensure_connectivity, grid, rooms, entrance_room, cfg, rng
        )

        stairs = _phase("stairs", place_stairs, grid, rooms, entrance_room, exit_room, level, cfg, rng)
        _phase("special_room", assign_special_room, grid, rooms, level, (entrance_room, exit_room), rng)
        traps = _phase("traps", place_traps, grid, rooms, level, cfg, rng)
        _phase("theme", apply_theme, grid, rooms, theme, cfg, rng)
        items, monsters = _phase(
            "populate", populate, rooms, level, cfg, rng, self.monster_catalog, self.item_catalog
        )

        _door_metrics(grid, metrics)
        metrics["traps"] = len(traps)
        metrics["monsters"] = len(monsters)
        metrics["items"] = len(items)
        metrics["unreachable_rooms"] = len(unreachable_rooms_by_tiles(grid, rooms, entrance_room))

        return Dungeon(
            level=level,
            width=width,
            height=height,
            seed=seed,
            theme=theme,
            grid=grid,
            rooms=tuple(rooms),
            traps=tuple(traps),
            stairs=stairs,
            entrance=stairs.up,
            exit=stairs.down,
            monsters=tuple(monsters),
            items=tuple(items),
            maze_influence=maze_influence,
            metrics=metrics,
        )


def generate(level: int, width: int, height: int, seed: Optional[int] = None, config=None) -> Dungeon:
    """Convenience wrapper around a default :class:`DungeonGenerator`."""
    return DungeonGenerator(config=config).generate(level, width, height, seed=seed)


__all__ = ["Dungeon", "DungeonGenerator", "generate", "FALLBACK_ENTRANCE"]
