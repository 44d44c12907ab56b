import random
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Set, Tuple

from .config import GeneratorConfig
from .grid import TileGrid
from .tiles import FLOOR, Tile

# Rooms whose tops sit within this many rows are ordered left to right.
ROW_TOLERANCE = 5


class RoomArchetype(NamedTuple):
    name: str
    description: str
    item_multiplier: float = 1.0
    monster_multiplier: float = 1.0
    gold_multiplier: float = 1.0
    special: bool = False
    peaceful: bool = False


ARCHETYPES: Dict[str, RoomArchetype] = {
    "normal": RoomArchetype("normal", "a regular room"),
    "shop": RoomArchetype("shop", "a shop", item_multiplier=3.0, monster_multiplier=0.1, special=True),
    "library": RoomArchetype("library", "a library", item_multiplier=0.5, monster_multiplier=0.5, special=True),
    "armory": RoomArchetype("armory", "an armory", item_multiplier=2.0, monster_multiplier=1.2, special=True),
    "treasury": RoomArchetype(
        "treasury", "a treasury", item_multiplier=2.5, monster_multiplier=1.5, gold_multiplier=5.0, special=True
    ),
    "temple": RoomArchetype(
        "temple", "a temple", item_multiplier=0.3, monster_multiplier=0.2, special=True, peaceful=True
    ),
}

SPECIAL_ROOM_TYPES = tuple(name for name, archetype in ARCHETYPES.items() if archetype.special)


@dataclass
class Door:
    x: int
    y: int
    open: bool = False
    locked: bool = False
    secret: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "open": self.open, "locked": self.locked, "secret": self.secret}


@dataclass
class Room:
    x: int
    y: int
    width: int
    height: int
    index: int = 0
    type: str = "normal"
    connections: Set[int] = field(default_factory=set)
    doors: List[Door] = field(default_factory=list)

    @property
    def center_x(self) -> int:
        return self.x + self.width // 2

    @property
    def center_y(self) -> int:
        return self.y + self.height // 2

    @property
    def center(self) -> Tuple[int, int]:
        return (self.center_x, self.center_y)

    @property
    def archetype(self) -> RoomArchetype:
        return ARCHETYPES.get(self.type, ARCHETYPES["normal"])

    def cells(self) -> Iterator[Tuple[int, int]]:
        for iy in range(self.y, self.y + self.height):
            for ix in range(self.x, self.x + self.width):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def overlaps(self, other: "Room", margin: int = 0) -> bool:
        return not (
            self.x + self.width + margin <= other.x
            or other.x + other.width + margin <= self.x
            or self.y + self.height + margin <= other.y
            or other.y + other.height + margin <= self.y
        )

    def manhattan_distance_to(self, other: "Room") -> int:
        return abs(self.center_x - other.center_x) + abs(self.center_y - other.center_y)

    def random_position(self, rng: random.Random) -> Tuple[int, int]:
        return self.x + rng.randrange(self.width), self.y + rng.randrange(self.height)

    def connect_to(self, other: "Room") -> bool:
        if other.index in self.connections:
            return False
        self.connections.add(other.index)
        other.connections.add(self.index)
        return True

    def is_connected_to(self, other: "Room") -> bool:
        return other.index in self.connections

    def has_door_at(self, x: int, y: int) -> bool:
        return any(d.x == x and d.y == y for d in self.doors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "centerX": self.center_x,
            "centerY": self.center_y,
            "type": self.type,
            "connections": sorted(self.connections),
            "doors": [d.to_dict() for d in self.doors],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> "Room":
        if not isinstance(data, dict):
            raise TypeError(f"room record must be an object, got {type(data).__name__}")
        room = cls(
            x=int(data["x"]),
            y=int(data["y"]),
            width=int(data["width"]),
            height=int(data["height"]),
            index=index,
            type=str(data.get("type", "normal")),
        )
        room.connections = {int(c) for c in data.get("connections", []) if isinstance(c, int)}
        for d in data.get("doors", []):
            room.doors.append(
                Door(int(d["x"]), int(d["y"]), bool(d.get("open")), bool(d.get("locked")), bool(d.get("secret")))
            )
        return room


def place_rooms(grid: TileGrid, config: GeneratorConfig, rng: Optional[random.Random] = None):
    """Scatter non-overlapping rooms onto ``grid`` by rejection sampling.

    Returns (rooms, target_attempted, placed_count). Running out of trials
    before reaching the target is not an error; callers get what fit.
    """
    if rng is None:
        rng = random.Random()
    target = rng.randrange(config.min_rooms, max(config.max_rooms, config.min_rooms + 1))
    size_hi = max(config.max_room_size, config.min_room_size + 1)
    rooms: List[Room] = []
    attempts = 0
    while len(rooms) < target and attempts < config.placement_attempts:
        attempts += 1
        w = rng.randrange(config.min_room_size, size_hi)
        h = rng.randrange(config.min_room_size, size_hi)
        span_x = grid.width - w - 4
        span_y = grid.height - h - 4
        if span_x < 1 or span_y < 1:
            continue
        candidate = Room(2 + rng.randrange(span_x), 2 + rng.randrange(span_y), w, h, index=len(rooms))
        if not _can_place(candidate, rooms, grid):
            continue
        for ix, iy in candidate.cells():
            grid.set(ix, iy, Tile.floor(candidate.index))
        rooms.append(candidate)
    return rooms, target, len(rooms)


def _can_place(room: Room, existing: List[Room], grid: TileGrid) -> bool:
    if room.x < 1 or room.y < 1:
        return False
    if room.x + room.width >= grid.width - 1 or room.y + room.height >= grid.height - 1:
        return False
    return not any(room.overlaps(r, margin=1) for r in existing)


def _reading_order(a: Room, b: Room) -> int:
    if abs(a.y - b.y) < ROW_TOLERANCE:
        return a.x - b.x
    return a.y - b.y


def sequence_rooms(rooms: List[Room], grid: Optional[TileGrid] = None) -> List[Room]:
    """Order rooms roughly left-to-right, top-to-bottom and renumber them.

    Floor tiles are re-tagged with the new indices when ``grid`` is given.
    """
    ordered = sorted(rooms, key=cmp_to_key(_reading_order))
    for new_index, room in enumerate(ordered):
        room.index = new_index
        if grid is not None:
            for ix, iy in room.cells():
                tile = grid.get(ix, iy)
                if tile is not None and tile.type == FLOOR:
                    tile.room_index = new_index
    return ordered


__all__ = [
    "Room",
    "Door",
    "RoomArchetype",
    "ARCHETYPES",
    "SPECIAL_ROOM_TYPES",
    "place_rooms",
    "sequence_rooms",
    "ROW_TOLERANCE",
]
