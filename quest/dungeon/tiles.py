"""Tile types and the per-cell Tile record.

A Tile only carries the optional fields that make sense for its type; the
constructor rejects anything else (a locked floor, a graffiti-covered wall).
``blocked`` is derived from type and door state rather than stored.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

WALL = "wall"
FLOOR = "floor"
CORRIDOR = "corridor"
DOOR = "door"
STAIRS_UP = "stairs_up"
STAIRS_DOWN = "stairs_down"
WATER = "water"
LAVA = "lava"
TRAP = "trap"

TILE_TYPES = (WALL, FLOOR, CORRIDOR, DOOR, STAIRS_UP, STAIRS_DOWN, WATER, LAVA, TRAP)

# Tiles that make up a room's interior once stairs and hazards are placed.
ROOM_INTERIOR = frozenset({FLOOR, STAIRS_UP, STAIRS_DOWN, WATER, LAVA, TRAP})
# Tiles a walker can cross, counting closed doors as passable.
PASSABLE = ROOM_INTERIOR | {CORRIDOR, DOOR}

_ALLOWED_FIELDS = {
    "room_index": ROOM_INTERIOR,
    "special": ROOM_INTERIOR,
    "graffiti": frozenset({FLOOR, CORRIDOR}),
    "trap": frozenset({FLOOR, CORRIDOR, TRAP}),
    "secret": frozenset({DOOR}),
    "locked": frozenset({DOOR}),
    "open": frozenset({DOOR}),
}

GLYPHS = {
    WALL: "#",
    FLOOR: ".",
    CORRIDOR: ",",
    DOOR: "+",
    STAIRS_UP: "<",
    STAIRS_DOWN: ">",
    WATER: "~",
    LAVA: "&",
    TRAP: "^",
}
_GLYPH_TO_TYPE = {g: t for t, g in GLYPHS.items()}
SECRET_DOOR_GLYPH = "S"
LOCKED_DOOR_GLYPH = "L"


class Tile:
    __slots__ = (
        "type",
        "visible",
        "explored",
        "room_index",
        "special",
        "graffiti",
        "trap",
        "secret",
        "locked",
        "open",
    )

    def __init__(
        self,
        type: str,
        *,
        room_index: Optional[int] = None,
        special: Optional[str] = None,
        graffiti: Optional[str] = None,
        trap: Optional[bool] = None,
        secret: Optional[bool] = None,
        locked: Optional[bool] = None,
        open: Optional[bool] = None,
        visible: bool = False,
        explored: bool = False,
    ):
        if type not in TILE_TYPES:
            raise ValueError(f"unknown tile type {type!r}")
        supplied = {
            "room_index": room_index,
            "special": special,
            "graffiti": graffiti,
            "trap": trap,
            "secret": secret,
            "locked": locked,
            "open": open,
        }
        for name, value in supplied.items():
            if value is not None and type not in _ALLOWED_FIELDS[name]:
                raise ValueError(f"field {name!r} not valid on {type} tile")
        self.type = type
        self.visible = visible
        self.explored = explored
        self.room_index = room_index
        self.special = special
        self.graffiti = graffiti
        self.trap = trap
        if type == DOOR:
            self.secret = bool(secret)
            self.locked = bool(locked)
            self.open = bool(open)
        else:
            self.secret = None
            self.locked = None
            self.open = None

    # ---- constructors -------------------------------------------------------
    @classmethod
    def wall(cls) -> "Tile":
        return cls(WALL)

    @classmethod
    def floor(cls, room_index: Optional[int] = None) -> "Tile":
        return cls(FLOOR, room_index=room_index)

    @classmethod
    def corridor(cls) -> "Tile":
        return cls(CORRIDOR)

    @classmethod
    def door(cls, *, secret: bool = False, locked: bool = False) -> "Tile":
        return cls(DOOR, secret=secret, locked=locked, open=False)

    def retyped(self, new_type: str) -> "Tile":
        """Return a copy of this tile as ``new_type`` keeping compatible fields."""
        kept = {}
        for name in ("room_index", "special", "graffiti", "trap"):
            value = getattr(self, name)
            if value is not None and new_type in _ALLOWED_FIELDS[name]:
                kept[name] = value
        return Tile(new_type, visible=self.visible, explored=self.explored, **kept)

    # ---- derived state ------------------------------------------------------
    @property
    def blocked(self) -> bool:
        if self.type == WALL:
            return True
        if self.type == DOOR:
            return not self.open
        return False

    @property
    def glyph(self) -> str:
        if self.type == DOOR and self.secret:
            return SECRET_DOOR_GLYPH
        if self.type == DOOR and self.locked:
            return LOCKED_DOOR_GLYPH
        return GLYPHS[self.type]

    # ---- serialization ------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.type,
            "blocked": self.blocked,
            "visible": self.visible,
            "explored": self.explored,
        }
        for name in ("room_index", "special", "graffiti", "trap", "secret", "locked", "open"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tile":
        if not isinstance(data, dict) or "type" not in data:
            raise ValueError(f"tile record without type: {data!r}")
        kwargs = {k: data[k] for k in _ALLOWED_FIELDS if data.get(k) is not None}
        # Hand-authored layouts may tag a room index onto a corridor; drop it.
        for name in list(kwargs):
            if data["type"] not in _ALLOWED_FIELDS[name] and name in ("room_index", "special"):
                kwargs.pop(name)
        return cls(
            data["type"],
            visible=bool(data.get("visible", False)),
            explored=bool(data.get("explored", False)),
            **kwargs,
        )

    @classmethod
    def from_glyph(cls, glyph: str) -> "Tile":
        if glyph == SECRET_DOOR_GLYPH:
            return cls.door(secret=True)
        if glyph == LOCKED_DOOR_GLYPH:
            return cls.door(locked=True)
        if glyph == " ":
            return cls.wall()
        try:
            return cls(_GLYPH_TO_TYPE[glyph])
        except KeyError:
            raise ValueError(f"unknown tile glyph {glyph!r}") from None

    def __eq__(self, other):
        if not isinstance(other, Tile):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return f"Tile({self.type!r})"


__all__ = [
    "Tile",
    "TILE_TYPES",
    "ROOM_INTERIOR",
    "PASSABLE",
    "GLYPHS",
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
