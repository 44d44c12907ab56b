"""Population Engine: where and how many items, containers, gold and monsters.

Identity (which sword, which monster) is delegated to catalog
collaborators; this module only decides positions, counts and the coarse
category to ask for. Rooms roll independently of one another.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .config import GeneratorConfig
from .rooms import Room

ITEM_CATEGORIES = ("weapon", "armor", "potion", "scroll", "ring", "wand", "food")
CONTAINER_TYPES = ("large_box", "chest")
GOLD = "gold"

LARGE_BOX_CHANCE = 0.67
CONTAINER_LOCKED_CHANCE = 0.3
CONTAINER_TRAPPED_CHANCE = 0.1
# Gold grows exponentially up to this level, linearly afterwards.
GOLD_EXPONENT_CAP = 10
GOLD_LINEAR_STEP = 50


class MonsterCatalog(Protocol):
    def pick_monster_identifier(self, level: int, rng: random.Random) -> str: ...


class ItemCatalog(Protocol):
    def pick_item_identifier(self, level: int, category: str, rng: random.Random) -> str: ...


@dataclass
class ItemPlacement:
    x: int
    y: int
    type: str
    identifier: Optional[str] = None
    amount: Optional[int] = None
    locked: Optional[bool] = None
    trapped: Optional[bool] = None
    room_index: Optional[int] = None

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    def to_dict(self) -> Dict[str, Any]:
        out = {"x": self.x, "y": self.y, "type": self.type}
        for name in ("identifier", "amount", "locked", "trapped", "room_index"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemPlacement":
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            type=str(data["type"]),
            identifier=data.get("identifier"),
            amount=data.get("amount"),
            locked=data.get("locked"),
            trapped=data.get("trapped"),
            room_index=data.get("room_index"),
        )


@dataclass
class MonsterPlacement:
    x: int
    y: int
    identifier: str
    asleep: bool = False
    room_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {"x": self.x, "y": self.y, "identifier": self.identifier, "asleep": self.asleep}
        if self.room_index is not None:
            out["room_index"] = self.room_index
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonsterPlacement":
        # hand-authored layouts use "type" for the monster id
        ident = data.get("identifier", data.get("type"))
        if ident is None:
            raise KeyError("identifier")
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            identifier=str(ident),
            asleep=bool(data.get("asleep", False)),
            room_index=data.get("room_index"),
        )


def gold_amount(level: int, base: int = 10) -> int:
    """Gold in one pile at ``level``: ``base * 1.5^L`` up to level 10, then +50 per level."""
    if level <= GOLD_EXPONENT_CAP:
        return math.floor(base * 1.5 ** level)
    return math.floor(base * 1.5 ** GOLD_EXPONENT_CAP + (level - GOLD_EXPONENT_CAP) * GOLD_LINEAR_STEP)


def monster_count(level: int) -> int:
    return math.floor(3 + level * 0.5)


def place_items(
    rooms: List[Room], level: int, config: GeneratorConfig, rng: random.Random, catalog: ItemCatalog
) -> List[ItemPlacement]:
    items: List[ItemPlacement] = []
    for room in rooms:
        archetype = room.archetype
        if rng.random() < config.container_chance:
            x, y = room.random_position(rng)
            items.append(
                ItemPlacement(
                    x,
                    y,
                    CONTAINER_TYPES[0] if rng.random() < LARGE_BOX_CHANCE else CONTAINER_TYPES[1],
                    locked=rng.random() < CONTAINER_LOCKED_CHANCE,
                    trapped=rng.random() < CONTAINER_TRAPPED_CHANCE,
                    room_index=room.index,
                )
            )
        if rng.random() < min(1.0, config.item_chance * archetype.item_multiplier):
            count = 1
            while count < config.max_stacked_items and rng.random() < config.additional_item_chance:
                count += 1
            for _ in range(count):
                x, y = room.random_position(rng)
                category = rng.choice(ITEM_CATEGORIES)
                items.append(
                    ItemPlacement(
                        x,
                        y,
                        category,
                        identifier=catalog.pick_item_identifier(level, category, rng),
                        room_index=room.index,
                    )
                )
        if rng.random() < config.gold_chance:
            x, y = room.random_position(rng)
            amount = math.floor(gold_amount(level, config.gold_base) * archetype.gold_multiplier)
            items.append(ItemPlacement(x, y, GOLD, amount=amount, room_index=room.index))
    return items


def place_monsters(
    rooms: List[Room], level: int, config: GeneratorConfig, rng: random.Random, catalog: MonsterCatalog
) -> List[MonsterPlacement]:
    """Place exactly ``monster_count(level)`` monsters across the level.

    Rooms are picked weighted by their archetype's monster multiplier;
    peaceful rooms are skipped unless they are all there is.
    """
    if not rooms:
        return []
    eligible = [r for r in rooms if not r.archetype.peaceful] or list(rooms)
    weights = [max(r.archetype.monster_multiplier, 0.01) for r in eligible]
    monsters: List[MonsterPlacement] = []
    for _ in range(monster_count(level)):
        room = rng.choices(eligible, weights=weights)[0]
        x, y = room.random_position(rng)
        monsters.append(
            MonsterPlacement(
                x,
                y,
                catalog.pick_monster_identifier(level, rng),
                asleep=rng.random() < config.asleep_chance,
                room_index=room.index,
            )
        )
    return monsters


def populate(
    rooms: List[Room],
    level: int,
    config: GeneratorConfig,
    rng: random.Random,
    monster_catalog: MonsterCatalog,
    item_catalog: ItemCatalog,
) -> Tuple[List[ItemPlacement], List[MonsterPlacement]]:
    items = place_items(rooms, level, config, rng, item_catalog)
    monsters = place_monsters(rooms, level, config, rng, monster_catalog)
    return items, monsters


__all__ = [
    "ITEM_CATEGORIES",
    "CONTAINER_TYPES",
    "GOLD",
    "MonsterCatalog",
    "ItemCatalog",
    "ItemPlacement",
    "MonsterPlacement",
    "gold_amount",
    "monster_count",
    "place_items",
    "place_monsters",
    "populate",
]
