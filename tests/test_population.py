import math
import random

import pytest

from quest.dungeon import DungeonGenerator, GeneratorConfig
from quest.dungeon.population import (
    CONTAINER_TYPES,
    GOLD,
    ITEM_CATEGORIES,
    ItemPlacement,
    MonsterPlacement,
    gold_amount,
    monster_count,
    place_items,
    place_monsters,
)
from quest.dungeon.rooms import Room
from tests.dungeon_test_utils import FixedItemCatalog, FixedMonsterCatalog


def _rooms(n=4):
    return [Room(2 + i * 10, 2, 5, 5, index=i) for i in range(n)]


@pytest.mark.parametrize("level", [1, 2, 7, 10, 33, 100])
def test_monster_count_formula(level):
    assert monster_count(level) == math.floor(3 + 0.5 * level)
    monsters = place_monsters(_rooms(), level, GeneratorConfig(), random.Random(level), FixedMonsterCatalog())
    assert len(monsters) == math.floor(3 + 0.5 * level)


def test_gold_formula():
    assert gold_amount(10) == math.floor(10 * 1.5**10)
    assert gold_amount(15) == math.floor(10 * 1.5**10 + 5 * 50)
    assert gold_amount(1) == 15
    assert gold_amount(3, base=20) == math.floor(20 * 1.5**3)


def test_monsters_inside_rooms_and_catalog_consulted():
    catalog = FixedMonsterCatalog("goblin")
    rooms = _rooms()
    monsters = place_monsters(rooms, 8, GeneratorConfig(), random.Random(1), catalog)
    assert catalog.levels == [8] * len(monsters)
    for m in monsters:
        assert m.identifier == "goblin"
        assert rooms[m.room_index].contains(m.x, m.y)


def test_asleep_chance_extremes():
    rooms = _rooms()
    asleep = place_monsters(rooms, 4, GeneratorConfig(asleep_chance=1.0), random.Random(0), FixedMonsterCatalog())
    awake = place_monsters(rooms, 4, GeneratorConfig(asleep_chance=0.0), random.Random(0), FixedMonsterCatalog())
    assert all(m.asleep for m in asleep)
    assert not any(m.asleep for m in awake)


def test_peaceful_rooms_get_no_monsters():
    rooms = _rooms(3)
    rooms[1].type = "temple"
    for seed in range(5):
        monsters = place_monsters(rooms, 20, GeneratorConfig(), random.Random(seed), FixedMonsterCatalog())
        assert all(m.room_index != 1 for m in monsters)


def test_peaceful_only_level_still_gets_monsters():
    rooms = _rooms(1)
    rooms[0].type = "temple"
    assert len(place_monsters(rooms, 2, GeneratorConfig(), random.Random(0), FixedMonsterCatalog())) == 4


def test_no_rooms_no_monsters():
    assert place_monsters([], 9, GeneratorConfig(), random.Random(0), FixedMonsterCatalog()) == []


def test_forced_item_rolls_produce_each_kind():
    cfg = GeneratorConfig(container_chance=1.0, item_chance=1.0, gold_chance=1.0, additional_item_chance=0.0)
    catalog = FixedItemCatalog()
    rooms = _rooms(3)
    items = place_items(rooms, 5, cfg, random.Random(2), catalog)
    containers = [i for i in items if i.type in CONTAINER_TYPES]
    gold = [i for i in items if i.type == GOLD]
    regular = [i for i in items if i.type in ITEM_CATEGORIES]
    assert len(containers) == len(gold) == len(regular) == 3
    assert all(i.locked is not None and i.trapped is not None for i in containers)
    assert all(i.amount == gold_amount(5) for i in gold)
    assert all(i.identifier == f"{i.type}-5" for i in regular)
    assert len(catalog.requests) == 3
    for i in items:
        assert rooms[i.room_index].contains(i.x, i.y)


def test_item_stack_capped_at_five():
    cfg = GeneratorConfig(container_chance=0.0, item_chance=1.0, gold_chance=0.0, additional_item_chance=1.0)
    items = place_items(_rooms(2), 3, cfg, random.Random(0), FixedItemCatalog())
    assert len(items) == 2 * cfg.max_stacked_items


def test_treasury_multiplies_gold():
    rooms = _rooms(1)
    rooms[0].type = "treasury"
    cfg = GeneratorConfig(container_chance=0.0, item_chance=0.0, gold_chance=1.0)
    items = place_items(rooms, 4, cfg, random.Random(0), FixedItemCatalog())
    assert items[0].amount == math.floor(gold_amount(4) * 5.0)


def test_shop_item_chance_is_capped():
    rooms = _rooms(1)
    rooms[0].type = "shop"
    cfg = GeneratorConfig(container_chance=0.0, item_chance=0.5, gold_chance=0.0)
    for seed in range(10):
        items = place_items(rooms, 4, cfg, random.Random(seed), FixedItemCatalog())
        assert items, "shop multiplier pushes the item chance to 1.0"


def test_placement_records_serialize():
    i = ItemPlacement(1, 2, "chest", locked=True, trapped=False)
    assert i.to_dict() == {"x": 1, "y": 2, "type": "chest", "locked": True, "trapped": False}
    assert i.is_container
    m = MonsterPlacement.from_dict({"x": 3, "y": 4, "type": "orc", "asleep": True})
    assert m.identifier == "orc" and m.asleep is True


def test_generated_level_monster_count(generator):
    for level in (1, 9, 22):
        d = generator.generate(level, 100, 60, seed=level)
        assert len(d.monsters) == math.floor(3 + 0.5 * level)
        assert d.metrics["monsters"] == len(d.monsters)


def test_default_catalogs_used_when_none_given():
    d = DungeonGenerator().generate(3, 80, 50, seed=5)
    assert d.monsters and all(isinstance(m.identifier, str) and m.identifier for m in d.monsters)
