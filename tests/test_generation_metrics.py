from quest.dungeon import DungeonGenerator
from quest.dungeon.metrics import init_metrics
from quest.events import LEVEL_GENERATED, LevelEvents
from tests.dungeon_test_utils import FixedItemCatalog, FixedMonsterCatalog, corridors_touching_floor

PHASES = {
    "place_rooms",
    "sequence_rooms",
    "route_corridors",
    "connectivity",
    "stairs",
    "special_room",
    "traps",
    "theme",
    "populate",
}


def test_metrics_populated(generator):
    d = generator.generate(6, 120, 80, seed=77)
    m = d.metrics
    assert set(init_metrics()) <= set(m)
    assert m["rooms_placed"] == len(d.rooms)
    assert m["rooms_attempted"] >= m["rooms_placed"]
    assert m["doors"] == d.grid.count("door")
    assert m["secret_doors"] + m["locked_doors"] <= 2 * m["doors"]
    assert m["traps"] == len(d.traps)
    assert m["items"] == len(d.items)
    assert m["unreachable_rooms"] == 0
    assert m["runtime_ms"] >= 0
    assert set(m["phase_ms"]) == PHASES


def test_same_seed_same_level(generator):
    a = generator.generate(12, 100, 70, seed=4242)
    b = generator.generate(12, 100, 70, seed=4242)
    assert a.to_ascii() == b.to_ascii()
    assert a.to_dict(include_tiles=False)["rooms"] == b.to_dict(include_tiles=False)["rooms"]
    assert [m.to_dict() for m in a.monsters] == [m.to_dict() for m in b.monsters]
    assert [i.to_dict() for i in a.items] == [i.to_dict() for i in b.items]


def test_different_seeds_differ(generator):
    a = generator.generate(12, 100, 70, seed=1)
    b = generator.generate(12, 100, 70, seed=2)
    assert a.to_ascii() != b.to_ascii()


def test_random_seed_is_recorded(generator):
    d = generator.generate(2, 60, 40)
    assert isinstance(d.seed, int)
    again = generator.generate(2, 60, 40, seed=d.seed)
    assert again.to_ascii() == d.to_ascii()


def test_door_invariant_holds_on_generated_levels(generator):
    for seed in range(5):
        d = generator.generate(20, 100, 60, seed=seed)
        assert corridors_touching_floor(d.grid) == []


def test_minotaur_levels_use_maze_influence(generator):
    assert generator.generate(20, 80, 50, seed=1).maze_influence is True
    assert generator.generate(10, 80, 50, seed=1).maze_influence is False


def test_generated_event_emitted():
    events = LevelEvents()
    got = []
    events.subscribe(lambda name, payload: got.append((name, payload)))
    gen = DungeonGenerator(monster_catalog=FixedMonsterCatalog(), item_catalog=FixedItemCatalog(), events=events)
    d = gen.generate(5, 70, 50, seed=8)
    assert got == [
        (
            LEVEL_GENERATED,
            {"level": 5, "seed": 8, "theme": "dungeon", "width": 70, "height": 50, "boss": False},
        )
    ]
    assert d.level == 5


def test_level_generated_log_line(generator, capsys):
    generator.generate(3, 60, 40, seed=31)
    out = capsys.readouterr().out
    assert "event=level_generated" in out
    assert "seed=31" in out
