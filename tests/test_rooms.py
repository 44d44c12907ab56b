import random

from quest.dungeon.config import GeneratorConfig
from quest.dungeon.grid import TileGrid
from quest.dungeon.rooms import ARCHETYPES, Room, place_rooms, sequence_rooms
from quest.dungeon.tiles import FLOOR, Tile


def _placed(seed, width=120, height=80, config=None):
    grid = TileGrid(width, height)
    rooms, target, placed = place_rooms(grid, config or GeneratorConfig(), random.Random(seed))
    return grid, rooms, target, placed


def test_rooms_never_overlap_including_buffer():
    for seed in range(20):
        _, rooms, _, _ = _placed(seed)
        for i, a in enumerate(rooms):
            for b in rooms[i + 1 :]:
                assert not a.overlaps(b, margin=1), (seed, a, b)


def test_rooms_within_bordered_bounds():
    for seed in range(20):
        grid, rooms, _, _ = _placed(seed, 60, 40)
        for r in rooms:
            assert r.x >= 1 and r.y >= 1
            assert r.x + r.width - 1 <= grid.width - 2
            assert r.y + r.height - 1 <= grid.height - 2


def test_target_count_range_and_carving():
    cfg = GeneratorConfig()
    for seed in range(20):
        grid, rooms, target, placed = _placed(seed)
        assert cfg.min_rooms <= target < cfg.max_rooms
        assert placed == len(rooms) <= target
        for r in rooms:
            for x, y in r.cells():
                tile = grid.get(x, y)
                assert tile.type == FLOOR and tile.room_index == r.index


def test_shortfall_is_not_an_error_on_tiny_map():
    cfg = GeneratorConfig(max_room_size=4)
    grid, rooms, target, placed = _placed(5, 8, 8, cfg)
    assert placed == 1
    assert target > placed


def test_sequence_reading_order_with_row_tolerance():
    a = Room(40, 10, 4, 4, index=0)
    b = Room(5, 12, 4, 4, index=1)  # same "row" as a (dy < 5), further left
    c = Room(2, 30, 4, 4, index=2)
    ordered = sequence_rooms([c, a, b])
    assert ordered == [b, a, c]
    assert [r.index for r in ordered] == [0, 1, 2]


def test_sequence_retags_floor_tiles():
    grid = TileGrid(30, 20)
    r1 = Room(20, 2, 3, 3, index=0)
    r2 = Room(2, 2, 3, 3, index=1)
    for r in (r1, r2):
        for x, y in r.cells():
            grid.set(x, y, Tile.floor(r.index))
    sequence_rooms([r1, r2], grid)
    assert grid.get(2, 2).room_index == 0
    assert grid.get(20, 2).room_index == 1


def test_room_geometry_helpers():
    r = Room(10, 5, 5, 4)
    assert r.center == (12, 7)
    assert r.contains(14, 8) and not r.contains(15, 8)
    pos = r.random_position(random.Random(3))
    assert r.contains(*pos)
    other = Room(20, 5, 3, 3, index=1)
    assert r.manhattan_distance_to(other) == abs(12 - 21) + abs(7 - 6)


def test_connect_is_symmetric_and_idempotent():
    a, b = Room(1, 1, 3, 3, index=0), Room(10, 1, 3, 3, index=1)
    assert a.connect_to(b) is True
    assert a.connect_to(b) is False
    assert b.is_connected_to(a)


def test_archetype_table():
    assert ARCHETYPES["temple"].peaceful is True
    assert ARCHETYPES["treasury"].gold_multiplier == 5.0
    assert Room(0, 0, 3, 3, type="unknown").archetype.name == "normal"
