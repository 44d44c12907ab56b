import json
import math

import pytest
import requests

from quest.dungeon import DungeonGenerator, GeneratorConfig
from quest.dungeon.boss import FileBossLayoutSource, HttpBossLayoutSource, adopt_layout
from quest.dungeon.config import DATA_DIR
from quest.dungeon.tiles import DOOR, LAVA, STAIRS_UP
from quest.errors import BossLayoutError
from quest.events import LEVEL_BOSS_FALLBACK, LEVEL_GENERATED, LevelEvents
from tests.dungeon_test_utils import FixedItemCatalog, FixedMonsterCatalog, unreached_rooms

BUNDLED = DATA_DIR / "boss-levels"


def _gen(config=None, layout_source=None, events=None):
    return DungeonGenerator(
        config=config or GeneratorConfig(),
        monster_catalog=FixedMonsterCatalog(),
        item_catalog=FixedItemCatalog(),
        layout_source=layout_source,
        events=events,
    )


def _bundled_layout():
    with (BUNDLED / "level-15.json").open(encoding="utf-8") as f:
        return json.load(f)


def test_bundled_layout_adopted_verbatim():
    d = _gen().generate(15, 120, 80, seed=3)
    raw = _bundled_layout()
    assert d.is_boss_level is True
    assert (d.width, d.height) == (len(raw["tiles"][0]), len(raw["tiles"]))
    assert d.to_ascii().splitlines()[:4] == raw["tiles"][:4]
    assert d.boss["name"] == "The Gatekeeper"
    assert d.entrance == (3, 3) and d.get_tile(3, 3).type == STAIRS_UP
    assert d.exit == (27, 12)
    assert [t.to_dict() for t in d.traps] == raw["traps"]
    assert d.grid.count(LAVA) == 2
    assert unreached_rooms(d) == []


def test_population_still_runs_on_top_of_layout():
    d = _gen().generate(15, 120, 80, seed=3)
    raw = _bundled_layout()
    authored = [m["type"] for m in raw["monsters"]]
    assert [m.identifier for m in d.monsters[: len(authored)]] == authored
    assert len(d.monsters) == len(authored) + math.floor(3 + 0.5 * 15)
    assert len(d.items) >= len(raw["items"])


def test_layout_room_tiles_tagged_with_room_index():
    d = _gen().generate(15, 120, 80, seed=3)
    assert d.get_tile(13, 5).room_index == 1
    assert d.get_tile(26, 11).special == "treasury"


def test_missing_layout_falls_back_to_procedural(tmp_path, capsys):
    events = LevelEvents()
    seen = []
    events.subscribe(lambda name, payload: seen.append((name, payload)))
    d = _gen(layout_source=FileBossLayoutSource(tmp_path), events=events).generate(30, 90, 60, seed=4)
    assert d.is_boss_level is False
    assert (d.width, d.height) == (90, 60)
    assert d.rooms and d.entrance is not None
    assert d.theme == "minotaur"
    assert [n for n, _ in seen] == [LEVEL_BOSS_FALLBACK, LEVEL_GENERATED]
    assert "event=boss_layout_missing" in capsys.readouterr().out


def test_fallback_matches_plain_procedural_level(tmp_path):
    cfg = GeneratorConfig()
    boss = _gen(cfg, layout_source=FileBossLayoutSource(tmp_path)).generate(30, 90, 60, seed=4)
    plain = _gen(cfg.with_overrides(boss_levels=())).generate(30, 90, 60, seed=4)
    assert boss.to_ascii() == plain.to_ascii()
    assert [r.to_dict() for r in boss.rooms] == [r.to_dict() for r in plain.rooms]


def test_malformed_layout_falls_back(tmp_path, capsys):
    (tmp_path / "level-45.json").write_text("{not json", encoding="utf-8")
    d = _gen(layout_source=FileBossLayoutSource(tmp_path)).generate(45, 80, 50, seed=9)
    assert d.is_boss_level is False and d.rooms
    assert "event=boss_layout_failed" in capsys.readouterr().err


def test_layout_without_tiles_falls_back(tmp_path):
    (tmp_path / "level-60.json").write_text(json.dumps({"rooms": []}), encoding="utf-8")
    d = _gen(layout_source=FileBossLayoutSource(tmp_path)).generate(60, 80, 50, seed=9)
    assert d.is_boss_level is False


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"tiles": []},
        {"tiles": ["#?#"]},
        {"tiles": ["###"], "rooms": [{"x": 0, "y": 0, "width": 9, "height": 1}]},
        {"tiles": ["###"], "rooms": [{"x": 0}]},
        {"tiles": ["###"], "traps": [{"x": 0, "y": 0, "type": "banana"}]},
        {"tiles": ["###"], "stairs": {"up": {"x": 7, "y": 7}}},
        {"tiles": ["#####", "#...#", "#####"], "rooms": [{"x": 1, "y": 1, "width": 0, "height": 1}]},
        {"tiles": ["#####", "#...#", "#####"], "rooms": [{"x": 1, "y": 1, "width": 3, "height": -1}]},
        {"tiles": ["###"], "stairs": [1, 1]},
        {"tiles": ["###"], "stairs": "up"},
        {"tiles": ["###"], "rooms": [[0, 0, 1, 1]]},
        {"tiles": ["###"], "monsters": ["orc"]},
    ],
)
def test_adopt_rejects_malformed_documents(doc):
    with pytest.raises(BossLayoutError):
        adopt_layout(doc, 15)


@pytest.mark.parametrize(
    "doc",
    [
        {"tiles": ["#####", "#...#", "#####"], "rooms": [{"x": 1, "y": 1, "width": 0, "height": 1}]},
        {"tiles": ["#####", "#...#", "#####"], "stairs": [1, 1]},
    ],
)
def test_broken_layout_never_escapes_generate(tmp_path, capsys, doc):
    (tmp_path / "level-15.json").write_text(json.dumps(doc), encoding="utf-8")
    d = _gen(layout_source=FileBossLayoutSource(tmp_path)).generate(15, 60, 40, seed=1)
    assert d.is_boss_level is False and d.rooms
    assert "event=boss_layout_failed" in capsys.readouterr().err


def test_adopt_recovers_stairs_from_tiles():
    layout = adopt_layout({"tiles": ["#####", "#<.>#", "#####"]}, 75)
    assert layout.stairs.up == (1, 1) and layout.stairs.down == (3, 1)
    assert layout.entrance == (1, 1) and layout.exit == (3, 1)
    assert layout.theme is None


class _FakeResponse:
    def __init__(self, status_code, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


def test_http_source_adopts_layout(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return _FakeResponse(200, _bundled_layout())

    monkeypatch.setattr(requests, "get", fake_get)
    cfg = GeneratorConfig(boss_layout_url="http://layouts.example/boss-levels/")
    d = _gen(cfg).generate(15, 120, 80, seed=1)
    assert d.is_boss_level is True
    assert calls == [("http://layouts.example/boss-levels/level-15.json", 5.0)]


def test_http_404_is_missing(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout: _FakeResponse(404))
    assert HttpBossLayoutSource("http://x").fetch(15) is None


@pytest.mark.parametrize("resp", [_FakeResponse(500), _FakeResponse(200, bad_json=True)])
def test_http_errors_raise_layout_error(monkeypatch, resp):
    monkeypatch.setattr(requests, "get", lambda url, timeout: resp)
    with pytest.raises(BossLayoutError):
        HttpBossLayoutSource("http://x").fetch(15)


def test_http_connection_error_falls_back(monkeypatch):
    def boom(url, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", boom)
    d = _gen(GeneratorConfig(boss_layout_url="http://x")).generate(90, 80, 50, seed=2)
    assert d.is_boss_level is False and d.theme == "fenrir"


def test_no_source_configured_falls_back():
    d = _gen(GeneratorConfig(boss_layout_dir=None)).generate(15, 80, 50, seed=2)
    assert d.is_boss_level is False


def test_doors_in_layout_block_movement():
    d = _gen().generate(15, 120, 80, seed=3)
    assert d.get_tile(8, 4).type == DOOR
    assert d.is_walkable(8, 4) is False
    assert d.is_walkable(9, 4) is True
