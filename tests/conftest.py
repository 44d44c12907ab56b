import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from quest import create_app  # noqa: E402
from quest.dungeon import DungeonGenerator, GeneratorConfig  # noqa: E402
from quest.routes.dungeon_api import clear_cache  # noqa: E402
from tests.dungeon_test_utils import FixedItemCatalog, FixedMonsterCatalog  # noqa: E402


@pytest.fixture()
def config():
    return GeneratorConfig()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def generator(config):
    return DungeonGenerator(config=config, monster_catalog=FixedMonsterCatalog(), item_catalog=FixedItemCatalog())


@pytest.fixture()
def test_app(monkeypatch):
    monkeypatch.delenv("QUEST_BOSS_LAYOUT_URL", raising=False)
    clear_cache()
    app = create_app({"TESTING": True})
    yield app
    clear_cache()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()
