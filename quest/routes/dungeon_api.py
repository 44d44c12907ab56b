"""
project: Philosopher's Quest
module: dungeon_api.py
License: MIT

Dungeon level API routes.

Serves generated levels as JSON, the theme lookup used by the renderer's
palette, and the bundled boss layout documents. Generated levels are kept
in a small in-process cache keyed by (level, seed, width, height).
"""

import hashlib
import os
import random
import threading

from flask import Blueprint, current_app, jsonify, request, send_from_directory

from quest.dungeon import DungeonGenerator, resolve_theme
from quest.errors import QuestError
from quest.logging_utils import get_logger

log = get_logger("quest.routes.dungeon")

SEED_MAX_INT = 9223372036854775807

# Simple in-process cache (level,seed,width,height)->Dungeon. Thread-safe with a lock because the dev server is threaded.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()
_DUNGEON_CACHE_MAX = 8  # small LRU-ish manual cap

bp_dungeon = Blueprint("dungeon", __name__)


def _coerce_seed(raw_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if raw_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(raw_seed, int):
        return raw_seed % SEED_MAX_INT
    s = str(raw_seed).strip()
    if not s:
        return random.randint(1, 1_000_000)
    if s.isdigit():
        return int(s) % SEED_MAX_INT
    h = hashlib.sha256(s.encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SEED_MAX_INT


def _generator() -> DungeonGenerator:
    return current_app.extensions["quest_generator"]


def clear_cache():
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


def get_cached_dungeon(level: int, seed: int, width: int, height: int):
    if os.environ.get("QUEST_DISABLE_CACHE") == "1":
        return _generator().generate(level, width, height, seed=seed)
    key = (level, seed, width, height)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            return dungeon
    dungeon = _generator().generate(level, width, height, seed=seed)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        if len(_dungeon_cache) > _DUNGEON_CACHE_MAX:
            first_key = next(iter(_dungeon_cache.keys()))
            if first_key != key:
                _dungeon_cache.pop(first_key, None)
    return dungeon


def _int_arg(name, default):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    return int(raw)


@bp_dungeon.route("/api/dungeon/level/<level>")
def dungeon_level(level):
    """
    Generate (or fetch from cache) one dungeon level.
    Query: seed (int or string), width, height, tiles=0 to omit the tile rows.
    Response: the level as produced by Dungeon.to_dict().
    """
    try:
        level_num = int(level)
        width = _int_arg("width", current_app.config["QUEST_MAP_WIDTH"])
        height = _int_arg("height", current_app.config["QUEST_MAP_HEIGHT"])
    except ValueError:
        return jsonify({"error": "level, width and height must be integers"}), 400
    seed = _coerce_seed(request.args.get("seed"))
    try:
        dungeon = get_cached_dungeon(level_num, seed, width, height)
    except QuestError as exc:
        return jsonify({"error": str(exc)}), 400
    include_tiles = request.args.get("tiles", "1") not in ("0", "false", "no")
    return jsonify(dungeon.to_dict(include_tiles=include_tiles))


@bp_dungeon.route("/api/dungeon/theme/<level>")
def dungeon_theme(level):
    try:
        level_num = int(level)
    except ValueError:
        return jsonify({"error": "level must be an integer"}), 400
    if level_num < 1:
        return jsonify({"error": "level must be >= 1"}), 400
    return jsonify({"level": level_num, "theme": resolve_theme(level_num)})


@bp_dungeon.route("/data/boss-levels/level-<int:level>.json")
def boss_layout(level):
    """Serve a bundled boss layout document (404 if absent)."""
    directory = _generator().config.boss_layout_dir
    if directory is None:
        return jsonify({"error": "no boss layout directory configured"}), 404
    return send_from_directory(str(directory), f"level-{level}.json", mimetype="application/json")
