"""
project: Philosopher's Quest
module: __init__.py
License: MIT

Flask application factory for the dungeon generation service.

Configuration is sourced from environment variables (optionally via a
local .env file) with defaults matching the browser client: a 120x80 map
and the bundled boss layouts.
"""

import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

from quest.dungeon import DungeonGenerator, GeneratorConfig
from quest.logging_utils import get_logger

__version__ = "0.4.0"

# Load .env if present so QUEST_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

log = get_logger("quest.app")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        log.warn(event="bad_env_value", name=name, value=os.getenv(name))
        return default


def create_app(overrides=None, generator: DungeonGenerator = None) -> Flask:
    """Build a Flask app serving generated levels.

    ``overrides`` is applied to ``app.config`` after environment defaults;
    ``generator`` replaces the default DungeonGenerator (tests inject stub
    catalogs or layout sources this way).
    """
    app = Flask(__name__)
    app.config.update(
        QUEST_MAP_WIDTH=_env_int("QUEST_MAP_WIDTH", 120),
        QUEST_MAP_HEIGHT=_env_int("QUEST_MAP_HEIGHT", 80),
    )
    if overrides:
        app.config.update(overrides)
    if generator is None:
        generator = DungeonGenerator(config=app.config.get("QUEST_GENERATOR_CONFIG") or GeneratorConfig.from_env())
    app.config["QUEST_GENERATOR_CONFIG"] = generator.config
    app.extensions["quest_generator"] = generator

    from quest.routes.dungeon_api import bp_dungeon

    app.register_blueprint(bp_dungeon)

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        log.error(event="internal_error", error_id=error_id, error=repr(getattr(e, "original_exception", e)))
        return jsonify({"error": "internal server error", "error_id": error_id}), 500

    return app


__all__ = ["create_app", "__version__"]
