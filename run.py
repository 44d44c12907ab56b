"""Philosopher's Quest CLI entry point.

Provides subcommands for generating a single dungeon level (ASCII or JSON)
and for running the level API server. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import just_fix_windows_console
from dotenv import load_dotenv

from quest import __version__

just_fix_windows_console()


def _color_enabled() -> bool:
    # Disable colors if output is not a real terminal (e.g., during pytest capture)
    return sys.stdout.isatty()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Philosopher's Quest dungeon generator

    Generate a single dungeon level for inspection, or run the HTTP API that
    serves levels to the game client. Configuration can be provided via CLI
    flags or QUEST_* environment variables. If both are present, CLI flags
    take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 127.0.0.1)
          PORT                  Port for the web server (default: 5000)
          QUEST_MAP_WIDTH       Default map width (default: 120)
          QUEST_MAP_HEIGHT      Default map height (default: 80)
          QUEST_BOSS_LAYOUT_URL Fetch boss layouts over HTTP instead of the bundled files
          QUEST_LOG_LEVEL       debug|info|warn|error (default: info)

        Examples:
          # Print level 3 as ASCII with a fixed seed
          python run.py generate --level 3 --seed 42

          # Dump level 15 (a boss level) as JSON
          python run.py generate --level 15 --json

          # Run the API server on a custom port
          python run.py serve --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="quest",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Philosopher's Quest {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one level and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one dungeon level and print it as ASCII (default) or JSON",
    )
    gen_parser.add_argument("--level", type=int, default=1, help="Dungeon level, 1-based (default: 1)")
    gen_parser.add_argument("--seed", default=None, help="Integer or string seed (default: random)")
    gen_parser.add_argument("--width", type=int, default=None, help="Map width (default: env QUEST_MAP_WIDTH or 120)")
    gen_parser.add_argument(
        "--height", type=int, default=None, help="Map height (default: env QUEST_MAP_HEIGHT or 80)"
    )
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print the level as JSON")
    gen_parser.add_argument(
        "--no-tiles", dest="no_tiles", action="store_true", help="With --json, omit the tile rows"
    )
    gen_parser.set_defaults(command="generate")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the level API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask development server for the level API",
    )
    serve_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    serve_parser.set_defaults(command="serve")

    # If no subcommand provided, default to generating level 1
    if len(argv) == 0:
        argv = ["generate"]

    return parser.parse_args(argv)


def _banner(rows) -> str:
    color = _color_enabled()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    lines = [divider]
    for k, v in rows:
        lines.append(f"  {label(k + ':'):14} {value(v)}")
    lines.append(divider)
    return "\n".join(lines)


def cmd_generate(args) -> int:
    from quest.dungeon import DungeonGenerator, GeneratorConfig
    from quest.errors import QuestError
    from quest.routes.dungeon_api import _coerce_seed

    width = args.width or int(os.getenv("QUEST_MAP_WIDTH", "120"))
    height = args.height or int(os.getenv("QUEST_MAP_HEIGHT", "80"))
    seed = _coerce_seed(args.seed) if args.seed is not None else None
    generator = DungeonGenerator(config=GeneratorConfig.from_env())
    try:
        dungeon = generator.generate(args.level, width, height, seed=seed)
    except QuestError as exc:
        msg = f"{Fore.RED}error:{Style.RESET_ALL} {exc}" if _color_enabled() else f"error: {exc}"
        print(msg, file=sys.stderr)
        return 2
    if args.as_json:
        print(dungeon.to_json(include_tiles=not args.no_tiles))
        return 0
    entrance = dungeon.get_entrance()
    print(
        _banner(
            [
                ("Level", dungeon.level),
                ("Seed", dungeon.seed),
                ("Theme", dungeon.theme),
                ("Boss level", "YES" if dungeon.is_boss_level else "NO"),
                ("Size", f"{dungeon.width}x{dungeon.height}"),
                ("Rooms", len(dungeon.rooms)),
                ("Entrance", f"{entrance.x},{entrance.y}"),
                ("Exit", f"{dungeon.exit.x},{dungeon.exit.y}" if dungeon.exit else "none"),
                ("Monsters", len(dungeon.monsters)),
                ("Items", len(dungeon.items)),
            ]
        )
    )
    print(dungeon.to_ascii())
    return 0


def cmd_serve(args) -> int:
    from quest import create_app

    host = args.host or os.getenv("HOST", "127.0.0.1")
    port = int(args.port or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)
    print(_banner([("Mode", "SERVE"), ("Host", host), ("Port", port), ("Version", __version__)]))
    app = create_app()
    app.run(host=host, port=port, debug=args.debug)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()
    if args.command == "serve":
        return cmd_serve(args)
    return cmd_generate(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
