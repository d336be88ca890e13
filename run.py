"""Dungeon layout CLI entry point.

Generates a layout from flags and/or environment variables and prints either
a short summary banner or the full JSON description (rooms, start, goal,
metrics). Accepts an optional .env file.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from dungeongen import __version__
from dungeongen.layout import LayoutConfig, LayoutError, LayoutPipeline
from dungeongen.layout.tiles import DescentPolicy, HallwayKind
from dungeongen.logging_utils import configure as configure_logging


def parse_args(argv: list[str]) -> argparse.Namespace:
    epilog = dedent(
        """
        Environment variables (flags take precedence):
          DUNGEONGEN_HEIGHT, DUNGEONGEN_WIDTH, DUNGEONGEN_ROOM_COUNT,
          DUNGEONGEN_MIN_ROOM_SIZE, DUNGEONGEN_MAX_ROOM_SIZE, DUNGEONGEN_SEED,
          DUNGEONGEN_INCLUDE_HALLWAYS, DUNGEONGEN_INCLUDE_NOISE,
          DUNGEONGEN_DESCENT, DUNGEONGEN_START_GOAL_HALLWAY
          DUNGEONGEN_LOG_LEVEL   debug|info|warn|error (default: info)
          DUNGEONGEN_LOG_JSON    1 to emit JSON log lines

        Examples:
          python run.py generate --seed 42
          python run.py generate --height 30 --width 30 --rooms 5 --json
          python run.py --env-file .env generate --descent detour
        """
    )
    parser = argparse.ArgumentParser(
        prog="dungeongen",
        description="Procedural dungeon layout generator",
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--env-file", dest="env_file", help="Path to a .env file to load before processing flags")
    parser.add_argument("--version", action="version", version=f"dungeongen {__version__}")

    subparsers = parser.add_subparsers(dest="command")
    gen = subparsers.add_parser("generate", help="Generate one layout and describe it")
    gen.add_argument("--height", type=int, default=None)
    gen.add_argument("--width", type=int, default=None)
    gen.add_argument("--rooms", dest="room_count", type=int, default=None)
    gen.add_argument("--min-room-size", dest="min_room_size", type=int, default=None)
    gen.add_argument("--max-room-size", dest="max_room_size", type=int, default=None)
    gen.add_argument("--seed", type=int, default=None)
    gen.add_argument("--noise", dest="include_noise", action="store_true", default=None)
    gen.add_argument("--no-hallways", dest="include_hallways", action="store_false", default=None)
    gen.add_argument(
        "--descent",
        choices=[p.value for p in DescentPolicy],
        default=None,
        help="Descent policy for direct hallways (default: greedy)",
    )
    gen.add_argument(
        "--connect-start-goal",
        dest="start_goal_hallway",
        choices=[k.value for k in HallwayKind],
        default=None,
        help="Carve a hallway of this kind between start and goal",
    )
    gen.add_argument("--strict", action="store_true", default=None, help="Fail when a room cannot be placed")
    gen.add_argument("--json", dest="as_json", action="store_true", help="Print the layout description as JSON")
    gen.set_defaults(command="generate")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> LayoutConfig:
    config = LayoutConfig.from_env()
    for name in (
        "height",
        "width",
        "room_count",
        "min_room_size",
        "max_room_size",
        "seed",
        "include_noise",
        "include_hallways",
        "strict",
    ):
        value = getattr(args, name, None)
        if value is not None:
            setattr(config, name, value)
    if getattr(args, "descent", None):
        config.descent = DescentPolicy(args.descent)
    if getattr(args, "start_goal_hallway", None):
        config.start_goal_hallway = HallwayKind(args.start_goal_hallway)
    return config


def _summary(grid) -> str:
    color = sys.stdout.isatty()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    lines = [
        divider,
        f"  {label('Seed:'):14} {value(grid.seed)}",
        f"  {label('Size:'):14} {value(f'{grid.height}x{grid.width}')}",
        f"  {label('Rooms:'):14} {value(len(grid.rooms))}",
        f"  {label('Hallways:'):14} {value(grid.metrics['hallways_carved'])}",
        f"  {label('Unreachable:'):14} {value(grid.metrics['unreachable_rooms'])}",
        f"  {label('Start/Goal:'):14} {value(f'{grid.start} -> {grid.goal}')}",
        divider,
    ]
    return "\n".join(lines)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()
    configure_logging()
    _color_init()

    if (getattr(args, "command", None) or "generate") != "generate":
        return 2
    if not hasattr(args, "as_json"):
        args = parse_args(["generate"])

    try:
        grid = LayoutPipeline(build_config(args)).run()
    except LayoutError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if args.as_json:
        payload = grid.to_dict()
        payload["metrics"] = grid.metrics
        print(json.dumps(payload, indent=2))
    else:
        print(_summary(grid))
    return 0


if __name__ == "__main__":
    os.environ.setdefault("DUNGEONGEN_LOG_LEVEL", "warn")
    raise SystemExit(main(sys.argv[1:]))
