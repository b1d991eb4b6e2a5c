"""Generated Maps CLI entry point.

Provides subcommands for running the JSON map server, generating a single map
to stdout and listing option presets. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

FORMATS = ("summary", "ascii", "json")


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Generated Maps

    Run the map generation JSON API, or generate a single dungeon map from the
    command line. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 5000)
          MAPS_DEFAULT_ALGORITHM  donjon | bsp (default: donjon)
          DUNGEON_PRESET          natural | clean | organic | maze
          MAPS_LOG_LEVEL          debug | info | warn | error

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a seeded 41x41 map as text
          python run.py generate --width 41 --height 41 --seed 7 --format ascii

          # Full JSON result using the "clean" preset
          python run.py generate --preset clean --format json

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="GeneratedMaps",
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
        version=f"Generated Maps {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the map generation web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask JSON API server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one map and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a single map and write it to stdout.",
    )
    gen_parser.add_argument("--algorithm", default=None, help="donjon | bsp (default: env MAPS_DEFAULT_ALGORITHM)")
    gen_parser.add_argument("--width", type=int, default=80, help="Grid width in cells (default: 80)")
    gen_parser.add_argument("--height", type=int, default=60, help="Grid height in cells (default: 60)")
    gen_parser.add_argument("--rooms", type=int, default=8, help="Target room count (default: 8)")
    gen_parser.add_argument("--seed", default=None, help="Integer or string seed (default: random)")
    gen_parser.add_argument("--preset", default=None, help="Option preset: natural | clean | organic | maze")
    gen_parser.add_argument("--room-min", dest="room_min", type=int, default=None)
    gen_parser.add_argument("--room-max", dest="room_max", type=int, default=None)
    gen_parser.add_argument("--straight-bias", dest="straight_bias", type=float, default=None)
    gen_parser.add_argument("--door-attempts", dest="door_attempts_per_room", type=int, default=None)
    gen_parser.add_argument("--dead-end-passes", dest="dead_end_max_passes", type=int, default=None)
    gen_parser.add_argument("--spur-max-len", dest="spur_max_len", type=int, default=None)
    gen_parser.add_argument(
        "--keep-dead-ends",
        dest="remove_dead_ends",
        action="store_const",
        const=False,
        default=None,
        help="Skip dead-end pruning",
    )
    gen_parser.add_argument(
        "--no-mst",
        dest="prune_mst",
        action="store_const",
        const=False,
        default=None,
        help="Skip minimum spanning tree corridor pruning",
    )
    gen_parser.add_argument(
        "--format",
        dest="output_format",
        choices=FORMATS,
        default="summary",
        help="Output: summary line, ascii map, or full json (default: summary)",
    )
    gen_parser.set_defaults(command="generate")

    # presets subcommand
    presets_parser = subparsers.add_parser(
        "presets",
        help="List option presets as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    presets_parser.set_defaults(command="presets")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


OPTION_FLAGS = (
    "room_min",
    "room_max",
    "straight_bias",
    "door_attempts_per_room",
    "remove_dead_ends",
    "dead_end_max_passes",
    "prune_mst",
    "spur_max_len",
)


def run_generate(args) -> int:
    from generated_maps.dungeon import PRESETS, DungeonOptions, generate_map, render_ascii, summary_line
    from generated_maps.routes.maps_api import _coerce_seed

    algorithm = (args.algorithm or os.getenv("MAPS_DEFAULT_ALGORITHM") or "donjon").strip().lower()
    opts = DungeonOptions.from_env()
    preset = (args.preset or "").strip().lower()
    if preset:
        if preset not in PRESETS:
            print(f"[ERROR] Unknown preset: {args.preset} (choose from {', '.join(sorted(PRESETS))})", file=sys.stderr)
            return 2
        opts = opts.merged(PRESETS[preset])
    opts = opts.merged({k: getattr(args, k) for k in OPTION_FLAGS if getattr(args, k) is not None})

    seed = _coerce_seed(args.seed)
    result = generate_map(algorithm, args.width, args.height, args.rooms, opts, seed=seed)

    if args.output_format == "json":
        payload = result.to_dict()
        payload["seed"] = seed
        print(json.dumps(payload))
    elif args.output_format == "ascii":
        print(render_ascii(result))
    else:
        print(f"seed={seed} algorithm={result.algorithm} {summary_line(result)}")
    return 0


def run_presets() -> int:
    from generated_maps.dungeon import PRESETS, DungeonOptions

    out = {name: DungeonOptions().merged(values).as_dict() for name, values in PRESETS.items()}
    print(json.dumps(out, indent=2))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args and getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return run_generate(args)
    if mode == "presets":
        return run_presets()

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    debug = bool(getattr(args, "debug", False))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from generated_maps import server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Map Server Bootup{Style.RESET_ALL}" if _COLOR_ENABLED else "Map Server Bootup"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Algorithm:'):12} {value(os.getenv('MAPS_DEFAULT_ALGORITHM', 'donjon'))}",
        f"  {label('Version:'):12} {value(__version__)}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from generated_maps.logging_utils import log

    log.info(event="startup", mode=mode, host=host, port=port, debug=debug)
    server.start_server(host=host, port=port, debug=debug)
    return 0


def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
