"""MazeRun CLI entry point.

Provides subcommands for running the Socket.IO game server, previewing a
generated dungeon, and following a live server from the terminal. Accepts
configuration via flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import random
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

DEFAULT_PORT = 8080


def _load_version() -> str:
    from mazerun import __version__

    return __version__


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    MazeRun Game Server

    Run the real-time Flask-SocketIO dungeon server, preview a generated
    dungeon, or watch a running server. Configuration can be provided via CLI
    flags or environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 8080)
          MAZERUN_DUNGEON_WIDTH   Dungeon width in cells (default: 20)
          MAZERUN_DUNGEON_HEIGHT  Dungeon height in cells (default: 20)
          MAZERUN_ROOM_COUNT      Target number of rooms (default: 7)
          MAZERUN_AVG_ROOM_SIZE   Average room area (default: 8)
          MAZERUN_SEED            Seed for reproducible dungeons (default: random)
          MAZERUN_TICK_MS         Stopwatch tick in milliseconds (default: 100)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Bind to localhost only on a custom port
          python run.py server --host 127.0.0.1 --port 9000

          # Print a dungeon for a given seed
          python run.py preview --seed 42

          # Follow a running server, joining as a player
          python run.py watch --server http://127.0.0.1:8080 --join
        """
    )

    parser = argparse.ArgumentParser(
        prog="MazeRun",
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
        version=f"MazeRun Server {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO game server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO dungeon server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument(
        "--port", type=int, default=None, help=f"Port to listen on (default: env PORT or {DEFAULT_PORT})"
    )
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    preview_parser = subparsers.add_parser(
        "preview",
        help="Generate one dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Print a generated dungeon: '#' wall, '.' corridor, digits rooms, S start, E end.",
    )
    preview_parser.add_argument("--seed", type=int, default=None, help="Seed (default: env MAZERUN_SEED or random)")
    preview_parser.set_defaults(command="preview")

    watch_parser = subparsers.add_parser(
        "watch",
        help="Follow a running server from the terminal",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    watch_parser.add_argument(
        "--server",
        dest="server_url",
        default=None,
        help=f"Server URL (default: http://127.0.0.1:{DEFAULT_PORT})",
    )
    watch_parser.add_argument("--join", action="store_true", help="Request a player identity instead of spectating")
    watch_parser.set_defaults(command="watch")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]
    return parser.parse_args(argv)


def _banner(mode: str, host: str, port: int, config) -> str:
    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    title = f"{Fore.CYAN}{Style.BRIGHT}MazeRun Server Bootup{Style.RESET_ALL}" if _COLOR_ENABLED else "MazeRun Server Bootup"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Dungeon:'):12} {value(f'{config.width}x{config.height}, {config.room_count} rooms')}",
        f"  {label('Seed:'):12} {value(config.seed if config.seed is not None else 'random')}",
        f"  {label('Tick:'):12} {value(f'{config.tick_ms}ms')}",
        divider,
        "",
    ]
    return "\n".join(lines)


def _preview(seed) -> int:
    from mazerun.config import GameConfig
    from mazerun.errors import GenerationFailure
    from mazerun.game.state import DungeonState
    from mazerun.maze import render_ascii

    # keep stdout to the header and the grid
    os.environ.setdefault("MAZERUN_LOG_LEVEL", "warn")
    config = GameConfig.from_env()
    if seed is not None:
        config.seed = seed
    if config.seed is None:
        config.seed = random.randint(0, 2**31 - 1)
    state = DungeonState(config)
    try:
        maze = state.regenerate()
    except GenerationFailure as exc:
        print(f"[ERROR] {exc}")
        return 1
    print(f"seed={config.seed} rooms={len(maze.rooms)} start={tuple(state.start)} end={tuple(state.end)}")
    print(render_ascii(maze, marks={tuple(state.start): "S", tuple(state.end): "E"}))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "preview":
        return _preview(getattr(args, "seed", None))

    if mode == "watch":
        from mazerun.client import watch

        url = getattr(args, "server_url", None) or f"http://127.0.0.1:{DEFAULT_PORT}"
        watch(url, identify=bool(getattr(args, "join", False)))
        return 0

    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", str(DEFAULT_PORT)))
    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from mazerun.config import GameConfig
    from mazerun.logging_utils import log
    from mazerun.server import start_server

    config = GameConfig.from_env()
    print(_banner(mode, host, port, config))
    log.info(event="startup", mode=mode, host=host, port=port, debug=debug)

    from mazerun import create_app

    app = create_app(config)
    info_prefix = f"{Fore.CYAN}[INFO]{Style.RESET_ALL}" if _COLOR_ENABLED else "[INFO]"
    print(f"{info_prefix} Dungeon generated. Listening for connections... Press Ctrl+C to stop.")
    start_server(host=host, port=port, debug=debug, app=app)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
