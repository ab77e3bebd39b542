"""Parallax CLI entry point.

Provides subcommands for running the Socket.IO server, seeding the catalog,
onboarding players and editing gameplay tunables. Accepts configuration via
flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import signal
import sys
from textwrap import dedent

from dotenv import load_dotenv


def _load_version() -> str:
    try:
        with open("VERSION", "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Parallax Game Server

    Run the Flask-SocketIO server or manage the game database from the shell.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                Bind address for the web server (default: 0.0.0.0)
          PORT                Port for the web server (default: 5000)
          DATABASE_URL        SQLAlchemy database URI (default: sqlite:///instance/parallax.db)
          PARALLAX_RNG_SEED   Seed for loot rolls (default: system entropy)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Bind to localhost only and use a different database
          python run.py server --host 127.0.0.1 --db sqlite:///instance/dev.db

          # Seed rifts, loot items and drop tables
          python run.py seed

          # Create a player with five default teams
          python run.py create-player alice --email alice@example.com

          # Raise the medium rift threshold
          python run.py config-set rift_unlock_thresholds '{"medium": 8}'
        """
    )

    parser = argparse.ArgumentParser(
        prog="Parallax",
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
        version=f"Parallax Server {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask/Socket.IO server",
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
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/parallax.db)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode",
    )

    subparsers.add_parser(
        "seed",
        help="Create tables and insert the default catalog and tunables",
    )

    player_parser = subparsers.add_parser(
        "create-player",
        help="Create a player with five default teams",
    )
    player_parser.add_argument("username", help="Unique username")
    player_parser.add_argument("--email", default=None, help="Optional contact email")

    cfg_get_parser = subparsers.add_parser(
        "config-get",
        help="Print a GameConfig value",
    )
    cfg_get_parser.add_argument("key", help="Config key")

    cfg_set_parser = subparsers.add_parser(
        "config-set",
        help="Set a GameConfig value",
    )
    cfg_set_parser.add_argument("key", help="Config key")
    cfg_set_parser.add_argument("value", help="Raw value (quote JSON externally)")

    if not argv:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    env_db = os.getenv("DATABASE_URL")

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    db_uri_cli = getattr(args, "db_uri", None)

    # DATABASE_URL must be set before the parallax package is imported
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli

    db_banner = db_uri_cli or env_db or "auto (instance/parallax.db)"
    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "server":
        def handle_sigint(sig, frame):
            print("\n[INFO] Shutting down server...")
            sys.exit(0)

        signal.signal(signal.SIGINT, handle_sigint)

        from parallax.logging_utils import log
        from parallax.server import start_server

        divider = "=" * 40
        lines = [
            divider,
            "  Parallax Game Server Bootup",
            divider,
            f"  {'Mode:':12} {mode.upper()}",
            f"  {'Host:':12} {host}",
            f"  {'Port:':12} {port}",
            f"  {'Database:':12} {db_banner}",
            f"  {'WebSockets:':12} enabled",
            divider,
            "",
        ]
        print("\n".join(lines))
        log.info(event="startup", mode=mode, host=host, port=port, db=db_banner)
        start_server(host=host, port=port, debug=bool(getattr(args, "debug", False)))
        return 0

    from parallax import create_app

    app = create_app()
    with app.app_context():
        if mode == "seed":
            from parallax.seed_catalog import seed_catalog, seed_game_config

            counts = seed_catalog()
            written = seed_game_config()
            print(f"Seeded {counts['rifts']} rifts, {counts['items']} items, {written} config keys.")
            return 0
        if mode == "create-player":
            from parallax.errors import GameError
            from parallax.services.player_service import register_player

            try:
                user = register_player(args.username, email=args.email)
            except GameError as e:
                print(f"[ERROR] {e.message}")
                return 1
            print(f"Created player {user.username} (id={user.id}) with 5 teams.")
            return 0
        if mode == "config-get":
            from parallax.models.models import GameConfig

            val = GameConfig.get(args.key)
            if val is None:
                print("[NOT FOUND]")
                return 1
            print(val)
            return 0
        if mode == "config-set":
            from parallax.models.models import GameConfig

            GameConfig.set(args.key, args.value)
            print("[OK]")
            return 0

    print(f"[ERROR] Unknown command: {mode}")
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
