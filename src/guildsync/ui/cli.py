from __future__ import annotations

import argparse
import logging
import sys
import threading
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from guildsync.app import build_orchestrator, list_stale_guilds, register_guild, run_sync, watch
from guildsync.config import ConfigurationError, configure_logging, get_sync_config
from guildsync.domain.model import Region

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise guilds and characters from Battle.net"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Run one sync cycle")

    watch_parser = subparsers.add_parser("watch", help="Run sync cycles until interrupted")
    watch_parser.add_argument(
        "--interval-minutes",
        type=float,
        default=None,
        help="Minutes between cycles (defaults to config)",
    )

    guild = subparsers.add_parser("guild", help="Guild management commands")
    guild_sub = guild.add_subparsers(dest="guild_command", required=True)
    guild_add = guild_sub.add_parser("add", help="Register a guild for syncing")
    guild_add.add_argument("name", help="Guild name as shown in game")
    guild_add.add_argument("--realm", required=True, help="Realm name or slug")
    guild_add.add_argument(
        "--region",
        required=True,
        choices=[region.value for region in Region],
        help="Battle.net region",
    )
    list_stale = guild_sub.add_parser("list-stale", help="Show guilds due for sync")
    list_stale.add_argument("--limit", type=int, help="Maximum number of guilds to show")

    return parser.parse_args(list(argv))


def _watch_interval_seconds(interval_minutes: float | None) -> float:
    if interval_minutes is None:
        return get_sync_config().interval.total_seconds()
    if interval_minutes <= 0:
        raise ValueError("Interval must be positive")
    return interval_minutes * 60


def _watch(interval: float) -> None:
    orchestrator = build_orchestrator()
    stop = threading.Event()

    def handle_sigint(_signal_received: int, _frame: FrameType | None) -> None:
        log.info("Interrupted; finishing the current item")
        stop.set()
        orchestrator.abort_sync()

    signal(SIGINT, handle_sigint)
    cycles = watch(orchestrator, interval_seconds=interval, stop=stop)
    log.info("Stopped after %d cycle(s)", cycles)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    interval = 0.0
    try:
        if parsed_args.command == "watch":
            interval = _watch_interval_seconds(parsed_args.interval_minutes)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync":
            result = run_sync()
            if result.skipped:
                log.warning("A sync cycle is already running")
        elif parsed_args.command == "watch":
            _watch(interval)
        elif parsed_args.command == "guild" and parsed_args.guild_command == "add":
            guild = register_guild(
                name=parsed_args.name,
                realm=parsed_args.realm,
                region=Region(parsed_args.region),
            )
            print(f"{guild.id}\t{guild.name}\t{guild.realm}\t{guild.region}")  # noqa: T201
        elif parsed_args.command == "guild" and parsed_args.guild_command == "list-stale":
            for guild in list_stale_guilds(limit=parsed_args.limit):
                synced = guild.last_synced_at.isoformat() if guild.last_synced_at else "never"
                print(f"{guild.id}\t{guild.name}\t{guild.realm}\t{guild.region}\t{synced}")  # noqa: T201
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


if __name__ == "__main__":
    main()
