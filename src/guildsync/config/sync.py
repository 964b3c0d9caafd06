"""Synchronization defaults for the sync engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import optional_float_env

DEFAULT_GUILD_STALE_HOURS = 24.0
DEFAULT_CHARACTER_STALE_HOURS = 24.0
DEFAULT_GUILD_BATCH_LIMIT = 50
DEFAULT_CHARACTER_BATCH_LIMIT = 200
DEFAULT_SYNC_INTERVAL_MINUTES = 60.0


@dataclass(frozen=True, slots=True)
class SyncConfig:
    guild_staleness: timedelta = timedelta(hours=DEFAULT_GUILD_STALE_HOURS)
    character_staleness: timedelta = timedelta(hours=DEFAULT_CHARACTER_STALE_HOURS)
    guild_batch_limit: int = DEFAULT_GUILD_BATCH_LIMIT
    character_batch_limit: int = DEFAULT_CHARACTER_BATCH_LIMIT
    interval: timedelta = timedelta(minutes=DEFAULT_SYNC_INTERVAL_MINUTES)


def get_sync_config() -> SyncConfig:
    guild_hours = optional_float_env("GUILDSYNC_GUILD_STALE_HOURS", DEFAULT_GUILD_STALE_HOURS)
    character_hours = optional_float_env(
        "GUILDSYNC_CHARACTER_STALE_HOURS", DEFAULT_CHARACTER_STALE_HOURS
    )
    interval_minutes = optional_float_env(
        "GUILDSYNC_SYNC_INTERVAL_MINUTES", DEFAULT_SYNC_INTERVAL_MINUTES
    )
    return SyncConfig(
        guild_staleness=timedelta(hours=guild_hours),
        character_staleness=timedelta(hours=character_hours),
        interval=timedelta(minutes=interval_minutes),
    )
