"""Single-flight driver for sync cycles."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from guildsync.config.sync import SyncConfig
    from guildsync.domain.model import Character, Guild
    from guildsync.domain.ports import GuildSyncQueue, SyncUnitOfWorkFactory

    from .characters import CharacterSyncer
    from .guilds import GuildSyncer

log = getLogger(__name__)


class SyncState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    ABORT_REQUESTED = "abort_requested"


@dataclass(slots=True)
class SyncCycleResult:
    guild_outcomes: Counter[str] = field(default_factory=Counter)
    character_outcomes: Counter[str] = field(default_factory=Counter)
    queued_guilds: int = 0
    errors: int = 0
    aborted: bool = False
    skipped: bool = False

    @property
    def guilds_processed(self) -> int:
        return sum(self.guild_outcomes.values())

    @property
    def characters_processed(self) -> int:
        return sum(self.character_outcomes.values())


class _AbortRequested(Exception):  # noqa: N818
    pass


class SyncOrchestrator:
    """Runs sync cycles one at a time.

    ``run_sync`` is single flight: a call made while a cycle is running returns a
    skipped result immediately. ``abort_sync`` asks the running cycle to stop; the
    request is honoured between items, never in the middle of one.
    """

    def __init__(
        self,
        *,
        guild_syncer: GuildSyncer,
        character_syncer: CharacterSyncer,
        unit_of_work_factory: SyncUnitOfWorkFactory,
        guild_queue: GuildSyncQueue,
        config: SyncConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._guild_syncer = guild_syncer
        self._character_syncer = character_syncer
        self._uow_factory = unit_of_work_factory
        self._guild_queue = guild_queue
        self._config = config
        self._clock = clock or (lambda: datetime.now(UTC))
        self._lock = threading.Lock()
        self._state = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        return self._state

    def _transition(self, expected: SyncState, target: SyncState) -> bool:
        with self._lock:
            if self._state is not expected:
                return False
            self._state = target
            return True

    def abort_sync(self) -> bool:
        """Request a cooperative abort. Returns False when no cycle is running."""
        requested = self._transition(SyncState.RUNNING, SyncState.ABORT_REQUESTED)
        if requested:
            log.info("Abort requested; stopping after the current item")
        return requested

    def run_sync(self) -> SyncCycleResult:
        if not self._transition(SyncState.IDLE, SyncState.RUNNING):
            log.info("Sync already in progress; skipping this run")
            return SyncCycleResult(skipped=True)

        result = SyncCycleResult()
        started = self._clock()
        log.info("Starting sync cycle")
        try:
            self._sync_guilds(self._stale_guilds(started), result)
            self._sync_characters(self._stale_characters(started), result)
            self._sync_queued_guilds(result)
        except _AbortRequested:
            result.aborted = True
            log.warning("Sync cycle aborted")
        finally:
            with self._lock:
                self._state = SyncState.IDLE

        log.info(
            "Sync cycle finished: guilds=%s characters=%s queued=%d errors=%d",
            dict(result.guild_outcomes),
            dict(result.character_outcomes),
            result.queued_guilds,
            result.errors,
        )
        return result

    def _check_abort(self) -> None:
        if self._state is SyncState.ABORT_REQUESTED:
            raise _AbortRequested

    def _stale_guilds(self, now: datetime) -> list[Guild]:
        with self._uow_factory() as uow:
            return uow.repositories.guilds.find_outdated(
                synced_before=now - self._config.guild_staleness,
                limit=self._config.guild_batch_limit,
            )

    def _stale_characters(self, now: datetime) -> list[Character]:
        with self._uow_factory() as uow:
            return uow.repositories.characters.find_outdated(
                synced_before=now - self._config.character_staleness,
                limit=self._config.character_batch_limit,
            )

    def _sync_guilds(self, guilds: list[Guild], result: SyncCycleResult) -> None:
        log.info("Syncing %d stale guild(s)", len(guilds))
        for guild in guilds:
            self._check_abort()
            try:
                outcome = self._guild_syncer.sync_guild(guild)
            except Exception:
                log.exception("Guild %s failed", guild.id)
                result.errors += 1
                continue
            result.guild_outcomes[outcome] += 1

    def _sync_characters(self, characters: list[Character], result: SyncCycleResult) -> None:
        log.info("Syncing %d stale character(s)", len(characters))
        for character in characters:
            self._check_abort()
            try:
                outcome = self._character_syncer.sync_character(character)
            except Exception:
                log.exception("Character %s failed", character.id)
                result.errors += 1
                continue
            result.character_outcomes[outcome] += 1

    def _sync_queued_guilds(self, result: SyncCycleResult) -> None:
        self._check_abort()
        queued = self._guild_queue.drain()
        if not queued:
            return
        log.info("Syncing %d guild(s) discovered this cycle", len(queued))
        guilds: list[Guild] = []
        with self._uow_factory() as uow:
            for guild_id in queued:
                guild = uow.repositories.guilds.get(guild_id)
                # stubs synced since they were queued need no second pass
                if guild is None or guild.excluded_from_sync or not guild.never_synced:
                    continue
                guilds.append(guild)
        result.queued_guilds = len(guilds)
        self._sync_guilds(guilds, result)
