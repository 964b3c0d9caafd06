"""Application orchestration entry points."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from guildsync.adapters.battlenet import BattleNetClient
from guildsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    is_started,
    startup,
)
from guildsync.config.sync import get_sync_config
from guildsync.domain.model import Guild, Region
from guildsync.domain.ports import InMemoryGuildSyncQueue
from guildsync.domain.reconciliation import (
    CharacterSyncer,
    GuildSyncer,
    SyncCycleResult,
    SyncOrchestrator,
    slugify,
)

if TYPE_CHECKING:
    from guildsync.config.sync import SyncConfig
    from guildsync.domain.ports import GameDataClient, GuildSyncQueue, SyncUnitOfWork

UnitOfWorkFactory = Callable[[], "SyncUnitOfWork"]

log = getLogger(__name__)


def _default_uow_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemySyncUnitOfWork


def build_orchestrator(
    *,
    client: GameDataClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    guild_queue: GuildSyncQueue | None = None,
    config: SyncConfig | None = None,
) -> SyncOrchestrator:
    """Wire the sync engine to the Battle.net client and the SQL store."""

    effective_uow = unit_of_work_factory or _default_uow_factory()
    effective_client = client or BattleNetClient()
    queue = guild_queue or InMemoryGuildSyncQueue()
    return SyncOrchestrator(
        guild_syncer=GuildSyncer(client=effective_client, unit_of_work_factory=effective_uow),
        character_syncer=CharacterSyncer(
            client=effective_client,
            unit_of_work_factory=effective_uow,
            guild_queue=queue,
        ),
        unit_of_work_factory=effective_uow,
        guild_queue=queue,
        config=config or get_sync_config(),
    )


def run_sync(*, orchestrator: SyncOrchestrator | None = None) -> SyncCycleResult:
    """Run one sync cycle."""

    effective = orchestrator or build_orchestrator()
    result = effective.run_sync()
    log.info(
        "Sync finished: guilds=%s, characters=%s, queued=%s, aborted=%s",
        result.guilds_processed,
        result.characters_processed,
        result.queued_guilds,
        result.aborted,
    )
    return result


def watch(
    orchestrator: SyncOrchestrator,
    *,
    interval_seconds: float,
    stop: threading.Event,
    max_cycles: int | None = None,
) -> int:
    """Run a cycle now and then every ``interval_seconds`` until ``stop`` is set.

    Returns the number of cycles that ran.
    """

    cycles = 0
    while not stop.is_set():
        run_sync(orchestrator=orchestrator)
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break
        stop.wait(interval_seconds)
    return cycles


def register_guild(
    *,
    name: str,
    realm: str,
    region: Region,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Guild:
    """Create a guild for the next sync cycle, or return the existing one."""

    effective_uow = unit_of_work_factory or _default_uow_factory()
    realm_slug = slugify(realm)
    with effective_uow() as uow:
        existing = uow.repositories.guilds.get_by_name(name=name, realm=realm_slug, region=region)
        if existing is not None:
            log.info(
                "Guild %s-%s (%s) already registered as %s", name, realm_slug, region, existing.id
            )
            return existing
        guild = Guild(name=name, realm=realm_slug, region=region, created_at=datetime.now(UTC))
        uow.repositories.guilds.add(guild)
        uow.commit()
    log.info("Registered guild %s-%s (%s) as %s", name, realm_slug, region, guild.id)
    return guild


def list_stale_guilds(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: SyncConfig | None = None,
    limit: int | None = None,
) -> list[Guild]:
    """Guilds the next cycle would pick up, in the order it would sync them."""

    effective_uow = unit_of_work_factory or _default_uow_factory()
    sync_config = config or get_sync_config()
    cutoff = datetime.now(UTC) - sync_config.guild_staleness
    with effective_uow() as uow:
        return uow.repositories.guilds.find_outdated(
            synced_before=cutoff,
            limit=limit if limit is not None else sync_config.guild_batch_limit,
        )
