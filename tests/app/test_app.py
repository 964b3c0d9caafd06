from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from guildsync import app
from guildsync.config.sync import SyncConfig
from guildsync.domain.model import Region
from guildsync.domain.reconciliation import SyncCycleResult
from tests.helpers.game_data import FakeGameDataClient, guild_profile, make_roster, roster_entry
from tests.helpers.store import add_guild, load_guild, members_by_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from guildsync.adapters.sqlalchemy.unit_of_work import SqlAlchemySyncUnitOfWork
    from guildsync.domain.ports import InMemoryGuildSyncQueue

    UowFactory = Callable[[], SqlAlchemySyncUnitOfWork]


class CountingOrchestrator:
    def __init__(self, stop_after: int | None = None, stop: threading.Event | None = None) -> None:
        self.runs = 0
        self._stop_after = stop_after
        self._stop = stop

    def run_sync(self) -> SyncCycleResult:
        self.runs += 1
        if self._stop is not None and self.runs == self._stop_after:
            self._stop.set()
        return SyncCycleResult()


def test_register_guild_is_idempotent(sqlite_unit_of_work: UowFactory) -> None:
    first = app.register_guild(
        name="Raiders", realm="Area 52", region=Region.US, unit_of_work_factory=sqlite_unit_of_work
    )
    second = app.register_guild(
        name="raiders", realm="area-52", region=Region.US, unit_of_work_factory=sqlite_unit_of_work
    )

    assert first.id == second.id
    assert first.realm == "area-52"
    assert load_guild(sqlite_unit_of_work, first.id).never_synced


def test_list_stale_guilds_uses_config_staleness(sqlite_unit_of_work: UowFactory) -> None:
    now = datetime.now(UTC)
    add_guild(sqlite_unit_of_work, name="Recent", last_synced_at=now - timedelta(hours=2))
    add_guild(sqlite_unit_of_work, name="Never")

    hourly = app.list_stale_guilds(
        unit_of_work_factory=sqlite_unit_of_work,
        config=SyncConfig(guild_staleness=timedelta(hours=1)),
    )
    daily = app.list_stale_guilds(
        unit_of_work_factory=sqlite_unit_of_work,
        config=SyncConfig(guild_staleness=timedelta(days=1)),
    )

    assert [guild.name for guild in hourly] == ["Never", "Recent"]
    assert [guild.name for guild in daily] == ["Never"]


def test_watch_stops_after_max_cycles() -> None:
    orchestrator = CountingOrchestrator()

    cycles = app.watch(
        orchestrator,  # type: ignore[arg-type]
        interval_seconds=0,
        stop=threading.Event(),
        max_cycles=3,
    )

    assert cycles == 3
    assert orchestrator.runs == 3


def test_watch_stops_when_event_is_set() -> None:
    stop = threading.Event()
    orchestrator = CountingOrchestrator(stop_after=2, stop=stop)

    cycles = app.watch(orchestrator, interval_seconds=0, stop=stop)  # type: ignore[arg-type]

    assert cycles == 2


def test_full_cycle_with_fake_client(
    sqlite_unit_of_work: UowFactory, guild_queue: InMemoryGuildSyncQueue
) -> None:
    guild = app.register_guild(
        name="Raiders", realm="area-52", region=Region.US, unit_of_work_factory=sqlite_unit_of_work
    )
    client = FakeGameDataClient()
    client.guilds["area-52", "raiders"] = guild_profile()
    client.rosters["area-52", "raiders"] = make_roster(roster_entry("Anna", 0))
    orchestrator = app.build_orchestrator(
        client=client,
        unit_of_work_factory=sqlite_unit_of_work,
        guild_queue=guild_queue,
        config=SyncConfig(),
    )

    result = app.run_sync(orchestrator=orchestrator)

    assert result.guilds_processed == 1
    # Anna was created by the roster pass and is picked up as never synced
    assert result.characters_processed == 1
    assert load_guild(sqlite_unit_of_work, guild.id).bnet_guild_id == 1001
    # no remote profile for Anna, so the character and its membership are soft deleted
    assert not members_by_name(sqlite_unit_of_work, guild.id)["Anna"].is_available
