from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from guildsync.adapters.sqlalchemy import start_mappers
from guildsync.adapters.sqlalchemy.migrations import upgrade_head
from guildsync.adapters.sqlalchemy.unit_of_work import SqlAlchemySyncUnitOfWork, shutdown, startup
from guildsync.domain.ports import InMemoryGuildSyncQueue

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so threads and sessions see the same in-memory database
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemySyncUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemySyncUnitOfWork:
        return SqlAlchemySyncUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def guild_queue() -> InMemoryGuildSyncQueue:
    return InMemoryGuildSyncQueue()
