"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import GameDataClient
from .persistence import (
    CharacterRepository,
    GuildMemberRepository,
    GuildRankRepository,
    GuildRepository,
    Repository,
    UserRepository,
)
from .queue import GuildSyncQueue, InMemoryGuildSyncQueue
from .unit_of_work import (
    RepositoryCollection,
    SyncRepositories,
    SyncUnitOfWork,
    SyncUnitOfWorkFactory,
    UnitOfWork,
)

__all__ = [
    "CharacterRepository",
    "GameDataClient",
    "GuildMemberRepository",
    "GuildRankRepository",
    "GuildRepository",
    "GuildSyncQueue",
    "InMemoryGuildSyncQueue",
    "Repository",
    "RepositoryCollection",
    "SyncRepositories",
    "SyncUnitOfWork",
    "SyncUnitOfWorkFactory",
    "UnitOfWork",
    "UserRepository",
]
