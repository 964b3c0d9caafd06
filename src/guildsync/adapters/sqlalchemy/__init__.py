"""SQLAlchemy adapter package for guildsync."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCharacterRepository,
    SqlAlchemyGuildMemberRepository,
    SqlAlchemyGuildRankRepository,
    SqlAlchemyGuildRepository,
    SqlAlchemyUserRepository,
)

__all__ = [
    "SqlAlchemyCharacterRepository",
    "SqlAlchemyGuildMemberRepository",
    "SqlAlchemyGuildRankRepository",
    "SqlAlchemyGuildRepository",
    "SqlAlchemyUserRepository",
    "mapper_registry",
    "start_mappers",
]
