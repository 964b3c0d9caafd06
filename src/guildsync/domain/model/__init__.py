"""Public domain model surface."""

from __future__ import annotations

from guildsync.domain.model.base import Entity, new_id
from guildsync.domain.model.character import Character
from guildsync.domain.model.enums import Availability, CharacterRole, Region
from guildsync.domain.model.guild import Guild, GuildMember, GuildRank, default_rank_name
from guildsync.domain.model.snapshots import (
    CharacterProfile,
    CollectionsIndex,
    GuildProfile,
    GuildReference,
    GuildRoster,
    RosterEntry,
)
from guildsync.domain.model.user import User

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    # enums
    "Availability",
    "CharacterRole",
    "Region",
    # entities
    "Character",
    "Guild",
    "GuildMember",
    "GuildRank",
    "User",
    "default_rank_name",
    # remote snapshots
    "CharacterProfile",
    "CollectionsIndex",
    "GuildProfile",
    "GuildReference",
    "GuildRoster",
    "RosterEntry",
]
