"""Guild aggregate: the guild row, its memberships and its rank bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from guildsync.domain.model.base import Entity
from guildsync.domain.model.enums import Availability, Region

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Guild(Entity):
    name: str
    realm: str
    region: Region
    bnet_guild_id: int | None = None

    guild_data: dict[str, Any] | None = field(default=None, repr=False)
    roster_data: dict[str, Any] | None = field(default=None, repr=False)

    leader_id: UUID | None = None
    member_count: int | None = None

    last_synced_at: datetime | None = None
    last_roster_synced_at: datetime | None = None
    excluded_from_sync: bool = False
    created_at: datetime | None = None

    @property
    def never_synced(self) -> bool:
        return self.last_synced_at is None


@dataclass(eq=False, kw_only=True)
class GuildMember(Entity):
    """A character's membership in a guild.

    ``character_name``/``character_class``/``character_realm`` cache the last roster
    snapshot so a membership can be keyed before a local character is linked.
    """

    guild_id: UUID
    character_id: UUID | None = None
    rank: int

    character_name: str | None = None
    character_class: str | None = None
    character_realm: str | None = None

    availability: Availability = Availability.ACTIVE
    member_data: dict[str, Any] | None = field(default=None, repr=False)

    joined_at: datetime | None = None
    left_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.availability is Availability.ACTIVE


@dataclass(eq=False, kw_only=True)
class GuildRank:
    """Per-guild rank row keyed by (guild_id, rank_id); never deleted."""

    guild_id: UUID
    rank_id: int
    rank_name: str
    member_count: int = 0


def default_rank_name(rank_id: int) -> str:
    return "Guild Master" if rank_id == 0 else f"Rank {rank_id}"
