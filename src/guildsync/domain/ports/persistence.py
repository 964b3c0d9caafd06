"""Ports for persisting the sync engine's aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from guildsync.domain.model import Character, Guild, GuildMember, GuildRank, Region, User

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from datetime import datetime
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class GuildRepository(Repository[Guild], Protocol):
    def get(self, guild_id: UUID) -> Guild | None: ...

    def get_by_bnet_id(self, bnet_guild_id: int) -> Guild | None: ...

    def get_by_name(self, *, name: str, realm: str, region: Region) -> Guild | None: ...

    def find_outdated(self, *, synced_before: datetime, limit: int) -> list[Guild]:
        """Guilds never synced or synced before the cutoff, not excluded, oldest first."""
        ...

    def list_all(self) -> list[Guild]: ...


@runtime_checkable
class CharacterRepository(Repository[Character], Protocol):
    def get(self, character_id: UUID) -> Character | None: ...

    def get_many(self, character_ids: Collection[UUID]) -> list[Character]: ...

    def add_all(self, characters: Sequence[Character]) -> None: ...

    def find_by_names(self, names: Collection[str]) -> list[Character]:
        """Case-insensitive name lookup; callers narrow the result by realm."""
        ...

    def find_outdated(self, *, synced_before: datetime, limit: int) -> list[Character]:
        """Available characters never synced or synced before the cutoff, oldest first."""
        ...


@runtime_checkable
class GuildMemberRepository(Repository[GuildMember], Protocol):
    def list_for_guild(self, guild_id: UUID) -> list[GuildMember]: ...

    def find(self, *, guild_id: UUID, character_id: UUID) -> GuildMember | None: ...

    def add_all(self, members: Sequence[GuildMember]) -> None: ...

    def update_many(self, rows: Sequence[Mapping[str, object]]) -> None:
        """Bulk update by primary key; every row carries ``id`` and the same columns."""
        ...

    def mark_unavailable(self, member_ids: Collection[UUID], *, left_at: datetime) -> int: ...

    def mark_unavailable_for_character(self, character_id: UUID, *, left_at: datetime) -> int:
        """Deactivate every active membership referencing the character."""
        ...


@runtime_checkable
class GuildRankRepository(Repository[GuildRank], Protocol):
    def list_for_guild(self, guild_id: UUID) -> list[GuildRank]: ...

    def set_member_count(self, guild_id: UUID, rank_id: int, member_count: int) -> None: ...


@runtime_checkable
class UserRepository(Repository[User], Protocol):
    def find_owner_of_character(self, *, name: str, realm: str) -> User | None: ...
