"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select, update

from guildsync.adapters.sqlalchemy.mappings import (
    character_table,
    guild_member_table,
    guild_rank_table,
    guild_table,
    user_table,
)
from guildsync.domain.model import (
    Availability,
    Character,
    Guild,
    GuildMember,
    GuildRank,
    Region,
    User,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyGuildRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Guild) -> None:
        self.session.add(entity)

    def get(self, guild_id: UUID) -> Guild | None:
        return self.session.get(Guild, guild_id)

    def get_by_bnet_id(self, bnet_guild_id: int) -> Guild | None:
        stmt = select(Guild).where(guild_table.c.bnet_guild_id == bnet_guild_id).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_name(self, *, name: str, realm: str, region: Region) -> Guild | None:
        stmt = (
            select(Guild)
            .where(func.lower(guild_table.c.name) == name.lower())
            .where(func.lower(guild_table.c.realm) == realm.lower())
            .where(guild_table.c.region == region)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_outdated(self, *, synced_before: datetime, limit: int) -> list[Guild]:
        synced = guild_table.c.last_synced_at
        stmt = (
            select(Guild)
            .where(guild_table.c.excluded_from_sync.is_(False))
            .where(or_(synced.is_(None), synced < synced_before))
            .order_by(synced.asc().nulls_first(), guild_table.c.name)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def list_all(self) -> list[Guild]:
        stmt = select(Guild).order_by(guild_table.c.region, guild_table.c.realm, guild_table.c.name)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyCharacterRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Character) -> None:
        self.session.add(entity)

    def add_all(self, characters: Sequence[Character]) -> None:
        self.session.add_all(characters)

    def get(self, character_id: UUID) -> Character | None:
        return self.session.get(Character, character_id)

    def get_many(self, character_ids: Collection[UUID]) -> list[Character]:
        if not character_ids:
            return []
        stmt = select(Character).where(character_table.c.id.in_(list(character_ids)))
        return list(self.session.execute(stmt).scalars())

    def find_by_names(self, names: Collection[str]) -> list[Character]:
        if not names:
            return []
        exact = sorted(set(names))
        lowered = sorted({name.lower() for name in names})
        # lower() in SQLite only folds ASCII, so exact matches are queried as well
        stmt = select(Character).where(
            or_(
                character_table.c.name.in_(exact),
                func.lower(character_table.c.name).in_(lowered),
            )
        )
        return list(self.session.execute(stmt).scalars())

    def find_outdated(self, *, synced_before: datetime, limit: int) -> list[Character]:
        synced = character_table.c.last_synced_at
        stmt = (
            select(Character)
            .where(character_table.c.availability == Availability.ACTIVE)
            .where(or_(synced.is_(None), synced < synced_before))
            .order_by(synced.asc().nulls_first(), character_table.c.name)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyGuildMemberRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: GuildMember) -> None:
        self.session.add(entity)

    def add_all(self, members: Sequence[GuildMember]) -> None:
        self.session.add_all(members)

    def list_for_guild(self, guild_id: UUID) -> list[GuildMember]:
        stmt = select(GuildMember).where(guild_member_table.c.guild_id == guild_id)
        return list(self.session.execute(stmt).scalars())

    def find(self, *, guild_id: UUID, character_id: UUID) -> GuildMember | None:
        stmt = (
            select(GuildMember)
            .where(guild_member_table.c.guild_id == guild_id)
            .where(guild_member_table.c.character_id == character_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def update_many(self, rows: Sequence[Mapping[str, object]]) -> None:
        if not rows:
            return
        # ORM bulk UPDATE by primary key: one executemany per distinct key set
        self.session.execute(update(GuildMember), [dict(row) for row in rows])

    def mark_unavailable(self, member_ids: Collection[UUID], *, left_at: datetime) -> int:
        if not member_ids:
            return 0
        stmt = (
            update(GuildMember)
            .where(guild_member_table.c.id.in_(list(member_ids)))
            .where(guild_member_table.c.availability == Availability.ACTIVE)
            .values(availability=Availability.UNAVAILABLE, left_at=left_at)
        )
        return self.session.execute(stmt).rowcount

    def mark_unavailable_for_character(self, character_id: UUID, *, left_at: datetime) -> int:
        stmt = (
            update(GuildMember)
            .where(guild_member_table.c.character_id == character_id)
            .where(guild_member_table.c.availability == Availability.ACTIVE)
            .values(availability=Availability.UNAVAILABLE, left_at=left_at)
        )
        return self.session.execute(stmt).rowcount


class SqlAlchemyGuildRankRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: GuildRank) -> None:
        self.session.add(entity)

    def list_for_guild(self, guild_id: UUID) -> list[GuildRank]:
        stmt = (
            select(GuildRank)
            .where(guild_rank_table.c.guild_id == guild_id)
            .order_by(guild_rank_table.c.rank_id)
        )
        return list(self.session.execute(stmt).scalars())

    def set_member_count(self, guild_id: UUID, rank_id: int, member_count: int) -> None:
        rank = self.session.get(GuildRank, (guild_id, rank_id))
        if rank is None:
            raise LookupError(f"Rank {rank_id} of guild {guild_id} does not exist")
        rank.member_count = member_count


class SqlAlchemyUserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: User) -> None:
        self.session.add(entity)

    def find_owner_of_character(self, *, name: str, realm: str) -> User | None:
        stmt = (
            select(User)
            .join(character_table, character_table.c.user_id == user_table.c.id)
            .where(func.lower(character_table.c.name) == name.lower())
            .where(func.lower(character_table.c.realm) == realm.lower())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()
