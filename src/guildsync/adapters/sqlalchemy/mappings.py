"""SQLAlchemy mapping metadata for the guildsync domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from guildsync.domain.model import (
    Availability,
    Character,
    CharacterRole,
    Guild,
    GuildMember,
    GuildRank,
    Region,
    User,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum(enum_cls: type[Availability] | type[Region] | type[CharacterRole]) -> Enum:
    # store values ("us", "active") rather than member names
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

user_table = Table(
    "user",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("battle_net_id", String, nullable=False, unique=True),
    Column("battletag", String, nullable=False),
)

guild_table = Table(
    "guild",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("bnet_guild_id", Integer, nullable=True),
    Column("name", String, nullable=False),
    Column("realm", String, nullable=False),
    Column("region", _enum(Region), nullable=False),
    Column("guild_data", JSON, nullable=True),
    Column("roster_data", JSON, nullable=True),
    Column(
        "leader_id",
        UUIDColumnType,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("member_count", Integer, nullable=True),
    Column("last_synced_at", UTCDateTime(), nullable=True),
    Column("last_roster_synced_at", UTCDateTime(), nullable=True),
    Column("excluded_from_sync", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=True),
    Index("ix_guild_bnet_guild_id", "bnet_guild_id"),
    Index("ix_guild_name_realm_region", "name", "realm", "region"),
    Index("ix_guild_last_synced_at", "last_synced_at"),
)

character_table = Table(
    "character",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("bnet_character_id", Integer, nullable=True),
    Column(
        "user_id",
        UUIDColumnType,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("name", String, nullable=False),
    Column("realm", String, nullable=False),
    Column("region", _enum(Region), nullable=False),
    Column("level", Integer, nullable=True),
    Column("character_class", String, nullable=True),
    Column("role", _enum(CharacterRole), nullable=False, default=CharacterRole.DPS),
    Column("availability", _enum(Availability), nullable=False, default=Availability.ACTIVE),
    Column("consecutive_update_failures", Integer, nullable=False, default=0),
    Column("profile_data", JSON, nullable=True),
    Column("equipment_data", JSON, nullable=True),
    Column("mythic_profile_data", JSON, nullable=True),
    Column("professions_data", JSON, nullable=True),
    Column("identity_hash", String(64), nullable=True),
    Column("last_synced_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Index("ix_character_name_realm", "name", "realm"),
    Index("ix_character_user_id", "user_id"),
    Index("ix_character_last_synced_at", "last_synced_at"),
)

guild_member_table = Table(
    "guild_member",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "guild_id",
        UUIDColumnType,
        ForeignKey("guild.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "character_id",
        UUIDColumnType,
        ForeignKey("character.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("rank", Integer, nullable=False),
    Column("character_name", String, nullable=True),
    Column("character_class", String, nullable=True),
    Column("character_realm", String, nullable=True),
    Column("availability", _enum(Availability), nullable=False, default=Availability.ACTIVE),
    Column("member_data", JSON, nullable=True),
    Column("joined_at", UTCDateTime(), nullable=True),
    Column("left_at", UTCDateTime(), nullable=True),
    UniqueConstraint("guild_id", "character_id"),
    Index("ix_guild_member_guild_id", "guild_id"),
    Index("ix_guild_member_character_id", "character_id"),
)

guild_rank_table = Table(
    "guild_rank",
    mapper_registry.metadata,
    Column(
        "guild_id",
        UUIDColumnType,
        ForeignKey("guild.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("rank_id", Integer, primary_key=True),
    Column("rank_name", String, nullable=False),
    Column("member_count", Integer, nullable=False, default=0),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(User, user_table)
    mapper_registry.map_imperatively(Guild, guild_table)
    mapper_registry.map_imperatively(Character, character_table)
    mapper_registry.map_imperatively(GuildMember, guild_member_table)
    mapper_registry.map_imperatively(GuildRank, guild_rank_table)

    configure_mappers()
    return mapper_registry

