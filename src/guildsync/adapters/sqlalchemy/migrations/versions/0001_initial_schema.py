"""Initial schema for guilds, characters, memberships, ranks and users.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("battle_net_id", sa.String(), nullable=False),
        sa.Column("battletag", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user")),
        sa.UniqueConstraint("battle_net_id", name=op.f("uq_user_battle_net_id")),
    )

    op.create_table(
        "guild",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("bnet_guild_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("realm", sa.String(), nullable=False),
        sa.Column("region", sa.String(length=2), nullable=False),
        sa.Column("guild_data", sa.JSON(), nullable=True),
        sa.Column("roster_data", sa.JSON(), nullable=True),
        sa.Column("leader_id", sa.Uuid(), nullable=True),
        sa.Column("member_count", sa.Integer(), nullable=True),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_roster_synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("excluded_from_sync", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["leader_id"],
            ["user.id"],
            name=op.f("fk_guild_leader_id_user"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_guild")),
    )
    op.create_index("ix_guild_bnet_guild_id", "guild", ["bnet_guild_id"])
    op.create_index("ix_guild_name_realm_region", "guild", ["name", "realm", "region"])
    op.create_index("ix_guild_last_synced_at", "guild", ["last_synced_at"])

    op.create_table(
        "character",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("bnet_character_id", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("realm", sa.String(), nullable=False),
        sa.Column("region", sa.String(length=2), nullable=False),
        sa.Column("level", sa.Integer(), nullable=True),
        sa.Column("character_class", sa.String(), nullable=True),
        sa.Column("role", sa.String(length=7), nullable=False),
        sa.Column("availability", sa.String(length=11), nullable=False),
        sa.Column("consecutive_update_failures", sa.Integer(), nullable=False),
        sa.Column("profile_data", sa.JSON(), nullable=True),
        sa.Column("equipment_data", sa.JSON(), nullable=True),
        sa.Column("mythic_profile_data", sa.JSON(), nullable=True),
        sa.Column("professions_data", sa.JSON(), nullable=True),
        sa.Column("identity_hash", sa.String(length=64), nullable=True),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["user.id"],
            name=op.f("fk_character_user_id_user"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_character")),
    )
    op.create_index("ix_character_name_realm", "character", ["name", "realm"])
    op.create_index("ix_character_user_id", "character", ["user_id"])
    op.create_index("ix_character_last_synced_at", "character", ["last_synced_at"])

    op.create_table(
        "guild_member",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("guild_id", sa.Uuid(), nullable=False),
        sa.Column("character_id", sa.Uuid(), nullable=True),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column("character_name", sa.String(), nullable=True),
        sa.Column("character_class", sa.String(), nullable=True),
        sa.Column("character_realm", sa.String(), nullable=True),
        sa.Column("availability", sa.String(length=11), nullable=False),
        sa.Column("member_data", sa.JSON(), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("left_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["guild_id"],
            ["guild.id"],
            name=op.f("fk_guild_member_guild_id_guild"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["character_id"],
            ["character.id"],
            name=op.f("fk_guild_member_character_id_character"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_guild_member")),
        sa.UniqueConstraint(
            "guild_id",
            "character_id",
            name=op.f("uq_guild_member_guild_id_character_id"),
        ),
    )
    op.create_index("ix_guild_member_guild_id", "guild_member", ["guild_id"])
    op.create_index("ix_guild_member_character_id", "guild_member", ["character_id"])

    op.create_table(
        "guild_rank",
        sa.Column("guild_id", sa.Uuid(), nullable=False),
        sa.Column("rank_id", sa.Integer(), nullable=False),
        sa.Column("rank_name", sa.String(), nullable=False),
        sa.Column("member_count", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["guild_id"],
            ["guild.id"],
            name=op.f("fk_guild_rank_guild_id_guild"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("guild_id", "rank_id", name=op.f("pk_guild_rank")),
    )


def downgrade() -> None:
    op.drop_table("guild_rank")
    op.drop_index("ix_guild_member_character_id", table_name="guild_member")
    op.drop_index("ix_guild_member_guild_id", table_name="guild_member")
    op.drop_table("guild_member")
    op.drop_index("ix_character_last_synced_at", table_name="character")
    op.drop_index("ix_character_user_id", table_name="character")
    op.drop_index("ix_character_name_realm", table_name="character")
    op.drop_table("character")
    op.drop_index("ix_guild_last_synced_at", table_name="guild")
    op.drop_index("ix_guild_name_realm_region", table_name="guild")
    op.drop_index("ix_guild_bnet_guild_id", table_name="guild")
    op.drop_table("guild")
    op.drop_table("user")
