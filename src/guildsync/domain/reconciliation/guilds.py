"""Per-guild sync: remote profile and roster, then members and ranks."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from guildsync.domain.errors import MemberSyncError, RemoteNotFoundError, TransientRemoteError

from .identity import slugify
from .members import sync_guild_members
from .ranks import sync_guild_ranks

if TYPE_CHECKING:
    from uuid import UUID

    from guildsync.domain.model import Guild, GuildProfile, GuildRoster
    from guildsync.domain.ports import GameDataClient, SyncUnitOfWorkFactory

log = getLogger(__name__)


class GuildSyncOutcome(StrEnum):
    SYNCED = "synced"
    EXCLUDED = "excluded"
    MEMBERS_FAILED = "members_failed"
    SKIPPED = "skipped"
    FAILED = "failed"


class GuildSyncer:
    def __init__(
        self,
        *,
        client: GameDataClient,
        unit_of_work_factory: SyncUnitOfWorkFactory,
    ) -> None:
        self._client = client
        self._uow_factory = unit_of_work_factory

    def sync_guild(self, guild: Guild) -> GuildSyncOutcome:
        """Sync one guild, handling its failures at guild granularity.

        A remote not-found excludes the guild for good. Transient remote failures
        leave the guild untouched so the next cycle picks it up again.
        """
        log.info("Syncing guild %s (%s-%s, %s)", guild.id, guild.name, guild.realm, guild.region)
        realm_slug = slugify(guild.realm)
        name_slug = slugify(guild.name)
        try:
            try:
                profile = self._client.get_guild_data(realm_slug, name_slug, guild.region)
                roster = self._client.get_guild_roster(guild.region, realm_slug, name_slug)
            except RemoteNotFoundError:
                log.warning("Guild %s not found remotely; excluding it from sync", guild.id)
                self._exclude(guild.id)
                return GuildSyncOutcome.EXCLUDED

            self._update_core(guild.id, profile, roster)

            try:
                sync_guild_members(
                    guild.id, roster, guild.region, unit_of_work_factory=self._uow_factory
                )
            except MemberSyncError:
                log.warning("Member sync failed for guild %s; skipping rank sync", guild.id)
                self._touch(guild.id)
                return GuildSyncOutcome.MEMBERS_FAILED

            sync_guild_ranks(guild.id, roster, unit_of_work_factory=self._uow_factory)
        except TransientRemoteError as exc:
            log.warning("Remote error for guild %s, retrying next cycle: %s", guild.id, exc)
            return GuildSyncOutcome.SKIPPED
        except Exception:
            log.exception("Unexpected error while syncing guild %s", guild.id)
            self._touch(guild.id)
            return GuildSyncOutcome.FAILED

        log.info("Finished guild %s", guild.id)
        return GuildSyncOutcome.SYNCED

    def _resolve_leader(self, guild_id: UUID, roster: GuildRoster) -> tuple[bool, UUID | None]:
        """Return ``(resolved, leader_id)``; ``resolved`` is false when the lookup failed."""
        leader = next((entry for entry in roster.entries if entry.rank == 0), None)
        if leader is None:
            log.info("No rank 0 member in roster of guild %s", guild_id)
            return True, None
        try:
            with self._uow_factory() as uow:
                user = uow.repositories.users.find_owner_of_character(
                    name=leader.name, realm=leader.realm_slug
                )
        except Exception:
            log.exception("Leader lookup failed for guild %s; keeping previous leader", guild_id)
            return False, None
        if user is None:
            log.info("No local user owns %s-%s", leader.name, leader.realm_slug)
            return True, None
        return True, user.id

    def _update_core(self, guild_id: UUID, profile: GuildProfile, roster: GuildRoster) -> None:
        leader_resolved, leader_id = self._resolve_leader(guild_id, roster)
        now = datetime.now(UTC)
        with self._uow_factory() as uow:
            row = uow.repositories.guilds.get(guild_id)
            if row is None:
                raise LookupError(f"Guild {guild_id} vanished during sync")
            row.guild_data = profile.raw
            row.roster_data = roster.raw
            row.bnet_guild_id = profile.bnet_guild_id
            row.member_count = len(roster)
            row.last_synced_at = now
            row.last_roster_synced_at = now
            if leader_resolved:
                row.leader_id = leader_id
            uow.commit()

    def _exclude(self, guild_id: UUID) -> None:
        with self._uow_factory() as uow:
            row = uow.repositories.guilds.get(guild_id)
            if row is not None:
                row.excluded_from_sync = True
                row.last_synced_at = datetime.now(UTC)
            uow.commit()

    def _touch(self, guild_id: UUID) -> None:
        with self._uow_factory() as uow:
            row = uow.repositories.guilds.get(guild_id)
            if row is not None:
                row.last_synced_at = datetime.now(UTC)
            uow.commit()
