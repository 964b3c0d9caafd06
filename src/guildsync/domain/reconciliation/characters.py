"""Per-character sync: profile refresh, region resolution and identity hash."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final

from guildsync.domain.errors import RemoteNotFoundError, TransientRemoteError
from guildsync.domain.model import Availability, Guild

from .identity import slugify

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from guildsync.domain.model import Character, CharacterProfile, GuildReference, Region
    from guildsync.domain.ports import (
        GameDataClient,
        GuildSyncQueue,
        SyncRepositories,
        SyncUnitOfWorkFactory,
    )

log = getLogger(__name__)

# Stored for characters whose collection holds no toys (or cannot be found).
NO_TOYS_HASH: Final[str] = "a3741d687719e1c015f4f115371c77064771f699817f81f09016350165a19111"


class CharacterSyncOutcome(StrEnum):
    SYNCED = "synced"
    SKIPPED = "skipped"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class _ResolvedGuild:
    guild_id: UUID | None
    region: Region
    queued: bool = False


def toy_collection_hash(payload: Mapping[str, object]) -> str:
    """Hash a toy collection document into a stable identity signal."""
    toys = payload.get("toys")
    toy_ids: list[int] = []
    if isinstance(toys, list):
        for item in toys:
            toy = item.get("toy") if isinstance(item, dict) else None
            toy_id = toy.get("id") if isinstance(toy, dict) else None
            if isinstance(toy_id, int) and not isinstance(toy_id, bool):
                toy_ids.append(toy_id)
    if not toy_ids:
        return NO_TOYS_HASH
    joined = ",".join(str(toy_id) for toy_id in sorted(toy_ids))
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


class CharacterSyncer:
    def __init__(
        self,
        *,
        client: GameDataClient,
        unit_of_work_factory: SyncUnitOfWorkFactory,
        guild_queue: GuildSyncQueue,
    ) -> None:
        self._client = client
        self._uow_factory = unit_of_work_factory
        self._guild_queue = guild_queue

    def sync_character(self, character: Character) -> CharacterSyncOutcome:
        if not character.is_available:
            log.debug("Skipping unavailable character %s", character.id)
            return CharacterSyncOutcome.SKIPPED

        log.info("Syncing character %s-%s (%s)", character.name, character.realm, character.region)
        try:
            profile = self._client.get_enhanced_character_data(
                slugify(character.realm), character.name, character.region
            )
            if profile is None:
                self._mark_unavailable(character.id)
                return CharacterSyncOutcome.UNAVAILABLE

            resolved = self._resolve_guild(character, profile)
            if resolved.queued and resolved.guild_id is not None:
                self._guild_queue.enqueue(resolved.guild_id)

            identity_hash = None
            if character.user_id is None:
                identity_hash = self._identity_hash(profile, resolved.region)

            self._persist(character.id, profile, resolved, identity_hash)
        except Exception:
            log.exception("Sync failed for character %s", character.id)
            self._record_failure(character.id)
            return CharacterSyncOutcome.FAILED

        return CharacterSyncOutcome.SYNCED

    def _mark_unavailable(self, character_id: UUID) -> None:
        now = datetime.now(UTC)
        with self._uow_factory() as uow:
            repositories = uow.repositories
            row = _load(repositories, character_id)
            row.availability = Availability.UNAVAILABLE
            row.last_synced_at = now
            row.updated_at = now
            count = repositories.members.mark_unavailable_for_character(character_id, left_at=now)
            uow.commit()
        log.warning(
            "Character %s not found remotely; marked unavailable with %d membership(s)",
            character_id,
            count,
        )

    def _resolve_guild(self, character: Character, profile: CharacterProfile) -> _ResolvedGuild:
        reference = profile.guild
        if reference is None:
            return _ResolvedGuild(guild_id=None, region=character.region)

        with self._uow_factory() as uow:
            guilds = uow.repositories.guilds
            guild = guilds.get_by_bnet_id(reference.bnet_guild_id)
            if guild is not None:
                return _ResolvedGuild(guild_id=guild.id, region=guild.region)

            known = guilds.get_by_name(
                name=reference.name, realm=reference.realm_slug, region=character.region
            )
            if known is not None:
                if known.bnet_guild_id is None:
                    known.bnet_guild_id = reference.bnet_guild_id
                    uow.commit()
                    log.info(
                        "Backfilled Battle.net id %s on guild %s", reference.bnet_guild_id, known.id
                    )
                return _ResolvedGuild(guild_id=known.id, region=character.region)

            stub = _stub_guild(reference, character.region)
            guilds.add(stub)
            uow.commit()
        log.info(
            "Created stub guild %s (%s-%s) discovered through character %s",
            stub.id,
            reference.name,
            reference.realm_slug,
            character.id,
        )
        return _ResolvedGuild(guild_id=stub.id, region=character.region, queued=True)

    def _identity_hash(self, profile: CharacterProfile, region: Region) -> str | None:
        realm_slug = slugify(profile.realm_slug)
        name = profile.name.lower()
        try:
            index = self._client.get_character_collections_index(realm_slug, name, region)
            if not index.toys_href:
                return NO_TOYS_HASH
            return toy_collection_hash(self._client.get_generic_data(index.toys_href))
        except RemoteNotFoundError:
            log.info("Collections for %s-%s not found; using empty toy hash", name, realm_slug)
            return NO_TOYS_HASH
        except TransientRemoteError as exc:
            log.warning("Could not fetch toys for %s-%s, keeping hash: %s", name, realm_slug, exc)
            return None
        except Exception:
            log.exception("Unreadable toy collection for %s-%s, keeping hash", name, realm_slug)
            return None

    def _persist(
        self,
        character_id: UUID,
        profile: CharacterProfile,
        resolved: _ResolvedGuild,
        identity_hash: str | None,
    ) -> None:
        now = datetime.now(UTC)
        with self._uow_factory() as uow:
            repositories = uow.repositories
            row = _load(repositories, character_id)
            row.bnet_character_id = profile.bnet_character_id
            row.name = profile.name
            row.realm = profile.realm_slug
            row.region = resolved.region
            row.level = profile.level
            row.character_class = profile.character_class or row.character_class
            row.profile_data = profile.profile
            row.equipment_data = profile.equipment
            row.mythic_profile_data = profile.mythic_profile
            row.professions_data = profile.professions
            row.availability = Availability.ACTIVE
            row.consecutive_update_failures = 0
            row.last_synced_at = now
            row.updated_at = now
            if identity_hash is not None:
                row.identity_hash = identity_hash

            if resolved.guild_id is not None:
                membership = repositories.members.find(
                    guild_id=resolved.guild_id, character_id=character_id
                )
                if membership is not None:
                    membership.character_name = row.name
                    membership.character_realm = row.realm
                    membership.character_class = row.character_class
                    membership.availability = Availability.ACTIVE
                    membership.left_at = None
            uow.commit()

    def _record_failure(self, character_id: UUID) -> None:
        now = datetime.now(UTC)
        with self._uow_factory() as uow:
            row = _load(uow.repositories, character_id)
            row.consecutive_update_failures += 1
            row.last_synced_at = now
            uow.commit()


def _load(repositories: SyncRepositories, character_id: UUID) -> Character:
    row = repositories.characters.get(character_id)
    if row is None:
        raise LookupError(f"Character {character_id} vanished during sync")
    return row


def _stub_guild(reference: GuildReference, region: Region) -> Guild:
    return Guild(
        name=reference.name,
        realm=reference.realm_slug,
        region=region,
        bnet_guild_id=reference.bnet_guild_id,
        created_at=datetime.now(UTC),
    )
