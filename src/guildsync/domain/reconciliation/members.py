"""Diff a remote guild roster against local memberships and apply the result.

``compare_guild_members`` is pure: it walks the roster once and sorts every entry
into one of four buckets keyed by ``identity_key``. ``sync_guild_members`` loads
the local state, runs the comparison and applies it inside a single unit of work
in a fixed order (characters, new memberships, updates, deactivations).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from guildsync.domain.errors import MemberSyncError
from guildsync.domain.model import Availability, Character, CharacterRole, GuildMember

from .identity import identity_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from guildsync.domain.model import GuildRoster, Region, RosterEntry
    from guildsync.domain.ports import SyncRepositories, SyncUnitOfWorkFactory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExistingMember:
    member_id: UUID
    character_id: UUID | None
    rank: int


@dataclass(frozen=True, slots=True)
class MemberAddition:
    """Membership-only creation for a character that already exists locally."""

    entry: RosterEntry
    character_id: UUID


@dataclass(frozen=True, slots=True)
class MemberUpdate:
    member_id: UUID
    entry: RosterEntry
    rank: int
    character_id: UUID | None
    rank_changed: bool = False
    link_backfilled: bool = False


@dataclass(frozen=True, slots=True)
class CharacterDraft:
    """A roster entry with neither a membership nor a local character."""

    key: str
    entry: RosterEntry
    region: Region
    role: CharacterRole = CharacterRole.DPS

    def build(self) -> Character:
        return Character(
            name=self.entry.name,
            realm=self.entry.realm_slug,
            region=self.region,
            character_class=self.entry.character_class,
            level=self.entry.level,
            role=self.role,
        )


@dataclass(slots=True)
class MemberComparison:
    members_to_add: list[MemberAddition] = field(default_factory=list)
    members_to_update: list[MemberUpdate] = field(default_factory=list)
    member_ids_to_deactivate: list[UUID] = field(default_factory=list)
    characters_to_create: list[CharacterDraft] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MemberSyncResult:
    created_characters: int
    added_members: int
    updated_members: int
    deactivated_members: int


def compare_guild_members(
    roster_members: Mapping[str, RosterEntry],
    existing_members: Mapping[str, ExistingMember],
    existing_characters: Mapping[str, UUID],
    region: Region,
) -> MemberComparison:
    comparison = MemberComparison()
    unvisited = dict(existing_members)
    key_by_character = {
        member.character_id: key
        for key, member in existing_members.items()
        if member.character_id is not None
    }

    for key, entry in roster_members.items():
        character_id = existing_characters.get(key)
        existing_key = key
        if key not in existing_members and character_id is not None:
            # linked membership cached under the character's previous name or realm
            existing_key = key_by_character.get(character_id, key)
        existing = unvisited.pop(existing_key, None)

        if existing is not None:
            backfill = existing.character_id is None and character_id is not None
            comparison.members_to_update.append(
                MemberUpdate(
                    member_id=existing.member_id,
                    entry=entry,
                    rank=entry.rank,
                    character_id=character_id if backfill else existing.character_id,
                    rank_changed=existing.rank != entry.rank,
                    link_backfilled=backfill,
                )
            )
        elif character_id is not None:
            comparison.members_to_add.append(MemberAddition(entry=entry, character_id=character_id))
        else:
            comparison.characters_to_create.append(
                CharacterDraft(key=key, entry=entry, region=region)
            )

    comparison.member_ids_to_deactivate.extend(member.member_id for member in unvisited.values())
    return comparison


def roster_by_key(roster: GuildRoster) -> dict[str, RosterEntry]:
    """Key roster entries, dropping the ones that cannot be identified."""
    entries: dict[str, RosterEntry] = {}
    for entry in roster.entries:
        if not entry.name or not entry.realm_slug:
            log.warning("Skipping roster entry without name or realm: %r", entry)
            continue
        entries[identity_key(entry.name, entry.realm_slug)] = entry
    return entries


def _existing_by_key(
    members: Iterable[GuildMember], characters: Mapping[UUID, Character]
) -> tuple[dict[str, ExistingMember], list[UUID]]:
    """Key memberships by their linked character, falling back to the cached name.

    Returns the keyed memberships and the ids of rows sharing a key with an earlier one.
    """
    existing: dict[str, ExistingMember] = {}
    duplicates: list[UUID] = []
    for member in members:
        linked = None
        if member.character_id is not None:
            linked = characters.get(member.character_id)
        if linked is not None:
            name, realm = linked.name, linked.realm
        else:
            name, realm = member.character_name, member.character_realm
        if not name or not realm:
            log.warning("Skipping membership %s without cached name or realm", member.id)
            continue
        key = identity_key(name, realm)
        if key in existing:
            log.warning("Membership %s duplicates %s; deactivating it", member.id, key)
            duplicates.append(member.id)
            continue
        existing[key] = ExistingMember(
            member_id=member.id,
            character_id=member.character_id,
            rank=member.rank,
        )
    return existing, duplicates


def _characters_by_key(
    repositories: SyncRepositories, roster_members: Mapping[str, RosterEntry]
) -> dict[str, UUID]:
    if not roster_members:
        return {}
    names = {entry.name for entry in roster_members.values()}
    found: dict[str, UUID] = {}
    for character in repositories.characters.find_by_names(names):
        key = identity_key(character.name, character.realm)
        if key in roster_members:
            found.setdefault(key, character.id)
    return found


def _new_member(
    guild_id: UUID, entry: RosterEntry, character_id: UUID, now: datetime
) -> GuildMember:
    return GuildMember(
        guild_id=guild_id,
        character_id=character_id,
        rank=entry.rank,
        character_name=entry.name,
        character_class=entry.character_class,
        character_realm=entry.realm_slug,
        availability=Availability.ACTIVE,
        member_data=entry.raw,
        joined_at=now,
    )


def _update_row(update: MemberUpdate) -> dict[str, object]:
    return {
        "id": update.member_id,
        "rank": update.rank,
        "character_id": update.character_id,
        "character_name": update.entry.name,
        "character_class": update.entry.character_class,
        "character_realm": update.entry.realm_slug,
        "member_data": update.entry.raw,
        "availability": Availability.ACTIVE,
        "left_at": None,
    }


def sync_guild_members(
    guild_id: UUID,
    roster: GuildRoster,
    region: Region,
    *,
    unit_of_work_factory: SyncUnitOfWorkFactory,
) -> MemberSyncResult:
    """Reconcile the guild's memberships with ``roster`` in one transaction.

    Raises ``MemberSyncError`` when anything fails; nothing is written in that case.
    """
    log.info("Syncing members of guild %s (%d roster entries)", guild_id, len(roster))
    try:
        with unit_of_work_factory() as uow:
            repositories = uow.repositories
            roster_members = roster_by_key(roster)
            members = repositories.members.list_for_guild(guild_id)
            linked = repositories.characters.get_many(
                {member.character_id for member in members if member.character_id is not None}
            )
            existing_members, duplicate_ids = _existing_by_key(
                members, {character.id: character for character in linked}
            )
            existing_characters = _characters_by_key(repositories, roster_members)

            comparison = compare_guild_members(
                roster_members, existing_members, existing_characters, region
            )
            comparison.member_ids_to_deactivate.extend(duplicate_ids)
            log.info(
                "Guild %s member diff: add=%d create+add=%d update=%d deactivate=%d",
                guild_id,
                len(comparison.members_to_add),
                len(comparison.characters_to_create),
                len(comparison.members_to_update),
                len(comparison.member_ids_to_deactivate),
            )

            now = datetime.now(UTC)

            created: list[tuple[RosterEntry, Character]] = [
                (draft.entry, draft.build()) for draft in comparison.characters_to_create
            ]
            if created:
                repositories.characters.add_all([character for _, character in created])
                uow.flush()

            new_members = [
                _new_member(guild_id, addition.entry, addition.character_id, now)
                for addition in comparison.members_to_add
            ]
            new_members.extend(
                _new_member(guild_id, entry, character.id, now) for entry, character in created
            )
            if new_members:
                repositories.members.add_all(new_members)
                uow.flush()

            if comparison.members_to_update:
                repositories.members.update_many(
                    [_update_row(update) for update in comparison.members_to_update]
                )

            deactivated = 0
            if comparison.member_ids_to_deactivate:
                deactivated = repositories.members.mark_unavailable(
                    comparison.member_ids_to_deactivate, left_at=now
                )

            uow.commit()
    except Exception as exc:
        log.exception("Member transaction for guild %s rolled back", guild_id)
        raise MemberSyncError(guild_id, exc) from exc

    return MemberSyncResult(
        created_characters=len(created),
        added_members=len(new_members),
        updated_members=len(comparison.members_to_update),
        deactivated_members=deactivated,
    )
