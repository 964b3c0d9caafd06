"""Translate Battle.net payloads into domain snapshots."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from guildsync.domain.model import (
    CharacterProfile,
    CollectionsIndex,
    GuildProfile,
    GuildReference,
    GuildRoster,
    RosterEntry,
)

from .schema import (
    CharacterProfileResponse,
    CollectionsIndexResponse,
    GuildResponse,
    GuildRosterResponse,
    ProfessionsResponse,
    RosterMember,
)

if TYPE_CHECKING:
    from .schema import LocalizedName

log = getLogger(__name__)

DEFAULT_LOCALE = "en_US"


def localized(value: LocalizedName | None, locale: str = DEFAULT_LOCALE) -> str | None:
    """Pick a display string from a plain or per-locale name."""
    if value is None or isinstance(value, str):
        return value
    return value.get(locale) or next(iter(value.values()), None)


def translate_guild(payload: dict[str, Any]) -> GuildProfile:
    model = GuildResponse.model_validate(payload)
    return GuildProfile(
        bnet_guild_id=model.id,
        name=model.name,
        realm_slug=model.realm.slug,
        member_count=model.member_count,
        raw=payload,
    )


def _roster_entry(member: RosterMember, raw: dict[str, Any]) -> RosterEntry:
    character = member.character
    if not character.name or character.realm is None:
        log.warning("Roster member without name or realm (rank %s)", member.rank)
    return RosterEntry(
        name=character.name or "",
        realm_slug=character.realm.slug if character.realm else "",
        rank=member.rank,
        character_class=(
            localized(character.playable_class.name) if character.playable_class else None
        ),
        level=character.level,
        bnet_character_id=character.id,
        raw=raw,
    )


def translate_roster(payload: dict[str, Any]) -> GuildRoster:
    model = GuildRosterResponse.model_validate(payload)
    raw_members: list[dict[str, Any]] = payload.get("members") or []
    entries = tuple(
        _roster_entry(member, raw)
        for member, raw in zip(model.members, raw_members, strict=True)
    )
    return GuildRoster(entries=entries, raw=payload)


def translate_character(
    profile: dict[str, Any],
    equipment: dict[str, Any] | None,
    mythic_profile: dict[str, Any] | None,
    professions: dict[str, Any] | None,
) -> CharacterProfile:
    model = CharacterProfileResponse.model_validate(profile)
    guild = None
    if model.guild is not None:
        guild = GuildReference(
            bnet_guild_id=model.guild.id,
            name=model.guild.name,
            realm_slug=model.guild.realm.slug,
            realm_name=localized(model.guild.realm.name),
        )
    primaries = (
        ProfessionsResponse.model_validate(professions).primaries if professions else []
    )
    return CharacterProfile(
        bnet_character_id=model.id,
        name=model.name,
        realm_slug=model.realm.slug,
        level=model.level,
        character_class=localized(model.character_class.name) if model.character_class else None,
        guild=guild,
        profile=profile,
        equipment=equipment,
        mythic_profile=mythic_profile,
        professions=list(primaries),
    )


def translate_collections_index(payload: dict[str, Any]) -> CollectionsIndex:
    model = CollectionsIndexResponse.model_validate(payload)
    return CollectionsIndex(toys_href=model.toys.href if model.toys else None, raw=payload)
