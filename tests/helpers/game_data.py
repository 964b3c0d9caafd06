"""Fake game-data client and snapshot builders for sync tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from guildsync.domain.errors import RemoteNotFoundError
from guildsync.domain.model import (
    CharacterProfile,
    CollectionsIndex,
    GuildProfile,
    GuildReference,
    GuildRoster,
    RosterEntry,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from guildsync.domain.model import Region


def roster_entry(
    name: str,
    rank: int,
    *,
    realm: str = "area-52",
    character_class: str | None = "Mage",
) -> RosterEntry:
    return RosterEntry(
        name=name,
        realm_slug=realm,
        rank=rank,
        character_class=character_class,
        raw={"character": {"name": name, "realm": {"slug": realm}}, "rank": rank},
    )


def make_roster(*entries: RosterEntry) -> GuildRoster:
    return GuildRoster(entries=tuple(entries), raw={"members": [entry.raw for entry in entries]})


def guild_profile(
    bnet_guild_id: int = 1001, name: str = "Raiders", realm: str = "area-52"
) -> GuildProfile:
    return GuildProfile(
        bnet_guild_id=bnet_guild_id,
        name=name,
        realm_slug=realm,
        raw={"id": bnet_guild_id, "name": name, "realm": {"slug": realm}},
    )


def character_profile(
    name: str = "Anna",
    *,
    realm: str = "area-52",
    bnet_character_id: int = 501,
    level: int = 80,
    character_class: str = "Mage",
    guild: GuildReference | None = None,
) -> CharacterProfile:
    return CharacterProfile(
        bnet_character_id=bnet_character_id,
        name=name,
        realm_slug=realm,
        level=level,
        character_class=character_class,
        guild=guild,
        profile={"id": bnet_character_id, "name": name},
        equipment={"equipped_items": []},
    )


@dataclass
class FakeGameDataClient:
    """Dictionary-backed game-data client.

    Values registered as exceptions are raised instead of returned. Guild keys are
    ``(realm_slug, name_slug)``; character keys are ``(realm_slug, lowercased name)``.
    """

    guilds: dict[tuple[str, str], GuildProfile | Exception] = field(default_factory=dict)
    rosters: dict[tuple[str, str], GuildRoster | Exception] = field(default_factory=dict)
    characters: dict[tuple[str, str], CharacterProfile | None | Exception] = field(
        default_factory=dict
    )
    collections: dict[tuple[str, str], CollectionsIndex | Exception] = field(
        default_factory=dict
    )
    documents: dict[str, Mapping[str, object] | Exception] = field(default_factory=dict)
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    def get_guild_data(self, realm_slug: str, name_slug: str, region: Region) -> GuildProfile:
        self.calls.append(("guild", (realm_slug, name_slug, region)))
        return _resolve(self.guilds, (realm_slug, name_slug))

    def get_guild_roster(self, region: Region, realm_slug: str, name_slug: str) -> GuildRoster:
        self.calls.append(("roster", (region, realm_slug, name_slug)))
        return _resolve(self.rosters, (realm_slug, name_slug))

    def get_enhanced_character_data(
        self, realm_slug: str, name: str, region: Region
    ) -> CharacterProfile | None:
        self.calls.append(("character", (realm_slug, name, region)))
        key = (realm_slug, name.lower())
        if key not in self.characters:
            return None
        value = self.characters[key]
        if isinstance(value, Exception):
            raise value
        return value

    def get_character_collections_index(
        self, realm_slug: str, name: str, region: Region
    ) -> CollectionsIndex:
        self.calls.append(("collections", (realm_slug, name, region)))
        return _resolve(self.collections, (realm_slug, name.lower()))

    def get_generic_data(self, href: str) -> Mapping[str, object]:
        self.calls.append(("generic", (href,)))
        return _resolve(self.documents, href)


def _resolve[TKey, TValue](store: Mapping[TKey, TValue | Exception], key: TKey) -> TValue:
    if key not in store:
        raise RemoteNotFoundError(f"No fake data for {key!r}")
    value = store[key]
    if isinstance(value, Exception):
        raise value
    return value
