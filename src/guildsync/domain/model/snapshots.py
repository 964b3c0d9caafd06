"""Remote snapshots handed from the game-data client to the sync engine.

These are read-only views of a single remote response. They are never persisted as
such; the engine copies the fields it needs onto the entities and keeps the raw
payloads as JSON snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class RosterEntry:
    name: str
    realm_slug: str
    rank: int
    character_class: str | None = None
    level: int | None = None
    bnet_character_id: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class GuildRoster:
    entries: tuple[RosterEntry, ...]
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class GuildProfile:
    bnet_guild_id: int
    name: str
    realm_slug: str
    member_count: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class GuildReference:
    """The guild a character profile reports membership in."""

    bnet_guild_id: int
    name: str
    realm_slug: str
    realm_name: str | None = None


@dataclass(frozen=True, slots=True)
class CharacterProfile:
    bnet_character_id: int
    name: str
    realm_slug: str
    level: int | None = None
    character_class: str | None = None
    guild: GuildReference | None = None
    profile: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    equipment: dict[str, Any] | None = field(default=None, compare=False, repr=False)
    mythic_profile: dict[str, Any] | None = field(default=None, compare=False, repr=False)
    professions: list[Any] | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class CollectionsIndex:
    toys_href: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
