"""Ports for reading remote game data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from guildsync.domain.model import (
        CharacterProfile,
        CollectionsIndex,
        GuildProfile,
        GuildRoster,
        Region,
    )


@runtime_checkable
class GameDataClient(Protocol):
    """Remote game-data API.

    Methods raise ``RemoteNotFoundError`` when the remote confirms absence and
    ``TransientRemoteError`` for any other failure, except
    ``get_enhanced_character_data`` which reports absence as ``None``.
    """

    def get_guild_data(self, realm_slug: str, name_slug: str, region: Region) -> GuildProfile: ...

    def get_guild_roster(self, region: Region, realm_slug: str, name_slug: str) -> GuildRoster: ...

    def get_enhanced_character_data(
        self, realm_slug: str, name: str, region: Region
    ) -> CharacterProfile | None: ...

    def get_character_collections_index(
        self, realm_slug: str, name: str, region: Region
    ) -> CollectionsIndex: ...

    def get_generic_data(self, href: str) -> Mapping[str, object]: ...
