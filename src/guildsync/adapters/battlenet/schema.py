"""Battle.net game-data/profile API response schemas.

Only the fields the sync engine reads are modelled; everything else is kept as
extra data so the raw payload can still be stored as a snapshot.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

type LocalizedName = str | dict[str, str]


class BattleNetModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class TokenResponse(BattleNetModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class KeyReference(BattleNetModel):
    href: str


class RealmReference(BattleNetModel):
    id: int | None = None
    slug: str
    name: LocalizedName | None = None


class PlayableClassReference(BattleNetModel):
    id: int
    name: LocalizedName | None = None


class RosterCharacter(BattleNetModel):
    id: int | None = None
    name: str | None = None
    realm: RealmReference | None = None
    level: int | None = None
    playable_class: PlayableClassReference | None = None


class RosterMember(BattleNetModel):
    character: RosterCharacter
    rank: int


class GuildRosterResponse(BattleNetModel):
    members: list[RosterMember] = []


class GuildResponse(BattleNetModel):
    id: int
    name: str
    realm: RealmReference
    member_count: int | None = None


class CharacterGuildReference(BattleNetModel):
    id: int
    name: str
    realm: RealmReference


class CharacterProfileResponse(BattleNetModel):
    id: int
    name: str
    realm: RealmReference
    level: int | None = None
    character_class: PlayableClassReference | None = None
    guild: CharacterGuildReference | None = None


class ProfessionsResponse(BattleNetModel):
    primaries: list[dict[str, object]] = []
    secondaries: list[dict[str, object]] = []


class CollectionsIndexResponse(BattleNetModel):
    toys: KeyReference | None = None
