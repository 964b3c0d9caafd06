"""Character entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from guildsync.domain.model.base import Entity
from guildsync.domain.model.enums import Availability, CharacterRole, Region

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Character(Entity):
    name: str
    realm: str
    region: Region
    bnet_character_id: int | None = None
    user_id: UUID | None = None

    level: int | None = None
    character_class: str | None = None
    role: CharacterRole = CharacterRole.DPS

    availability: Availability = Availability.ACTIVE
    consecutive_update_failures: int = 0

    profile_data: dict[str, Any] | None = field(default=None, repr=False)
    equipment_data: dict[str, Any] | None = field(default=None, repr=False)
    mythic_profile_data: dict[str, Any] | None = field(default=None, repr=False)
    professions_data: list[Any] | None = field(default=None, repr=False)

    # Content hash over the character's toy collection, used to link unowned alts.
    identity_hash: str | None = None

    last_synced_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.availability is Availability.ACTIVE
