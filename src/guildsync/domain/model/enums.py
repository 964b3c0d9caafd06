"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Region(StrEnum):
    US = "us"
    EU = "eu"
    KR = "kr"
    TW = "tw"


class Availability(StrEnum):
    """Soft-delete tag. ``UNAVAILABLE`` is terminal for characters and memberships."""

    ACTIVE = "active"
    UNAVAILABLE = "unavailable"


class CharacterRole(StrEnum):
    TANK = "Tank"
    HEALER = "Healer"
    DPS = "DPS"
    SUPPORT = "Support"
