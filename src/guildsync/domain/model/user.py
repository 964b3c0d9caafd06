"""Account owning characters."""

from __future__ import annotations

from dataclasses import dataclass

from guildsync.domain.model.base import Entity


@dataclass(eq=False, kw_only=True)
class User(Entity):
    battle_net_id: str
    battletag: str
