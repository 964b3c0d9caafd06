"""Reconciliation of remote guild and character state with the local store."""

from __future__ import annotations

from .characters import NO_TOYS_HASH, CharacterSyncer, CharacterSyncOutcome, toy_collection_hash
from .guilds import GuildSyncer, GuildSyncOutcome
from .identity import identity_key, slugify
from .members import (
    ExistingMember,
    MemberComparison,
    MemberSyncResult,
    compare_guild_members,
    sync_guild_members,
)
from .orchestrator import SyncCycleResult, SyncOrchestrator, SyncState
from .ranks import RankSyncResult, sync_guild_ranks

__all__ = [
    "NO_TOYS_HASH",
    "CharacterSyncOutcome",
    "CharacterSyncer",
    "ExistingMember",
    "GuildSyncOutcome",
    "GuildSyncer",
    "MemberComparison",
    "MemberSyncResult",
    "RankSyncResult",
    "SyncCycleResult",
    "SyncOrchestrator",
    "SyncState",
    "compare_guild_members",
    "identity_key",
    "slugify",
    "sync_guild_members",
    "sync_guild_ranks",
    "toy_collection_hash",
]
