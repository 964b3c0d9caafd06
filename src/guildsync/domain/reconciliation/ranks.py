"""Rank-count bookkeeping for a guild roster."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from guildsync.domain.model import GuildRank, default_rank_name

if TYPE_CHECKING:
    from uuid import UUID

    from guildsync.domain.model import GuildRoster
    from guildsync.domain.ports import SyncUnitOfWorkFactory

log = getLogger(__name__)


@dataclass(slots=True)
class RankSyncResult:
    created: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    zeroed: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _create_rank(
    guild_id: UUID, rank_id: int, count: int, unit_of_work_factory: SyncUnitOfWorkFactory
) -> None:
    with unit_of_work_factory() as uow:
        uow.repositories.ranks.add(
            GuildRank(
                guild_id=guild_id,
                rank_id=rank_id,
                rank_name=default_rank_name(rank_id),
                member_count=count,
            )
        )
        uow.commit()


def _set_count(
    guild_id: UUID, rank_id: int, count: int, unit_of_work_factory: SyncUnitOfWorkFactory
) -> None:
    with unit_of_work_factory() as uow:
        uow.repositories.ranks.set_member_count(guild_id, rank_id, count)
        uow.commit()


def sync_guild_ranks(
    guild_id: UUID,
    roster: GuildRoster,
    *,
    unit_of_work_factory: SyncUnitOfWorkFactory,
) -> RankSyncResult:
    """Bring per-rank member counts in line with ``roster``.

    Every rank write is its own transaction; one failing rank does not stop the
    others. Ranks missing from the roster keep their row and name with a zero count.
    """
    counts = Counter(entry.rank for entry in roster.entries)
    with unit_of_work_factory() as uow:
        existing = {
            rank.rank_id: rank.member_count
            for rank in uow.repositories.ranks.list_for_guild(guild_id)
        }

    result = RankSyncResult()
    writes: list[tuple[int, int, bool]] = []
    for rank_id, count in sorted(counts.items()):
        if rank_id not in existing:
            writes.append((rank_id, count, True))
        elif existing[rank_id] != count:
            writes.append((rank_id, count, False))
    writes.extend(
        (rank_id, 0, False)
        for rank_id, current in sorted(existing.items())
        if rank_id not in counts and current != 0
    )

    for rank_id, count, create in writes:
        try:
            if create:
                _create_rank(guild_id, rank_id, count, unit_of_work_factory)
                result.created.append(rank_id)
            else:
                _set_count(guild_id, rank_id, count, unit_of_work_factory)
                (result.updated if count else result.zeroed).append(rank_id)
        except Exception:
            log.exception("Failed to write rank %s of guild %s", rank_id, guild_id)
            result.failed.append(rank_id)

    log.info(
        "Rank sync for guild %s: created=%d updated=%d zeroed=%d failed=%d",
        guild_id,
        len(result.created),
        len(result.updated),
        len(result.zeroed),
        len(result.failed),
    )
    return result
