"""Outbound queue for guild stubs discovered while syncing characters."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID


@runtime_checkable
class GuildSyncQueue(Protocol):
    def enqueue(self, guild_id: UUID) -> None: ...

    def drain(self) -> list[UUID]:
        """Return every queued guild id once, in enqueue order, and empty the queue."""
        ...


class InMemoryGuildSyncQueue:
    """Process-local queue; the never-synced stub row is the durable copy."""

    def __init__(self) -> None:
        self._pending: deque[UUID] = deque()

    def enqueue(self, guild_id: UUID) -> None:
        if guild_id not in self._pending:
            self._pending.append(guild_id)

    def drain(self) -> list[UUID]:
        drained = list(self._pending)
        self._pending.clear()
        return drained

    def __len__(self) -> int:
        return len(self._pending)
