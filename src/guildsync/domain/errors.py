"""Failure signals raised across the sync engine's ports."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class RemoteNotFoundError(RuntimeError):
    """The remote API confirmed that the requested resource does not exist."""


class TransientRemoteError(RuntimeError):
    """Any other remote failure; the item is retried on the next cycle."""


class MemberSyncError(RuntimeError):
    """The membership transaction for a guild was rolled back."""

    def __init__(self, guild_id: UUID, cause: BaseException) -> None:
        super().__init__(f"Error syncing guild members for guild {guild_id}: {cause}")
        self.guild_id = guild_id
        self.cause = cause
