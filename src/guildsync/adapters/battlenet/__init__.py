"""Battle.net game-data adapter."""

from __future__ import annotations

from .client import BattleNetAPIError, BattleNetClient, BattleNetNotFoundError

__all__ = ["BattleNetAPIError", "BattleNetClient", "BattleNetNotFoundError"]
