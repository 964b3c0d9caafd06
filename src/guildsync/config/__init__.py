"""Application configuration helpers."""

from __future__ import annotations

from .battlenet import BattleNetConfig, get_battlenet_config
from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "BattleNetConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_battlenet_config",
    "get_database_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_vars",
]
