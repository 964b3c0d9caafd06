from __future__ import annotations

from datetime import timedelta

import pytest

from guildsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_battlenet_config,
    get_sync_config,
    require_env_vars,
)
from guildsync.config.env import optional_float_env
from guildsync.domain.model import Region


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.setenv("MISSING_B", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


@pytest.mark.parametrize("raw", ["abc", "0", "-2"])
def test_optional_float_env_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("GUILDSYNC_TEST_FLOAT", raw)

    with pytest.raises(ConfigurationError):
        optional_float_env("GUILDSYNC_TEST_FLOAT", 1.0)


def test_optional_float_env_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GUILDSYNC_TEST_FLOAT", raising=False)

    assert optional_float_env("GUILDSYNC_TEST_FLOAT", 2.5) == 2.5


def test_sync_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GUILDSYNC_GUILD_STALE_HOURS", "6")
    monkeypatch.setenv("GUILDSYNC_CHARACTER_STALE_HOURS", "12.5")
    monkeypatch.setenv("GUILDSYNC_SYNC_INTERVAL_MINUTES", "15")

    config = get_sync_config()

    assert config.guild_staleness == timedelta(hours=6)
    assert config.character_staleness == timedelta(hours=12.5)
    assert config.interval == timedelta(minutes=15)


def test_sync_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GUILDSYNC_GUILD_STALE_HOURS",
        "GUILDSYNC_CHARACTER_STALE_HOURS",
        "GUILDSYNC_SYNC_INTERVAL_MINUTES",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_sync_config()

    assert config.guild_staleness == timedelta(hours=24)
    assert config.guild_batch_limit == 50


def test_battlenet_config_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BATTLENET_CLIENT_ID", raising=False)
    monkeypatch.setenv("BATTLENET_CLIENT_SECRET", "secret")

    with pytest.raises(MissingConfigurationError, match="BATTLENET_CLIENT_ID"):
        get_battlenet_config()


def test_battlenet_config_builds_regional_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLENET_CLIENT_ID", "client")
    monkeypatch.setenv("BATTLENET_CLIENT_SECRET", "secret")

    config = get_battlenet_config()

    assert config.client_id == "client"
    assert config.base_url_for(Region.KR) == "https://kr.api.blizzard.com"
    assert config.resilience.ratelimit is not None
    assert config.resilience.cache is not None
    assert config.resilience.cache.should_cache is not None
    assert not config.resilience.cache.should_cache({"code": 404, "detail": "Not Found"})
    assert config.resilience.cache.should_cache({"id": 1})
