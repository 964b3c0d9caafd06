"""Battle.net API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from guildsync.domain.model import Region

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

BATTLENET_TOKEN_URL: Final[str] = "https://oauth.battle.net/token"
BATTLENET_TIMEOUT_SECONDS: Final[float] = 15.0
BATTLENET_LOCALE: Final[str] = "en_US"
# Blizzard allows 100 requests/s per client; stay well below it.
BATTLENET_RATE_LIMIT = RateLimit(max_calls=25, per_seconds=1.0)
PROFILE_CACHE_TTL_SECONDS: Final[float] = 300.0


def api_base_url(region: Region) -> str:
    return f"https://{region.value}.api.blizzard.com"


def _default_api_base_urls() -> dict[Region, str]:
    return {region: api_base_url(region) for region in Region}


def _should_cache_payload(payload: object) -> bool:
    # error documents ({"code": ..., "type": ..., "detail": ...}) are never cached
    return not (isinstance(payload, dict) and "code" in payload and "detail" in payload)


def default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="battlenet",
        timeout_seconds=BATTLENET_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=BATTLENET_RATE_LIMIT,
        cache=CacheConfig(
            backend="memory",
            default_ttl_seconds=PROFILE_CACHE_TTL_SECONDS,
            should_cache=_should_cache_payload,
        ),
        default_headers={"Accept-Encoding": "gzip, deflate"},
    )


@dataclass(frozen=True, slots=True)
class BattleNetConfig:
    """Holds Battle.net client-credentials configuration."""

    client_id: str
    client_secret: str
    resilience: ResilienceConfig = field(default_factory=default_resilience_config)
    token_url: str = BATTLENET_TOKEN_URL
    locale: str = BATTLENET_LOCALE
    api_base_urls: dict[Region, str] = field(default_factory=_default_api_base_urls)

    def base_url_for(self, region: Region) -> str:
        return self.api_base_urls.get(region) or api_base_url(region)


def get_battlenet_config(*, resilience: ResilienceConfig | None = None) -> BattleNetConfig:
    values = require_env_vars(("BATTLENET_CLIENT_ID", "BATTLENET_CLIENT_SECRET"))
    return BattleNetConfig(
        client_id=values["BATTLENET_CLIENT_ID"],
        client_secret=values["BATTLENET_CLIENT_SECRET"],
        resilience=resilience or default_resilience_config(),
    )
