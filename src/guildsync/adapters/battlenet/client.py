"""Battle.net API client."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from guildsync.adapters.http_resilience import ResilientClient
from guildsync.config.battlenet import get_battlenet_config
from guildsync.domain.errors import RemoteNotFoundError, TransientRemoteError

from .schema import TokenResponse
from .translator import (
    translate_character,
    translate_collections_index,
    translate_guild,
    translate_roster,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from guildsync.config.battlenet import BattleNetConfig
    from guildsync.config.http_resilience import ResilienceConfig
    from guildsync.domain.model import (
        CharacterProfile,
        CollectionsIndex,
        GuildProfile,
        GuildRoster,
        Region,
    )

log = getLogger(__name__)

# refresh the client-credentials token this long before it expires
TOKEN_EXPIRY_MARGIN = timedelta(minutes=1)


class BattleNetAPIError(TransientRemoteError):
    """Raised when the Battle.net API fails or returns an unexpected response."""


class BattleNetNotFoundError(RemoteNotFoundError):
    """Raised when the Battle.net API answers 404."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Battle.net resource not found: {url}")
        self.url = url


class BattleNetClient:
    """Synchronous facade over the async Battle.net API calls.

    Every public method opens its own resilient HTTP client through
    ``client_factory`` and runs to completion with ``asyncio.run``.
    """

    def __init__(
        self,
        *,
        config: BattleNetConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config or get_battlenet_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or ResilientClient
        self._clock = clock or (lambda: datetime.now(UTC))
        self._token: str | None = None
        self._token_expires_at: datetime | None = None

    # game data -------------------------------------------------------------

    def get_guild_data(self, realm_slug: str, name_slug: str, region: Region) -> GuildProfile:
        path = f"/data/wow/guild/{_segment(realm_slug)}/{_segment(name_slug)}"
        payload = asyncio.run(self._fetch_one(region, path))
        return translate_guild(payload)

    def get_guild_roster(self, region: Region, realm_slug: str, name_slug: str) -> GuildRoster:
        path = f"/data/wow/guild/{_segment(realm_slug)}/{_segment(name_slug)}/roster"
        payload = asyncio.run(self._fetch_one(region, path))
        return translate_roster(payload)

    def get_enhanced_character_data(
        self, realm_slug: str, name: str, region: Region
    ) -> CharacterProfile | None:
        """Profile, equipment, keystone profile and professions in one bundle.

        Returns ``None`` when the character profile itself is not found.
        """
        try:
            profile, equipment, mythic, professions = asyncio.run(
                self._fetch_character_bundle(realm_slug, name, region)
            )
        except BattleNetNotFoundError:
            log.info("Character %s-%s (%s) not found", name, realm_slug, region)
            return None
        return translate_character(profile, equipment, mythic, professions)

    def get_character_collections_index(
        self, realm_slug: str, name: str, region: Region
    ) -> CollectionsIndex:
        path = f"{_character_path(realm_slug, name)}/collections"
        payload = asyncio.run(self._fetch_one(region, path))
        return translate_collections_index(payload)

    def get_generic_data(self, href: str) -> dict[str, Any]:
        """Follow a ``_links``/``key`` href returned by an earlier response."""
        return asyncio.run(self._fetch_href(href))

    # async plumbing --------------------------------------------------------

    async def _fetch_one(self, region: Region, path: str) -> dict[str, Any]:
        async with self._client_factory(self._resilience) as client:
            return await self._get(client, region, path)

    async def _fetch_href(self, href: str) -> dict[str, Any]:
        async with self._client_factory(self._resilience) as client:
            token = await self._ensure_token(client)
            return await self._perform_request(client, href, params=None, token=token)

    async def _fetch_character_bundle(
        self, realm_slug: str, name: str, region: Region
    ) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any] | None, dict[str, Any] | None]:
        base = _character_path(realm_slug, name)
        async with self._client_factory(self._resilience) as client:
            await self._ensure_token(client)
            results = await asyncio.gather(
                self._get(client, region, base),
                self._get(client, region, f"{base}/equipment"),
                self._get_optional(client, region, f"{base}/mythic-keystone-profile"),
                self._get_optional(client, region, f"{base}/professions"),
                return_exceptions=True,
            )
        # raise in request order so a missing profile wins over other failures
        for result in results:
            if isinstance(result, BaseException):
                raise result
        profile, equipment, mythic, professions = results
        return profile, equipment, mythic, professions  # type: ignore[return-value]

    async def _get_optional(
        self, client: ResilientClient, region: Region, path: str
    ) -> dict[str, Any] | None:
        try:
            return await self._get(client, region, path)
        except BattleNetNotFoundError:
            return None

    async def _get(self, client: ResilientClient, region: Region, path: str) -> dict[str, Any]:
        token = await self._ensure_token(client)
        url = f"{self._config.base_url_for(region)}{path}"
        params = {"namespace": f"profile-{region.value}", "locale": self._config.locale}
        return await self._perform_request(client, url, params=params, token=token)

    async def _perform_request(
        self,
        client: ResilientClient,
        url: str,
        *,
        params: dict[str, str] | None,
        token: str,
    ) -> dict[str, Any]:
        try:
            response = await client.get(
                url, params=params, headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as exc:
            raise BattleNetAPIError(f"Battle.net request to {url} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise BattleNetNotFoundError(url)
        if response.is_error:
            raise BattleNetAPIError(
                f"Battle.net request to {url} failed with status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise BattleNetAPIError(f"Battle.net returned invalid JSON for {url}") from exc
        if not isinstance(payload, dict):
            raise BattleNetAPIError(f"Unexpected Battle.net payload for {url}")
        return payload

    async def _ensure_token(self, client: ResilientClient) -> str:
        now = self._clock()
        if (
            self._token is not None
            and self._token_expires_at is not None
            and self._token_expires_at - TOKEN_EXPIRY_MARGIN > now
        ):
            return self._token

        try:
            response = await client.post(
                self._config.token_url,
                data={"grant_type": "client_credentials"},
                auth=(self._config.client_id, self._config.client_secret),
            )
        except httpx.HTTPError as exc:
            raise BattleNetAPIError(f"Battle.net token request failed: {exc}") from exc
        if response.is_error:
            raise BattleNetAPIError(
                f"Battle.net token request failed with status {response.status_code}"
            )

        token = TokenResponse.model_validate(response.json())
        self._token = token.access_token
        self._token_expires_at = now + timedelta(seconds=token.expires_in)
        log.debug("Refreshed Battle.net token, valid until %s", self._token_expires_at)
        return self._token


def _segment(value: str) -> str:
    return quote(value, safe="")


def _character_path(realm_slug: str, name: str) -> str:
    return f"/profile/wow/character/{_segment(realm_slug)}/{_segment(name.lower())}"
