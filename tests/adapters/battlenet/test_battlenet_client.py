from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import httpx
import pytest

from guildsync.adapters.battlenet import BattleNetAPIError, BattleNetClient, BattleNetNotFoundError
from guildsync.adapters.http_resilience import ResilientClient
from guildsync.config.battlenet import BattleNetConfig
from guildsync.config.http_resilience import ResilienceConfig, RetryPolicy
from guildsync.domain.errors import RemoteNotFoundError, TransientRemoteError
from guildsync.domain.model import Region

if TYPE_CHECKING:
    from collections.abc import Callable

GUILD_PAYLOAD = {
    "id": 1001,
    "name": "Raiders",
    "realm": {"id": 3676, "slug": "area-52", "name": "Area 52"},
    "member_count": 2,
}

ROSTER_PAYLOAD = {
    "members": [
        {
            "character": {
                "id": 11,
                "name": "Anna",
                "realm": {"id": 3676, "slug": "area-52"},
                "level": 80,
                "playable_class": {"id": 8},
            },
            "rank": 0,
        },
        {
            "character": {"id": 12, "name": "Bob", "realm": {"slug": "area-52"}, "level": 70},
            "rank": 3,
        },
    ]
}

PROFILE_PAYLOAD = {
    "id": 11,
    "name": "Anna",
    "realm": {"id": 3676, "slug": "area-52", "name": "Area 52"},
    "level": 80,
    "character_class": {"id": 8, "name": "Mage"},
    "guild": {"id": 1001, "name": "Raiders", "realm": {"slug": "area-52", "name": "Area 52"}},
}


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


type Route = tuple[int, bytes]


def _json(payload: object, status_code: int = 200) -> Route:
    return status_code, json.dumps(payload).encode()


def _client(
    routes: dict[str, Route],
    *,
    requests: list[httpx.Request] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> BattleNetClient:
    seen = requests if requests is not None else []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/token":
            route = _json({"access_token": "tok", "token_type": "bearer", "expires_in": 3600})
        else:
            route = routes.get(request.url.path) or _json(
                {"code": 404, "type": "BLZWEBAPI00000404", "detail": "Not Found"}, 404
            )
        status_code, body = route
        return httpx.Response(status_code, content=body)

    resilience = ResilienceConfig(name="battlenet-test", retry=RetryPolicy(total=0), cache=None)
    config = BattleNetConfig(client_id="id", client_secret="secret", resilience=resilience)
    return BattleNetClient(
        config=config,
        client_factory=lambda cfg: ResilientClient(cfg, transport=httpx.MockTransport(handler)),
        clock=clock,
    )


def test_guild_data_is_fetched_with_token_and_namespace() -> None:
    requests: list[httpx.Request] = []
    client = _client({"/data/wow/guild/area-52/raiders": _json(GUILD_PAYLOAD)}, requests=requests)

    profile = client.get_guild_data("area-52", "raiders", Region.EU)

    assert profile.bnet_guild_id == 1001
    assert profile.realm_slug == "area-52"
    assert profile.raw == GUILD_PAYLOAD
    token_request, guild_request = requests
    assert token_request.method == "POST"
    assert token_request.url.host == "oauth.battle.net"
    assert b"grant_type=client_credentials" in token_request.content
    assert token_request.headers["Authorization"].startswith("Basic ")
    assert guild_request.url.host == "eu.api.blizzard.com"
    assert guild_request.url.params["namespace"] == "profile-eu"
    assert guild_request.url.params["locale"] == "en_US"
    assert guild_request.headers["Authorization"] == "Bearer tok"


def test_roster_is_translated() -> None:
    client = _client({"/data/wow/guild/area-52/raiders/roster": _json(ROSTER_PAYLOAD)})

    roster = client.get_guild_roster(Region.US, "area-52", "raiders")

    assert [(entry.name, entry.rank) for entry in roster.entries] == [("Anna", 0), ("Bob", 3)]
    assert roster.entries[1].level == 70
    assert roster.entries[0].raw == ROSTER_PAYLOAD["members"][0]


def test_token_is_reused_until_close_to_expiry() -> None:
    requests: list[httpx.Request] = []
    clock = FakeClock()
    client = _client(
        {"/data/wow/guild/area-52/raiders": _json(GUILD_PAYLOAD)}, requests=requests, clock=clock
    )

    client.get_guild_data("area-52", "raiders", Region.US)
    client.get_guild_data("area-52", "raiders", Region.US)
    clock.now += timedelta(seconds=3600 - 30)
    client.get_guild_data("area-52", "raiders", Region.US)

    token_requests = [request for request in requests if request.url.path == "/token"]
    assert len(token_requests) == 2


def test_enhanced_character_data_bundles_optional_parts() -> None:
    base = "/profile/wow/character/area-52/anna"
    requests: list[httpx.Request] = []
    client = _client(
        {
            base: _json(PROFILE_PAYLOAD),
            f"{base}/equipment": _json({"equipped_items": [{"slot": {"type": "HEAD"}}]}),
            f"{base}/professions": _json({"primaries": [{"profession": {"id": 164}}]}),
        },
        requests=requests,
    )

    profile = client.get_enhanced_character_data("area-52", "Anna", Region.US)

    assert profile is not None
    assert profile.bnet_character_id == 11
    assert profile.character_class == "Mage"
    assert profile.guild is not None
    assert profile.guild.bnet_guild_id == 1001
    assert profile.guild.realm_name == "Area 52"
    assert profile.equipment == {"equipped_items": [{"slot": {"type": "HEAD"}}]}
    assert profile.mythic_profile is None
    assert profile.professions == [{"profession": {"id": 164}}]
    paths = {request.url.path for request in requests}
    assert f"{base}/mythic-keystone-profile" in paths


def test_missing_character_profile_returns_none() -> None:
    client = _client({})

    assert client.get_enhanced_character_data("area-52", "Nobody", Region.US) is None


def test_missing_equipment_counts_as_missing_character() -> None:
    client = _client({"/profile/wow/character/area-52/anna": _json(PROFILE_PAYLOAD)})

    assert client.get_enhanced_character_data("area-52", "anna", Region.US) is None


def test_not_found_is_a_remote_not_found_error() -> None:
    client = _client({})

    with pytest.raises(BattleNetNotFoundError) as excinfo:
        client.get_guild_data("area-52", "ghosts", Region.US)

    assert isinstance(excinfo.value, RemoteNotFoundError)
    assert excinfo.value.url.endswith("/data/wow/guild/area-52/ghosts")


@pytest.mark.parametrize(
    "route",
    [
        _json({"code": 500}, 500),
        _json({"code": 429}, 429),
        (200, b"<html>maintenance</html>"),
        _json(["not", "an", "object"]),
    ],
)
def test_other_failures_are_transient(route: Route) -> None:
    client = _client({"/data/wow/guild/area-52/raiders": route})

    with pytest.raises(BattleNetAPIError) as excinfo:
        client.get_guild_data("area-52", "raiders", Region.US)

    assert isinstance(excinfo.value, TransientRemoteError)


def test_collections_index_and_generic_href() -> None:
    toys_href = "https://us.api.blizzard.com/profile/wow/character/area-52/anna/collections/toys"
    client = _client(
        {
            "/profile/wow/character/area-52/anna/collections": _json(
                {"toys": {"href": toys_href}, "pets": {"href": "https://example.invalid/pets"}}
            ),
            "/profile/wow/character/area-52/anna/collections/toys": _json(
                {"toys": [{"toy": {"id": 1}}]}
            ),
        }
    )

    index = client.get_character_collections_index("area-52", "Anna", Region.US)
    document = client.get_generic_data(toys_href)

    assert index.toys_href == toys_href
    assert document == {"toys": [{"toy": {"id": 1}}]}
