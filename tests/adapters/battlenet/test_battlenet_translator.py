from __future__ import annotations

import pytest
from pydantic import ValidationError

from guildsync.adapters.battlenet.translator import (
    localized,
    translate_character,
    translate_collections_index,
    translate_roster,
)


def test_localized_prefers_requested_locale() -> None:
    assert localized({"de_DE": "Magier", "en_US": "Mage"}) == "Mage"
    assert localized({"de_DE": "Magier"}) == "Magier"
    assert localized("Mage") == "Mage"
    assert localized(None) is None


def test_roster_entry_without_character_name_is_kept_blank() -> None:
    payload = {
        "members": [
            {"character": {"id": 1, "realm": {"slug": "area-52"}}, "rank": 4},
            {
                "character": {
                    "id": 2,
                    "name": "Anna",
                    "realm": {"slug": "area-52"},
                    "playable_class": {"id": 8, "name": {"en_US": "Mage"}},
                },
                "rank": 0,
                "extra_field": True,
            },
        ]
    }

    roster = translate_roster(payload)

    blank, anna = roster.entries
    assert blank.name == ""
    assert blank.rank == 4
    assert anna.character_class == "Mage"
    assert anna.bnet_character_id == 2
    assert anna.raw["extra_field"] is True
    assert len(roster) == 2


def test_empty_roster() -> None:
    assert translate_roster({}).entries == ()


def test_character_without_guild_or_professions() -> None:
    profile = translate_character(
        {"id": 5, "name": "Bob", "realm": {"slug": "area-52"}, "level": 10},
        {"equipped_items": []},
        None,
        None,
    )

    assert profile.guild is None
    assert profile.professions == []
    assert profile.character_class is None
    assert profile.level == 10


def test_character_payload_missing_identity_is_rejected() -> None:
    with pytest.raises(ValidationError):
        translate_character({"name": "Bob"}, {}, None, None)


def test_collections_index_without_toys() -> None:
    index = translate_collections_index({"pets": {"href": "https://example.invalid/pets"}})

    assert index.toys_href is None
