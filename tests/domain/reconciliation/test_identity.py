from __future__ import annotations

import pytest

from guildsync.domain.reconciliation import identity_key, slugify


def test_identity_key_is_case_insensitive() -> None:
    assert identity_key("Anna", "Area-52") == identity_key("anna", "area-52")


def test_identity_key_folds_non_ascii_names() -> None:
    assert identity_key("Ännä", "Area-52") == identity_key("änNÄ", "area-52")


def test_identity_key_tolerates_missing_parts() -> None:
    assert identity_key(None, None) == "-"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Area 52", "area-52"),
        ("area-52", "area-52"),
        ("Kel'Thuzad", "kelthuzad"),
        ("  The   Big  Guild ", "the-big-guild"),
        ("Argent Dawn -- EU", "argent-dawn-eu"),
        (None, ""),
    ],
)
def test_slugify(raw: str | None, expected: str) -> None:
    assert slugify(raw) == expected
