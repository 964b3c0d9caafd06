"""Identity keys and URL slugs for characters and guilds."""

from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^\w-]+")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def identity_key(name: str | None, realm: str | None) -> str:
    """Case-insensitive ``name-realm`` key that every diff map is keyed by.

    >>> identity_key("Anna", "Area-52")
    'anna-area-52'
    >>> identity_key(None, "area-52")
    '-area-52'
    """
    return f"{(name or '').casefold()}-{(realm or '').casefold()}"


def slugify(value: str | None) -> str:
    """Hyphenated lowercase slug as used in Battle.net URL paths.

    >>> slugify("Area 52")
    'area-52'
    >>> slugify("  Kel'Thuzad ")
    'kelthuzad'
    """
    text = (value or "").strip().lower()
    text = _WHITESPACE.sub("-", text)
    text = _NON_WORD.sub("", text)
    text = _HYPHEN_RUNS.sub("-", text)
    return text.strip("-")
