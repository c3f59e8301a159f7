"""Lightweight text helpers shared across modules."""
from __future__ import annotations

import re

from unidecode import unidecode

UNKNOWN_MARKER = "?"

_WHITESPACE_PATTERN = re.compile(r"\s+")
_UNSAFE_PATTERN = re.compile(r"[^a-z0-9-]+")
_HYPHEN_RUN_PATTERN = re.compile(r"-{2,}")


def transliterate(value: str, unknown: str = UNKNOWN_MARKER) -> str:
    """Return a Latin approximation of ``value``.

    Kana become romaji and kanji their pinyin-style reading. Characters with no
    known reading are replaced with ``unknown``.
    """

    return unidecode(value, errors="replace", replace_str=unknown)


def slugify(value: str) -> str:
    """Lowercase, hyphenate and strip ``value`` down to ``[a-z0-9-]``.

    May return an empty string; callers decide what to do with that.
    """

    normalized = value.lower().strip()
    normalized = _WHITESPACE_PATTERN.sub("-", normalized)
    normalized = _UNSAFE_PATTERN.sub("", normalized)
    normalized = _HYPHEN_RUN_PATTERN.sub("-", normalized)
    return normalized.strip("-")
