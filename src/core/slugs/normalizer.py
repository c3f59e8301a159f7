"""Turn arbitrary titles into URL-safe slug candidates."""
from __future__ import annotations

import re
from typing import Callable, Optional

from common.text import UNKNOWN_MARKER, slugify, transliterate

from .friendly import generate_friendly_name

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_ALNUM_PATTERN = re.compile(r"[a-z0-9]")


def generate_base_slug(
    text: str,
    *,
    fallback: Optional[Callable[[], str]] = None,
    unknown: str = UNKNOWN_MARKER,
) -> str:
    """Return a slug for ``text``, or a friendly name if nothing usable survives.

    ``"New Recording"`` -> ``"new-recording"``, ``"録音test"`` -> ``"lu-yin-test"``,
    ``"☆★♪"`` -> e.g. ``"bright-wave-3k9d"``.

    Deterministic for any input that keeps at least one ASCII letter or digit.
    """

    slug = slugify(transliterate(text, unknown=unknown))
    if not slug or not _ALNUM_PATTERN.search(slug):
        return (fallback or generate_friendly_name)()
    return slug


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_PATTERN.match(value))
