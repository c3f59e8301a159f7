"""Random, human-pronounceable fallback names."""
from __future__ import annotations

import random
import re
from typing import Optional, Sequence

from nanoid import generate

from common.errors import BackendError, ErrorCode
from common.models import DEFAULT_ADJECTIVES, DEFAULT_NOUNS, FRIENDLY_ID_ALPHABET, FRIENDLY_ID_LENGTH

FRIENDLY_NAME_PATTERN = re.compile(r"^[a-z]+-[a-z]+-[a-z0-9]+$")

_WORD_PATTERN = re.compile(r"^[a-z]+$")


def generate_friendly_name(
    *,
    rng: Optional[random.Random] = None,
    adjectives: Optional[Sequence[str]] = None,
    nouns: Optional[Sequence[str]] = None,
    id_length: int = FRIENDLY_ID_LENGTH,
) -> str:
    """Return ``{adjective}-{noun}-{id}``, e.g. ``calm-wave-x7k2``.

    Each call is an independent draw. The id comes from nanoid over a
    lowercase alphanumeric alphabet; passing ``rng`` draws it from that
    generator instead so seeded callers get reproducible names.
    """

    adjective_pool = _validate_words(DEFAULT_ADJECTIVES if adjectives is None else adjectives, "adjectives")
    noun_pool = _validate_words(DEFAULT_NOUNS if nouns is None else nouns, "nouns")
    if id_length <= 0:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"id_length must be greater than zero, got {id_length}")

    source = rng or random
    adjective = source.choice(adjective_pool)
    noun = source.choice(noun_pool)
    if rng is None:
        suffix = generate(FRIENDLY_ID_ALPHABET, id_length)
    else:
        suffix = "".join(rng.choice(FRIENDLY_ID_ALPHABET) for _ in range(id_length))
    return f"{adjective}-{noun}-{suffix}"


def _validate_words(words: Sequence[str], label: str) -> Sequence[str]:
    if not words:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{label} must be a non-empty list")
    bad = [word for word in words if not _WORD_PATTERN.match(word)]
    if bad:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{label} may contain lowercase ASCII letters only: {bad}",
            context={label: list(bad)},
        )
    return words
