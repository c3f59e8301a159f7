"""Collision-free slug resolution against a persistent store."""
from __future__ import annotations

import random
from functools import partial
from typing import Callable, Optional, Protocol

from common.models import EntityKind, ProfileSettings
from common.text import UNKNOWN_MARKER

from .friendly import generate_friendly_name
from .normalizer import generate_base_slug


class SlugLookup(Protocol):
    """Existence check supplied by whatever owns the records."""

    def exists(self, kind: EntityKind, slug: str, exclude_id: Optional[str] = None) -> bool:
        ...


def generate_unique_slug(
    text: str,
    kind: EntityKind | str,
    lookup: SlugLookup,
    exclude_id: Optional[str] = None,
    *,
    fallback: Optional[Callable[[], str]] = None,
    unknown: str = UNKNOWN_MARKER,
) -> str:
    """Return a slug for ``text`` unused by any other ``kind`` record.

    Tries ``base``, then ``base-1``, ``base-2``, ... with exactly one lookup per
    candidate until one is free. Lookup errors propagate unchanged.

    Nothing is reserved: two concurrent callers can receive the same slug, so
    the store's unique constraint stays the final authority.
    """

    entity_kind = EntityKind.parse(kind)
    base_slug = generate_base_slug(text, fallback=fallback, unknown=unknown)

    candidate = base_slug
    counter = 1
    while lookup.exists(entity_kind, candidate, exclude_id):
        candidate = f"{base_slug}-{counter}"
        counter += 1
    return candidate


class SlugResolver:
    """Binds a lookup and a friendly-name vocabulary for repeated use."""

    def __init__(
        self,
        lookup: SlugLookup,
        *,
        profile: Optional[ProfileSettings] = None,
        rng: Optional[random.Random] = None,
        unknown: str = UNKNOWN_MARKER,
    ) -> None:
        self.lookup = lookup
        self.unknown = unknown
        self._fallback: Optional[Callable[[], str]] = None
        if profile is not None or rng is not None:
            settings = profile or ProfileSettings()
            self._fallback = partial(
                generate_friendly_name,
                rng=rng,
                adjectives=settings.adjectives,
                nouns=settings.nouns,
                id_length=settings.id_length,
            )

    def base_slug(self, text: str) -> str:
        return generate_base_slug(text, fallback=self._fallback, unknown=self.unknown)

    def unique_slug(self, text: str, kind: EntityKind | str, exclude_id: Optional[str] = None) -> str:
        return generate_unique_slug(
            text,
            kind,
            self.lookup,
            exclude_id,
            fallback=self._fallback,
            unknown=self.unknown,
        )
