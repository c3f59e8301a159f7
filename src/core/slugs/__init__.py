"""Slug generation: transliteration, friendly-name fallback, uniqueness."""

from .friendly import FRIENDLY_NAME_PATTERN, generate_friendly_name
from .normalizer import SLUG_PATTERN, generate_base_slug, is_valid_slug
from .resolver import SlugLookup, SlugResolver, generate_unique_slug

__all__ = [
    "FRIENDLY_NAME_PATTERN",
    "SLUG_PATTERN",
    "SlugLookup",
    "SlugResolver",
    "generate_base_slug",
    "generate_friendly_name",
    "generate_unique_slug",
    "is_valid_slug",
]
