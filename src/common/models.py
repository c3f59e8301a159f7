"""Data models shared across UI, core services, and storage layers."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

DEFAULT_ADJECTIVES: Tuple[str, ...] = ("gentle", "bright", "calm", "dynamic", "elegant")
DEFAULT_NOUNS: Tuple[str, ...] = ("melody", "harmony", "rhythm", "sound", "wave")
FRIENDLY_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
FRIENDLY_ID_LENGTH = 4


class EntityKind(str, Enum):
    """Logical collections with an independent slug namespace."""

    MATERIAL = "material"
    TAG = "tag"
    PROJECT = "project"

    @classmethod
    def parse(cls, value: "EntityKind | str") -> "EntityKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown entity kind '{value}'. Allowed: {allowed}") from exc


@dataclass(slots=True)
class CatalogRecord:
    """A slugged row of one of the catalogue tables."""

    id: str
    kind: EntityKind
    name: str
    slug: str
    created_at: float = 0.0
    updated_at: float = 0.0


@dataclass(slots=True)
class AuditEvent:
    entity: str
    action: str
    detail: Optional[str]
    created_at: float


@dataclass(slots=True)
class GlobalSettings:
    database_path: str = "artifacts/catalog.db"
    unknown_marker: str = "?"


@dataclass(slots=True)
class ProfileSettings:
    """Friendly-name vocabulary used when a title normalizes to nothing."""

    description: str = ""
    adjectives: List[str] = field(default_factory=lambda: list(DEFAULT_ADJECTIVES))
    nouns: List[str] = field(default_factory=lambda: list(DEFAULT_NOUNS))
    id_length: int = FRIENDLY_ID_LENGTH


@dataclass(slots=True)
class RuntimeConfig:
    global_settings: GlobalSettings
    profile: ProfileSettings
