"""Helpers for loading runtime configuration profiles."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import BackendError, ErrorCode
from .models import GlobalSettings, ProfileSettings, RuntimeConfig

DEFAULT_CONFIG_PATH = Path("config/defaults.json")
DEFAULT_PROFILE = "default"

_WORD_PATTERN = re.compile(r"^[a-z]+$")


@dataclass(slots=True)
class ConfigDocument:
    source: Path
    version: int
    global_settings: GlobalSettings
    profiles: Dict[str, ProfileSettings]


def load_runtime_config(
    profile: str = DEFAULT_PROFILE,
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> RuntimeConfig:
    """Load configuration JSON, validate it, and resolve a specific profile."""

    document = load_config_document(
        profile_name=profile,
        config_path=config_path,
        overrides=overrides,
    )
    return RuntimeConfig(global_settings=document.global_settings, profile=document.profiles[profile])


def load_config_document(
    *,
    profile_name: Optional[str] = None,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ConfigDocument:
    cfg_path = config_path or DEFAULT_CONFIG_PATH
    raw = _read_config_json(cfg_path)

    version = _require_positive_int(raw.get("version"), "version", cfg_path)
    global_section = raw.get("global")
    if not isinstance(global_section, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'global' section missing in {cfg_path}")

    overrides = overrides or {}
    global_data = {**global_section, **(overrides.get("global") or {})}
    global_settings = _build_global_settings(global_data, cfg_path)

    profiles_section = raw.get("profiles")
    if not isinstance(profiles_section, Mapping) or not profiles_section:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'profiles' section missing in {cfg_path}")

    profile_overrides = overrides.get("profile") or {}
    profiles: Dict[str, ProfileSettings] = {}
    for name, profile_data in profiles_section.items():
        if not isinstance(profile_data, Mapping):
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"Profile '{name}' must be an object in {cfg_path}",
            )
        merged = dict(profile_data)
        if profile_name and name == profile_name and profile_overrides:
            merged = {**merged, **profile_overrides}
        profiles[name] = _build_profile_settings(name, merged, cfg_path)

    if profile_name and profile_name not in profiles:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{profile_name}' not found in {cfg_path}",
            context={"profile": profile_name},
        )

    return ConfigDocument(
        source=cfg_path,
        version=version,
        global_settings=global_settings,
        profiles=profiles,
    )


# ---------------------------------------------------------------------------
# Internal helpers


def _read_config_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' not found") from exc
    except json.JSONDecodeError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' is not valid JSON: {exc}") from exc


def _build_global_settings(data: Mapping[str, Any], source: Path) -> GlobalSettings:
    database_path = _require_string(
        data.get("database_path", GlobalSettings().database_path),
        "global.database_path",
        source,
    )
    unknown_marker = data.get("unknown_marker", GlobalSettings().unknown_marker)
    if (
        not isinstance(unknown_marker, str)
        or len(unknown_marker) != 1
        or unknown_marker.isalnum()
        or unknown_marker.isspace()
        or unknown_marker == "-"
    ):
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"global.unknown_marker must be a single character that is not alphanumeric, whitespace or a hyphen in {source}",
        )
    return GlobalSettings(database_path=database_path, unknown_marker=unknown_marker)


def _build_profile_settings(name: str, data: Mapping[str, Any], source: Path) -> ProfileSettings:
    prefix = f"profiles.{name}"
    required_fields = ("description", "adjectives", "nouns", "id_length")
    missing = [field for field in required_fields if field not in data]
    if missing:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{name}' missing fields {missing} in {source}",
        )

    return ProfileSettings(
        description=_require_string(data.get("description"), f"{prefix}.description", source),
        adjectives=_require_word_list(data.get("adjectives"), f"{prefix}.adjectives", source),
        nouns=_require_word_list(data.get("nouns"), f"{prefix}.nouns", source),
        id_length=_require_positive_int(data.get("id_length"), f"{prefix}.id_length", source),
    )


def _require_word_list(value: Any, field: str, source: Path) -> List[str]:
    if not isinstance(value, list) or not value:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be a non-empty list in {source}")
    words: List[str] = []
    for item in value:
        word = _require_string(item, field, source)
        if not _WORD_PATTERN.match(word):
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"{field} entry '{word}' must contain lowercase ASCII letters only in {source}",
            )
        words.append(word)
    return words


def _require_string(value: Any, field: str, source: Path) -> str:
    if not isinstance(value, str):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be a string in {source}")
    text = value.strip()
    if not text:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be non-empty in {source}")
    return text


def _require_positive_int(value: Any, field: str, source: Path) -> int:
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be an integer in {source}",
        ) from exc
    if num <= 0:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be greater than zero in {source}",
        )
    return num
