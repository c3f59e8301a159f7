"""Tests for runtime configuration loader."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from common.config import load_config_document, load_runtime_config
from common.errors import BackendError, ErrorCode


def test_load_default_profile() -> None:
    config = load_runtime_config()
    assert config.profile.id_length == 4
    assert "gentle" in config.profile.adjectives
    assert config.global_settings.unknown_marker == "?"


def test_all_shipped_profiles_validate() -> None:
    document = load_config_document()
    assert {"default", "field"}.issubset(document.profiles)


def test_overrides_apply_to_selected_profile(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, _payload())
    config = load_runtime_config(
        "only",
        config_path=config_path,
        overrides={"global": {"database_path": "tmp/other.db"}, "profile": {"id_length": 6}},
    )
    assert config.global_settings.database_path == "tmp/other.db"
    assert config.profile.id_length == 6


def test_missing_profile_raises_backend_error(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, _payload())
    with pytest.raises(BackendError) as exc:
        load_runtime_config("missing", config_path=config_path)
    assert exc.value.code == ErrorCode.CONFIG_ERROR


def test_missing_file_raises_backend_error(tmp_path: Path) -> None:
    with pytest.raises(BackendError) as exc:
        load_runtime_config(config_path=tmp_path / "absent.json")
    assert exc.value.code == ErrorCode.CONFIG_ERROR


def test_uppercase_vocabulary_rejected(tmp_path: Path) -> None:
    payload = _payload()
    payload["profiles"]["only"]["nouns"] = ["River"]
    config_path = _write_config(tmp_path, payload)
    with pytest.raises(BackendError) as exc:
        load_runtime_config("only", config_path=config_path)
    assert "nouns" in str(exc.value)


@pytest.mark.parametrize("marker", [" ", "\t", "-"])
def test_separator_unknown_marker_rejected(tmp_path: Path, marker: str) -> None:
    payload = _payload()
    payload["global"]["unknown_marker"] = marker
    config_path = _write_config(tmp_path, payload)
    with pytest.raises(BackendError) as exc:
        load_runtime_config("only", config_path=config_path)
    assert exc.value.code == ErrorCode.CONFIG_ERROR


def test_alphanumeric_unknown_marker_rejected(tmp_path: Path) -> None:
    payload = _payload()
    payload["global"]["unknown_marker"] = "x"
    config_path = _write_config(tmp_path, payload)
    with pytest.raises(BackendError) as exc:
        load_runtime_config("only", config_path=config_path)
    assert exc.value.code == ErrorCode.CONFIG_ERROR


def test_non_positive_id_length_rejected(tmp_path: Path) -> None:
    payload = _payload()
    payload["profiles"]["only"]["id_length"] = 0
    config_path = _write_config(tmp_path, payload)
    with pytest.raises(BackendError):
        load_runtime_config("only", config_path=config_path)


def _write_config(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


def _payload() -> dict:
    return {
        "version": 1,
        "global": {"database_path": "artifacts/catalog.db", "unknown_marker": "?"},
        "profiles": {
            "only": {
                "description": "tmp",
                "adjectives": ["calm"],
                "nouns": ["wave"],
                "id_length": 4,
            }
        },
    }
