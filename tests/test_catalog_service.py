"""Tests for the record flows that consume the slug resolver."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from common.errors import BackendError, ErrorCode
from common.models import EntityKind
from core.catalog import CatalogService
from core.slugs import SlugResolver
from storage import fetch_audit_events


def test_create_assigns_suffixed_slugs(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    first = service.create("project", "Dawn Chorus")
    second = service.create("project", "Dawn  Chorus!")
    third = service.create(EntityKind.PROJECT, "dawn chorus")

    assert [first.slug, second.slug, third.slug] == ["dawn-chorus", "dawn-chorus-1", "dawn-chorus-2"]
    assert service.get("project", "dawn-chorus-1").id == second.id


def test_rename_to_same_name_keeps_slug(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    record = service.create("material", "Forest Stream")
    renamed = service.rename("material", record.id, "Forest Stream")
    assert renamed.slug == "forest-stream"


def test_rename_resolves_against_other_records(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    service.create("tag", "Wind")
    gust = service.create("tag", "Gust")
    renamed = service.rename("tag", gust.id, "wind ")
    assert renamed.slug == "wind-1"


def test_duplicate_material_title_is_name_conflict(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    service.create("material", "Harbor Bells")
    with pytest.raises(BackendError) as exc:
        service.create("material", "Harbor Bells")
    assert exc.value.code == ErrorCode.NAME_CONFLICT


class StaleLookup:
    """Always reports a free slug, as a racing writer would observe."""

    def exists(self, kind: EntityKind, slug: str, exclude_id: Optional[str] = None) -> bool:
        return False


def test_lost_race_surfaces_slug_conflict(tmp_path: Path) -> None:
    db_path = tmp_path / "catalog.db"
    service = CatalogService(db_path, resolver=SlugResolver(StaleLookup()))
    service.create("project", "Night Walk")
    with pytest.raises(BackendError) as exc:
        service.create("project", "Night Walk")
    assert exc.value.code == ErrorCode.SLUG_CONFLICT
    assert exc.value.context["slug"] == "night-walk"


def test_missing_records_raise_not_found(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    with pytest.raises(BackendError) as exc:
        service.rename("tag", "nope", "Anything")
    assert exc.value.code == ErrorCode.NOT_FOUND
    with pytest.raises(BackendError):
        service.get("tag", "nope")
    with pytest.raises(BackendError):
        service.delete("tag", "nope")


def test_blank_name_rejected(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    with pytest.raises(BackendError) as exc:
        service.create("tag", "   ")
    assert exc.value.code == ErrorCode.STATE_ERROR


def test_symbol_only_name_gets_friendly_slug(tmp_path: Path) -> None:
    service = CatalogService(tmp_path / "catalog.db")
    record = service.create("tag", "☆★♪")
    assert record.name == "☆★♪"
    assert len(record.slug.split("-")) == 3


def test_mutations_are_audited(tmp_path: Path) -> None:
    db_path = tmp_path / "catalog.db"
    service = CatalogService(db_path)
    record = service.create("tag", "Insects")
    service.rename("tag", record.id, "Crickets")
    service.delete("tag", record.id)

    actions = [event.action for event in fetch_audit_events(db_path, entity="tag")]
    assert actions == ["delete", "rename", "create"]
    assert service.list("tag") == []
