"""Create/rename flows that stamp catalogue records with unique slugs."""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List, Optional

from common.errors import BackendError, ErrorCode
from common.models import CatalogRecord, EntityKind
from core.slugs import SlugResolver
from storage import (
    SqliteSlugLookup,
    delete_record,
    fetch_record,
    fetch_record_by_slug,
    insert_record,
    list_records,
    record_audit_event,
    update_record,
)
from storage.sqlite_store import TABLES


class CatalogService:
    """Thin record layer: resolve a slug, write it, translate conflicts."""

    def __init__(self, db_path: Path, resolver: Optional[SlugResolver] = None) -> None:
        self.db_path = db_path
        self.resolver = resolver or SlugResolver(SqliteSlugLookup(db_path))

    def create(self, kind: EntityKind | str, name: str) -> CatalogRecord:
        entity_kind = EntityKind.parse(kind)
        name = _require_name(name)
        slug = self.resolver.unique_slug(name, entity_kind)
        try:
            record = insert_record(self.db_path, entity_kind, name, slug)
        except sqlite3.IntegrityError as exc:
            raise _conflict_error(entity_kind, name, slug, exc) from exc
        record_audit_event(self.db_path, entity_kind.value, "create", f"id={record.id} slug={record.slug}")
        return record

    def rename(self, kind: EntityKind | str, record_id: str, name: str) -> CatalogRecord:
        entity_kind = EntityKind.parse(kind)
        name = _require_name(name)
        if fetch_record(self.db_path, entity_kind, record_id) is None:
            raise _not_found(entity_kind, record_id)
        # Excluding the record itself keeps its slug when the name is unchanged.
        slug = self.resolver.unique_slug(name, entity_kind, exclude_id=record_id)
        try:
            record = update_record(self.db_path, entity_kind, record_id, name=name, slug=slug)
        except sqlite3.IntegrityError as exc:
            raise _conflict_error(entity_kind, name, slug, exc) from exc
        if record is None:
            raise _not_found(entity_kind, record_id)
        record_audit_event(self.db_path, entity_kind.value, "rename", f"id={record.id} slug={record.slug}")
        return record

    def get(self, kind: EntityKind | str, slug: str) -> CatalogRecord:
        entity_kind = EntityKind.parse(kind)
        record = fetch_record_by_slug(self.db_path, entity_kind, slug)
        if record is None:
            raise BackendError(
                ErrorCode.NOT_FOUND,
                f"No {entity_kind.value} with slug '{slug}'",
                context={"kind": entity_kind.value, "slug": slug},
            )
        return record

    def list(self, kind: EntityKind | str, *, limit: int = 100) -> List[CatalogRecord]:
        return list_records(self.db_path, EntityKind.parse(kind), limit=limit)

    def delete(self, kind: EntityKind | str, record_id: str) -> None:
        entity_kind = EntityKind.parse(kind)
        if not delete_record(self.db_path, entity_kind, record_id):
            raise _not_found(entity_kind, record_id)
        record_audit_event(self.db_path, entity_kind.value, "delete", f"id={record_id}")


def _require_name(name: str) -> str:
    text = (name or "").strip()
    if not text:
        raise BackendError(ErrorCode.STATE_ERROR, "Name must be non-empty")
    return text


def _not_found(kind: EntityKind, record_id: str) -> BackendError:
    return BackendError(
        ErrorCode.NOT_FOUND,
        f"No {kind.value} with id '{record_id}'",
        context={"kind": kind.value, "id": record_id},
    )


def _conflict_error(kind: EntityKind, name: str, slug: str, exc: sqlite3.IntegrityError) -> BackendError:
    # sqlite reports e.g. "UNIQUE constraint failed: materials.slug"
    table, name_column = TABLES[kind]
    message = str(exc)
    context = {"kind": kind.value, "name": name, "slug": slug}
    if f"{table}.{name_column}" in message:
        return BackendError(
            ErrorCode.NAME_CONFLICT,
            f"A {kind.value} named '{name}' already exists",
            context=context,
        )
    if f"{table}.slug" in message:
        return BackendError(
            ErrorCode.SLUG_CONFLICT,
            f"Slug '{slug}' was taken concurrently; retry the request",
            context=context,
        )
    return BackendError(ErrorCode.STATE_ERROR, f"Could not write {kind.value}: {message}", context=context)
