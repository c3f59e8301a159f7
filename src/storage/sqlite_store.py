"""SQLite persistence for catalogue records and audit trails."""
from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from common.models import AuditEvent, CatalogRecord, EntityKind


SCHEMA_MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    applied_at REAL NOT NULL
)
"""

MIGRATIONS: List[tuple[int, List[str]]] = [
    (
        1,
        [
            """
            CREATE TABLE IF NOT EXISTS materials (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL UNIQUE,
                slug TEXT NOT NULL UNIQUE,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS tags (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL UNIQUE,
                slug TEXT NOT NULL UNIQUE,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                slug TEXT NOT NULL UNIQUE,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
            """,
        ],
    ),
    (
        2,
        [
            """
            CREATE TABLE IF NOT EXISTS audit_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                entity TEXT NOT NULL,
                action TEXT NOT NULL,
                detail TEXT,
                created_at REAL NOT NULL
            )
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_audit_log_entity ON audit_log(entity, created_at)
            """,
        ],
    ),
]

# kind -> (table, display-name column)
TABLES: Dict[EntityKind, Tuple[str, str]] = {
    EntityKind.MATERIAL: ("materials", "title"),
    EntityKind.TAG: ("tags", "name"),
    EntityKind.PROJECT: ("projects", "name"),
}


def initialize(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        _apply_migrations(conn)


def slug_exists(
    db_path: Path,
    kind: EntityKind,
    slug: str,
    exclude_id: Optional[str] = None,
) -> bool:
    """Return True if another ``kind`` record already owns ``slug``."""

    initialize(db_path)
    table, _ = TABLES[kind]
    query = f"SELECT 1 FROM {table} WHERE slug = ?"
    params: List[object] = [slug]
    if exclude_id:
        query += " AND id <> ?"
        params.append(exclude_id)
    query += " LIMIT 1"
    with sqlite3.connect(db_path) as conn:
        row = conn.execute(query, params).fetchone()
    return row is not None


class SqliteSlugLookup:
    """Slug existence checks backed by the catalogue database."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        initialize(db_path)

    def exists(self, kind: EntityKind, slug: str, exclude_id: Optional[str] = None) -> bool:
        return slug_exists(self.db_path, kind, slug, exclude_id)


def insert_record(
    db_path: Path,
    kind: EntityKind,
    name: str,
    slug: str,
    *,
    record_id: Optional[str] = None,
) -> CatalogRecord:
    """Insert a row; ``sqlite3.IntegrityError`` surfaces on a UNIQUE violation."""

    initialize(db_path)
    table, name_column = TABLES[kind]
    now = time.time()
    record = CatalogRecord(
        id=record_id or uuid4().hex,
        kind=kind,
        name=name,
        slug=slug,
        created_at=now,
        updated_at=now,
    )
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            f"INSERT INTO {table}(id, {name_column}, slug, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
            (record.id, record.name, record.slug, record.created_at, record.updated_at),
        )
        conn.commit()
    return record


def update_record(
    db_path: Path,
    kind: EntityKind,
    record_id: str,
    *,
    name: str,
    slug: str,
) -> Optional[CatalogRecord]:
    initialize(db_path)
    table, name_column = TABLES[kind]
    now = time.time()
    with sqlite3.connect(db_path) as conn:
        cursor = conn.execute(
            f"UPDATE {table} SET {name_column} = ?, slug = ?, updated_at = ? WHERE id = ?",
            (name, slug, now, record_id),
        )
        conn.commit()
        if cursor.rowcount == 0:
            return None
    return fetch_record(db_path, kind, record_id)


def delete_record(db_path: Path, kind: EntityKind, record_id: str) -> bool:
    initialize(db_path)
    table, _ = TABLES[kind]
    with sqlite3.connect(db_path) as conn:
        cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
        conn.commit()
    return cursor.rowcount > 0


def fetch_record(db_path: Path, kind: EntityKind, record_id: str) -> Optional[CatalogRecord]:
    return _fetch_one(db_path, kind, "id", record_id)


def fetch_record_by_slug(db_path: Path, kind: EntityKind, slug: str) -> Optional[CatalogRecord]:
    return _fetch_one(db_path, kind, "slug", slug)


def list_records(db_path: Path, kind: EntityKind, *, limit: int = 100) -> List[CatalogRecord]:
    initialize(db_path)
    table, name_column = TABLES[kind]
    with sqlite3.connect(db_path) as conn:
        cursor = conn.execute(
            f"""
            SELECT id, {name_column}, slug, created_at, updated_at
            FROM {table}
            ORDER BY created_at, slug
            LIMIT ?
            """,
            (limit,),
        )
        return [_row_to_record(kind, row) for row in cursor.fetchall()]


def record_audit_event(db_path: Path, entity: str, action: str, detail: str | None = None) -> None:
    initialize(db_path)
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO audit_log(entity, action, detail, created_at) VALUES (?, ?, ?, ?)",
            (entity, action, detail, time.time()),
        )
        conn.commit()


def fetch_audit_events(
    db_path: Path,
    *,
    entity: str | None = None,
    limit: int = 100,
) -> List[AuditEvent]:
    initialize(db_path)
    clause = "WHERE entity = ?" if entity else ""
    params: List[object] = [entity] if entity else []
    params.append(limit)
    query = f"""
        SELECT entity, action, detail, created_at
        FROM audit_log
        {clause}
        ORDER BY id DESC
        LIMIT ?
    """
    with sqlite3.connect(db_path) as conn:
        cursor = conn.execute(query, params)
        return [
            AuditEvent(entity=row[0], action=row[1], detail=row[2], created_at=float(row[3]))
            for row in cursor.fetchall()
        ]


def _fetch_one(db_path: Path, kind: EntityKind, column: str, value: str) -> Optional[CatalogRecord]:
    initialize(db_path)
    table, name_column = TABLES[kind]
    with sqlite3.connect(db_path) as conn:
        row = conn.execute(
            f"SELECT id, {name_column}, slug, created_at, updated_at FROM {table} WHERE {column} = ?",
            (value,),
        ).fetchone()
    if not row:
        return None
    return _row_to_record(kind, row)


def _row_to_record(kind: EntityKind, row: tuple) -> CatalogRecord:
    return CatalogRecord(
        id=str(row[0]),
        kind=kind,
        name=str(row[1]),
        slug=str(row[2]),
        created_at=float(row[3] or 0.0),
        updated_at=float(row[4] or 0.0),
    )


def _apply_migrations(conn: sqlite3.Connection) -> None:
    conn.execute(SCHEMA_MIGRATIONS_TABLE)
    applied_versions = {
        row[0]
        for row in conn.execute("SELECT version FROM schema_migrations")
    }
    for version, statements in sorted(MIGRATIONS, key=lambda item: item[0]):
        if version in applied_versions:
            continue
        for statement in statements:
            conn.execute(statement)
        conn.execute(
            "INSERT INTO schema_migrations(version, applied_at) VALUES (?, ?)",
            (version, time.time()),
        )
        conn.commit()
