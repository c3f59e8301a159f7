"""Storage providers (SQLite)."""

from .sqlite_store import initialize as init_sqlite
from .sqlite_store import (
	SqliteSlugLookup,
	delete_record,
	fetch_audit_events,
	fetch_record,
	fetch_record_by_slug,
	insert_record,
	list_records,
	record_audit_event,
	slug_exists,
	update_record,
)

__all__ = [
	"init_sqlite",
	"SqliteSlugLookup",
	"slug_exists",
	"insert_record",
	"update_record",
	"delete_record",
	"fetch_record",
	"fetch_record_by_slug",
	"list_records",
	"record_audit_event",
	"fetch_audit_events",
]
