"""CLI shell over the slug generator and the catalogue store."""
from __future__ import annotations

import argparse
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Optional, Sequence

from common.config import load_runtime_config
from common.errors import BackendError
from common.models import CatalogRecord, EntityKind, RuntimeConfig
from core.catalog import CatalogService
from core.slugs import SlugResolver, generate_base_slug, generate_friendly_name
from storage import SqliteSlugLookup, fetch_audit_events, init_sqlite

KIND_CHOICES = [kind.value for kind in EntityKind]


def command_slug(args: argparse.Namespace) -> None:
    runtime = load_optional_runtime(args)
    if runtime is None:
        print(generate_base_slug(args.text))
        return
    print(
        generate_base_slug(
            args.text,
            fallback=partial(friendly_name_for, runtime),
            unknown=runtime.global_settings.unknown_marker,
        )
    )


def command_friendly(args: argparse.Namespace) -> None:
    runtime = load_optional_runtime(args)
    for _ in range(args.count):
        print(friendly_name_for(runtime))


def command_unique(args: argparse.Namespace) -> None:
    db_path = resolve_db_path(args)
    resolver = build_resolver(args, db_path)
    print(resolver.unique_slug(args.text, args.kind, exclude_id=args.exclude_id))


def command_create(args: argparse.Namespace) -> None:
    db_path = resolve_db_path(args)
    service = CatalogService(db_path, resolver=build_resolver(args, db_path))
    record = service.create(args.kind, args.name)
    print(f"[create] {format_record(record)}")


def command_rename(args: argparse.Namespace) -> None:
    db_path = resolve_db_path(args)
    service = CatalogService(db_path, resolver=build_resolver(args, db_path))
    record = service.rename(args.kind, args.id, args.name)
    print(f"[rename] {format_record(record)}")


def command_list(args: argparse.Namespace) -> None:
    db_path = resolve_db_path(args)
    records = CatalogService(db_path).list(args.kind, limit=args.limit)
    if not records:
        print(f"No {args.kind} records in {db_path}")
        return
    for record in records:
        print(format_record(record))


def command_audit(args: argparse.Namespace) -> None:
    db_path = resolve_db_path(args)
    for event in fetch_audit_events(db_path, entity=args.entity, limit=args.limit):
        stamp = datetime.fromtimestamp(event.created_at, tz=timezone.utc).isoformat(timespec="seconds")
        print(f"{stamp} {event.entity}/{event.action} {event.detail or ''}".rstrip())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Slug tools for the field recording catalogue")
    parser.add_argument(
        "--config",
        help="Path to runtime config JSON (default: config/defaults.json)",
    )
    parser.add_argument(
        "--profile",
        help="Config profile supplying the friendly-name vocabulary",
    )
    parser.add_argument(
        "--sqlite-db",
        help="SQLite catalogue file (default: global.database_path from config)",
    )
    subparsers = parser.add_subparsers(dest="command")

    slug = subparsers.add_parser("slug", help="Print the base slug for a title")
    slug.add_argument("text", help="Title or name to normalize")
    slug.set_defaults(func=command_slug)

    friendly = subparsers.add_parser("friendly", help="Print random friendly names")
    friendly.add_argument("--count", type=int, default=1, help="How many names to print")
    friendly.set_defaults(func=command_friendly)

    unique = subparsers.add_parser("unique", help="Resolve a slug unused in the catalogue")
    unique.add_argument("text", help="Title or name to normalize")
    unique.add_argument("--kind", choices=KIND_CHOICES, required=True, help="Slug namespace")
    unique.add_argument("--exclude-id", help="Record id to ignore (the record being renamed)")
    unique.set_defaults(func=command_unique)

    create = subparsers.add_parser("create", help="Create a record with a unique slug")
    create.add_argument("kind", choices=KIND_CHOICES)
    create.add_argument("name", help="Title (material) or name (tag/project)")
    create.set_defaults(func=command_create)

    rename = subparsers.add_parser("rename", help="Rename a record and re-resolve its slug")
    rename.add_argument("kind", choices=KIND_CHOICES)
    rename.add_argument("id", help="Record id")
    rename.add_argument("name", help="New title or name")
    rename.set_defaults(func=command_rename)

    listing = subparsers.add_parser("list", help="List records of one kind")
    listing.add_argument("kind", choices=KIND_CHOICES)
    listing.add_argument("--limit", type=int, default=100)
    listing.set_defaults(func=command_list)

    audit = subparsers.add_parser("audit", help="Show recent audit log entries")
    audit.add_argument("--entity", choices=KIND_CHOICES, help="Only show one kind")
    audit.add_argument("--limit", type=int, default=20)
    audit.set_defaults(func=command_audit)

    return parser


def load_optional_runtime(args: argparse.Namespace) -> Optional[RuntimeConfig]:
    if not args.profile and not args.config:
        return None
    return load_runtime(args)


def load_runtime(args: argparse.Namespace) -> RuntimeConfig:
    config_path = Path(args.config) if args.config else None
    if args.profile:
        return load_runtime_config(args.profile, config_path=config_path)
    return load_runtime_config(config_path=config_path)


def resolve_db_path(args: argparse.Namespace) -> Path:
    if args.sqlite_db:
        return Path(args.sqlite_db)
    return Path(load_runtime(args).global_settings.database_path)


def build_resolver(args: argparse.Namespace, db_path: Path) -> SlugResolver:
    runtime = load_optional_runtime(args)
    if runtime is None:
        return SlugResolver(SqliteSlugLookup(db_path))
    return SlugResolver(
        SqliteSlugLookup(db_path),
        profile=runtime.profile,
        unknown=runtime.global_settings.unknown_marker,
    )


def friendly_name_for(runtime: Optional[RuntimeConfig]) -> str:
    if runtime is None:
        return generate_friendly_name()
    profile = runtime.profile
    return generate_friendly_name(
        adjectives=profile.adjectives,
        nouns=profile.nouns,
        id_length=profile.id_length,
    )


def format_record(record: CatalogRecord) -> str:
    return f"{record.kind.value} id={record.id} slug={record.slug} name={record.name!r}"


def maybe_initialize_sqlite(sqlite_arg: str | None) -> None:
    if not sqlite_arg:
        return
    init_sqlite(Path(sqlite_arg))


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    try:
        maybe_initialize_sqlite(getattr(args, "sqlite_db", None))
        args.func(args)
    except BackendError as exc:
        print(f"[{exc.code.value}] {exc.args[0]}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
