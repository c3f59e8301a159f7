from __future__ import annotations

import re
from pathlib import Path

from ui import cli


def test_cli_main_initializes_sqlite(monkeypatch, tmp_path):
    db_path = tmp_path / "cli.db"
    init_calls: list[Path] = []

    def fake_init_sqlite(path: Path) -> None:
        init_calls.append(path)

    monkeypatch.setattr(cli, "init_sqlite", fake_init_sqlite)

    invoked: dict[str, str | None] = {}

    def fake_command(args) -> None:
        invoked["sqlite_db"] = args.sqlite_db

    monkeypatch.setattr(cli, "command_list", fake_command)
    assert cli.main(["--sqlite-db", str(db_path), "list", "tag"]) == 0

    assert init_calls == [db_path]
    assert invoked["sqlite_db"] == str(db_path)


def test_slug_command_prints_base_slug(capsys):
    assert cli.main(["slug", "Morning in 東京"]) == 0
    assert capsys.readouterr().out.strip() == "morning-in-dong-jing"


def test_friendly_command_prints_requested_count(capsys):
    assert cli.main(["friendly", "--count", "3"]) == 0
    lines = capsys.readouterr().out.split()
    assert len(lines) == 3
    assert all(re.match(r"^[a-z]+-[a-z]+-[a-z0-9]{4}$", line) for line in lines)


def test_create_then_unique_reports_next_suffix(tmp_path, capsys):
    db = str(tmp_path / "catalog.db")
    assert cli.main(["--sqlite-db", db, "create", "material", "Test Material"]) == 0
    assert "slug=test-material " in capsys.readouterr().out

    assert cli.main(["--sqlite-db", db, "unique", "Test Material", "--kind", "material"]) == 0
    assert capsys.readouterr().out.strip() == "test-material-1"

    assert cli.main(["--sqlite-db", db, "unique", "Test Material", "--kind", "tag"]) == 0
    assert capsys.readouterr().out.strip() == "test-material"


def test_backend_errors_become_exit_code(tmp_path, capsys):
    db = str(tmp_path / "catalog.db")
    assert cli.main(["--sqlite-db", db, "rename", "tag", "missing-id", "Wind"]) == 1
    assert capsys.readouterr().out.startswith("[NOT_FOUND]")


def test_profile_vocabulary_used_for_friendly_names(capsys):
    assert cli.main(["--profile", "field", "friendly", "--count", "5"]) == 0
    adjectives = {line.split("-")[0] for line in capsys.readouterr().out.split()}
    assert adjectives <= {"distant", "misty", "quiet", "windy", "early"}


def test_unknown_profile_reports_config_error(capsys):
    assert cli.main(["--profile", "nope", "slug", "x"]) == 1
    assert capsys.readouterr().out.startswith("[CONFIG_ERROR]")
