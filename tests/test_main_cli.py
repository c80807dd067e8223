from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import main
from main import _parse_args
from storefront.database import Database
from storefront.models import UserRole


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"
    assert args.in_memory is False


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "9000", "--in-memory"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 9000
    assert args.in_memory is True


def test_config_option_precedes_subcommand() -> None:
    args = _parse_args(["--config", "storefront.yaml", "list-users"])
    assert args.command == "list-users"
    assert args.config == Path("storefront.yaml")


def test_create_user_subcommand(tmp_path: Path, monkeypatch, capsys) -> None:
    db_path = tmp_path / "cli.sqlite3"
    monkeypatch.setenv("STOREFRONT_DB_PATH", str(db_path))
    monkeypatch.delenv("STOREFRONT_CONFIG", raising=False)
    monkeypatch.setattr(main, "getpass", lambda prompt="": "cli-password-1")
    monkeypatch.setattr(main, "configure_logging", lambda level="INFO": None)

    exit_code = main.main(["create-user", "cli@example.com", "--name", "CLI", "--role", "manager"])

    assert exit_code == 0
    assert "Created user cli@example.com (MANAGER)" in capsys.readouterr().out
    stored = Database(db_path).get_user_by_email("cli@example.com")
    assert stored is not None
    assert stored.role is UserRole.MANAGER
    assert stored.password != "cli-password-1"

    assert main.main(["create-user", "cli@example.com"]) == 1
    assert main.main(["create-user", "other@example.com", "--role", "emperor"]) == 1

    assert main.main(["list-users"]) == 0
    assert "cli@example.com" in capsys.readouterr().out


def test_create_user_rejects_padded_duplicate_email(tmp_path: Path, monkeypatch, capsys) -> None:
    db_path = tmp_path / "cli.sqlite3"
    monkeypatch.setenv("STOREFRONT_DB_PATH", str(db_path))
    monkeypatch.delenv("STOREFRONT_CONFIG", raising=False)
    monkeypatch.setattr(main, "getpass", lambda prompt="": "admin-password-1")
    monkeypatch.setattr(main, "configure_logging", lambda level="INFO": None)
    assert main.main(["create-user", "admin@example.com", "--role", "admin"]) == 0
    before = Database(db_path).get_user_by_email("admin@example.com")

    monkeypatch.setattr(main, "getpass", lambda prompt="": "other-password-2")
    exit_code = main.main(["create-user", " admin@example.com ", "--role", "user"])

    assert exit_code == 1
    assert "User already exists: admin@example.com" in capsys.readouterr().err
    after = Database(db_path).get_user_by_email("admin@example.com")
    assert after == before
    assert after.role is UserRole.ADMIN
