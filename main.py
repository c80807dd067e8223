"""Command-line interface for the storefront management service."""

from __future__ import annotations

import argparse
import logging
import sys
from getpass import getpass
from pathlib import Path
from typing import Sequence

from storefront.authentication import AuthenticationService
from storefront.config import Settings, load_settings
from storefront.database import Database
from storefront.models import parse_role
from storefront.repositories import UserRepository

logger = logging.getLogger("storefront.main")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_KNOWN_COMMANDS = {"serve", "init-db", "create-user", "list-users"}


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger unless one is already present."""

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Storefront management utilities")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file (default: STOREFRONT_CONFIG)",
    )
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the storefront database")
    subparsers.add_parser("list-users", help="List registered users")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the API")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port for the API (default: 8080)")
    serve_parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Keep all data in memory instead of the SQLite database",
    )

    create_parser = subparsers.add_parser("create-user", help="Register a new user")
    create_parser.add_argument("email", help="Unique email address for login")
    create_parser.add_argument("--name", default=None, help="Display name for the user")
    create_parser.add_argument("--role", default="USER", help="ADMIN, MANAGER or USER (default: USER)")

    args_list = list(argv) if argv is not None else sys.argv[1:]

    # Global options may precede the subcommand; default to "serve" when none is given.
    leading: list[str] = []
    rest = list(args_list)
    if rest[:1] == ["--config"] and len(rest) >= 2:
        leading, rest = rest[:2], rest[2:]

    if not rest:
        rest = ["serve"]
    elif rest[0] not in _KNOWN_COMMANDS and rest[0] not in ("-h", "--help"):
        if not any(flag in rest for flag in ("-h", "--help")):
            rest = ["serve", *rest]

    return parser.parse_args([*leading, *rest])


def _open_database(settings: Settings) -> Database:
    database = Database(settings.database_path)
    database.initialize()
    logger.info("Database initialised at %s", settings.database_path)
    return database


def _serve(settings: Settings, *, host: str, port: int, in_memory: bool) -> None:
    import uvicorn

    from storefront.api import create_app
    from storefront.datastore import InMemoryDataStore

    data_store = InMemoryDataStore() if in_memory else None
    app = create_app(data_store=data_store, settings=settings)
    logger.info("Starting storefront API on http://%s:%s%s", host, port, settings.api_prefix)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def _prompt_for_password() -> str | None:
    for _ in range(3):
        password = getpass("Password: ")
        if not password.strip():
            print("Password must not be empty.", file=sys.stderr)
            continue
        confirmation = getpass("Confirm password: ")
        if password != confirmation:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        return password
    return None


def _create_user(database: Database, email: str, name: str | None, role_text: str) -> int:
    email = email.strip()
    role = parse_role(role_text)
    if role is None:
        print(f"Invalid role: {role_text}", file=sys.stderr)
        return 1

    auth = AuthenticationService(UserRepository(database))
    if auth.user_exists(email):
        print(f"User already exists: {email}", file=sys.stderr)
        return 1

    password = _prompt_for_password()
    if password is None:
        print("Failed to set password after three attempts.", file=sys.stderr)
        return 1

    try:
        user = auth.register_user(email, password, name, role)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created user {user.email} ({user.role.value})")
    return 0


def _list_users(database: Database) -> int:
    users = database.get_all_users()
    if not users:
        print("No users are currently registered.")
        return 0

    print(f"{len(users)} user(s) found:")
    print(f"{'Email':<32}  {'Name':<24}  Role")
    print("-" * 68)
    for user in users:
        print(f"{user.email:<32}  {(user.name or '-'):<24}  {user.role.value}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings(args.config)
    configure_logging(settings.log_level)

    if args.command == "serve":
        _serve(settings, host=args.host, port=args.port, in_memory=args.in_memory)
        return 0

    database = _open_database(settings)
    if args.command == "init-db":
        return 0
    if args.command == "create-user":
        return _create_user(database, args.email, args.name, args.role)
    if args.command == "list-users":
        return _list_users(database)

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
