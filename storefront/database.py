"""SQLite-backed persistence for stores and users."""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List, Optional

from .models import Store, User, UserRole


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the application database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "storefront.sqlite3").resolve(strict=False)


class Database:
    """Simple wrapper around SQLite implementing the data store interface."""

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS stores (
                    id TEXT PRIMARY KEY,
                    address TEXT,
                    description TEXT
                );

                CREATE TABLE IF NOT EXISTS users (
                    email TEXT PRIMARY KEY,
                    password TEXT NOT NULL,
                    name TEXT,
                    role TEXT NOT NULL DEFAULT 'USER'
                );
                """
            )

    # ------------------------------------------------------------------
    # Store management
    # ------------------------------------------------------------------
    def get_store_by_id(self, store_id: str) -> Optional[Store]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM stores WHERE id = ?", (store_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_store(row)

    def get_all_stores(self) -> List[Store]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM stores ORDER BY rowid").fetchall()
        return [self._row_to_store(row) for row in rows]

    def persist_store(self, store: Store) -> Store:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO stores (id, address, description) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    address = excluded.address,
                    description = excluded.description
                """,
                (store.id, store.address, store.description),
            )
        refreshed = self.get_store_by_id(store.id)
        if refreshed is None:
            raise RuntimeError("Failed to load store after saving")
        return refreshed

    def does_store_exist(self, store_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM stores WHERE id = ?", (store_id,)).fetchone()
        return row is not None

    def remove_store(self, store_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM stores WHERE id = ?", (store_id,))
            return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def get_all_users(self) -> List[User]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY rowid").fetchall()
        return [self._row_to_user(row) for row in rows]

    def persist_user(self, user: User) -> User:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO users (email, password, name, role) VALUES (?, ?, ?, ?)
                ON CONFLICT(email) DO UPDATE SET
                    password = excluded.password,
                    name = excluded.name,
                    role = excluded.role
                """,
                (user.email, user.password, user.name, user.role.value),
            )
        refreshed = self.get_user_by_email(user.email)
        if refreshed is None:
            raise RuntimeError("Failed to load user after saving")
        return refreshed

    def does_user_exist(self, email: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM users WHERE email = ?", (email,)).fetchone()
        return row is not None

    def remove_user(self, email: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM users WHERE email = ?", (email,))
            return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row_to_store(self, row: sqlite3.Row) -> Store:
        return Store(
            id=str(row["id"]),
            address=row["address"],
            description=row["description"],
        )

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            email=str(row["email"]),
            password=str(row["password"]),
            name=row["name"],
            role=UserRole(str(row["role"])),
        )


__all__ = ["Database", "resolve_database_path"]
