"""Configuration management for the storefront service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import yaml

from .database import resolve_database_path
from .models import UserRole, parse_role

DEFAULT_API_PREFIX = "/api/v1"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class SeedUser:
    """An account registered at start-up when no user with that email exists."""

    email: str
    password: str
    name: Optional[str] = None
    role: UserRole = UserRole.USER

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "SeedUser":
        missing = {"email", "password"} - data.keys()
        if missing:
            raise ValueError(f"Missing required seed user fields: {', '.join(sorted(missing))}")

        role_text = data.get("role")
        role = UserRole.USER
        if role_text is not None:
            parsed = parse_role(str(role_text))
            if parsed is None:
                raise ValueError(f"Invalid seed user role: {role_text}")
            role = parsed

        return SeedUser(
            email=str(data["email"]),
            password=str(data["password"]),
            name=str(data["name"]) if data.get("name") is not None else None,
            role=role,
        )


@dataclass(frozen=True)
class Settings:
    database_path: Path
    api_prefix: str = DEFAULT_API_PREFIX
    log_level: str = DEFAULT_LOG_LEVEL
    seed_users: Tuple[SeedUser, ...] = field(default_factory=tuple)


def _normalize_prefix(value: str) -> str:
    stripped = value.strip().rstrip("/")
    if not stripped:
        return ""
    return stripped if stripped.startswith("/") else f"/{stripped}"


def _read_config_file(config_path: Path) -> Dict[str, object]:
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")
    return raw


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build :class:`Settings` from an optional YAML file and environment overrides.

    The file location defaults to ``STOREFRONT_CONFIG``. ``STOREFRONT_DB_PATH``,
    ``STOREFRONT_API_PREFIX`` and ``STOREFRONT_LOG_LEVEL`` take precedence over
    values read from the file.
    """

    env = os.environ if environ is None else environ
    if config_path is None and env.get("STOREFRONT_CONFIG"):
        config_path = Path(env["STOREFRONT_CONFIG"]).expanduser()

    raw: Dict[str, object] = {}
    config_dir: Optional[Path] = None
    if config_path is not None:
        raw = _read_config_file(config_path)
        config_dir = config_path.resolve(strict=False).parent

    db_value = env.get("STOREFRONT_DB_PATH") or raw.get("database_path")
    if db_value is not None and config_dir is not None and not env.get("STOREFRONT_DB_PATH"):
        candidate = Path(str(db_value)).expanduser()
        if not candidate.is_absolute():
            db_value = str(config_dir / candidate)
    database_path = resolve_database_path(str(db_value) if db_value else None)

    api_prefix = env.get("STOREFRONT_API_PREFIX")
    if api_prefix is None:
        api_prefix = str(raw.get("api_prefix", DEFAULT_API_PREFIX))

    log_level = env.get("STOREFRONT_LOG_LEVEL") or str(raw.get("log_level", DEFAULT_LOG_LEVEL))

    seeds_raw = raw.get("seed_users") or []
    if not isinstance(seeds_raw, list):
        raise ValueError("seed_users must be a list of user mappings")
    seed_users: List[SeedUser] = []
    for item in seeds_raw:
        if not isinstance(item, dict):
            raise ValueError("seed_users entries must be mappings")
        seed_users.append(SeedUser.from_dict(item))

    return Settings(
        database_path=database_path,
        api_prefix=_normalize_prefix(api_prefix),
        log_level=log_level.upper(),
        seed_users=tuple(seed_users),
    )


__all__ = ["DEFAULT_API_PREFIX", "SeedUser", "Settings", "load_settings"]
