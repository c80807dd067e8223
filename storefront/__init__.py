"""Core package for the storefront management service."""

from __future__ import annotations

from typing import Any

from .database import Database, resolve_database_path
from .datastore import DataStore, InMemoryDataStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the store and user API application."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "DataStore",
    "Database",
    "InMemoryDataStore",
    "create_app",
    "resolve_database_path",
]
