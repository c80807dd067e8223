"""Password encryption helpers built on passlib."""
from __future__ import annotations

from typing import Optional

from passlib.context import CryptContext

_DEFAULT_SCHEMES = ["pbkdf2_sha256"]


class PasswordEncryption:
    """Produce storable password hashes and verify candidates against them."""

    def __init__(self, context: Optional[CryptContext] = None) -> None:
        self._context = context or CryptContext(schemes=_DEFAULT_SCHEMES, deprecated="auto")

    def encrypt(self, password: str) -> str:
        if not password:
            raise ValueError("Password must not be empty")
        return self._context.hash(password)

    def verify(self, password: str, encrypted: Optional[str]) -> bool:
        """Return ``True`` if ``password`` matches ``encrypted``; malformed hashes never match."""

        if not encrypted:
            return False
        try:
            return self._context.verify(password, encrypted)
        except (ValueError, TypeError):
            return False


__all__ = ["PasswordEncryption"]
