"""User authentication and account management."""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import replace
from typing import List, Optional

from .models import User, UserRole
from .passwords import PasswordEncryption
from .repositories import UserRepository

logger = logging.getLogger("storefront.authentication")

_BASIC_PREFIX = "Basic "


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AuthenticationService:
    """Authenticate HTTP Basic credentials and manage stored user accounts.

    Passwords are encrypted with :class:`PasswordEncryption` before they reach
    the repository, and verification always compares against the stored
    encrypted value.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_encryption: Optional[PasswordEncryption] = None,
    ) -> None:
        self._users = user_repository
        self._passwords = password_encryption or PasswordEncryption()

    def authenticate_basic(self, auth_header: Optional[str]) -> Optional[User]:
        """Return the user identified by a ``Basic base64(email:password)`` header.

        Every failure (missing or malformed header, unknown email, wrong
        password) yields ``None`` rather than an exception.
        """

        if auth_header is None or not auth_header.startswith(_BASIC_PREFIX):
            return None

        encoded = auth_header[len(_BASIC_PREFIX):].strip()
        # unpadded credentials are accepted
        encoded += "=" * (-len(encoded) % 4)
        try:
            credentials = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, ValueError):
            logger.debug("Rejected Basic credentials that could not be decoded")
            return None

        parts = credentials.split(":", 1)
        if len(parts) != 2:
            logger.debug("Rejected Basic credentials without an email/password separator")
            return None

        email, password = parts
        if not email:
            return None

        user = self._users.find_by_email(email)
        if user is None:
            logger.debug("Basic authentication failed for unknown user %s", email)
            return None

        if not self._passwords.verify(password, user.password):
            logger.info("Basic authentication failed for %s", email)
            return None
        return user

    def register_user(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> User:
        if _is_blank(email) or _is_blank(password):
            raise ValueError("Email and password are required")

        user = User(
            email=email,
            password=self._passwords.encrypt(password),
            name=name,
            role=role or UserRole.USER,
        )
        saved = self._users.save(user)
        logger.info("Registered user %s with role %s", saved.email, saved.role.value)
        return saved

    def user_exists(self, email: Optional[str]) -> bool:
        if _is_blank(email):
            return False
        return self._users.exists_by_email(email)

    def get_all_users(self) -> List[User]:
        return list(self._users.find_all())

    def get_user_by_email(self, email: Optional[str]) -> Optional[User]:
        if _is_blank(email):
            return None
        return self._users.find_by_email(email)

    def update_user(
        self,
        email: Optional[str],
        password: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[User]:
        """Replace the password and/or name of an existing user.

        Returns ``None`` when no user matches ``email``. Blank fields are left
        untouched, so calling with neither field still persists and returns
        the current record.
        """

        if _is_blank(email):
            return None

        user = self._users.find_by_email(email)
        if user is None:
            return None

        if not _is_blank(password):
            user = replace(user, password=self._passwords.encrypt(password))
        if not _is_blank(name):
            user = replace(user, name=name)

        return self._users.save(user)

    def delete_user(self, email: Optional[str]) -> bool:
        if _is_blank(email):
            return False
        deleted = self._users.delete_by_email(email)
        if deleted:
            logger.info("Deleted user %s", email)
        return deleted


__all__ = ["AuthenticationService"]
