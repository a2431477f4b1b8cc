"""User credentials and password authentication."""

from __future__ import annotations

import hashlib
import hmac
import threading

_DEFAULT_ADMIN = "admin"


class AuthError(Exception):
    """Raised when authentication or user registration fails."""


def _digest(password: str) -> bytes:
    return hashlib.sha256(password.encode("utf-8")).digest()


class Credentials:
    """A username paired with the SHA-256 digest of its password."""

    __slots__ = ("username", "password_hash")

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password_hash = _digest(password)

    def verify(self, password: str) -> bool:
        """Return True if ``password`` hashes to the stored digest."""
        return hmac.compare_digest(self.password_hash, _digest(password))

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r})"


class AuthManager:
    """Registry of users, seeded with the built-in administrator account."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, Credentials] = {
            _DEFAULT_ADMIN: Credentials(_DEFAULT_ADMIN, _DEFAULT_ADMIN)
        }

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def authenticate(self, username: str, password: str) -> None:
        """Check a login; raise :class:`AuthError` if it is rejected."""
        creds = self._users.get(username)
        if creds is None:
            raise AuthError("User not found")
        if not creds.verify(password):
            raise AuthError("Invalid password")

    def add_user(self, username: str, password: str) -> None:
        """Register a new user; raise :class:`AuthError` if the name is taken."""
        with self._lock:
            if username in self._users:
                raise AuthError("User already exists")
            self._users[username] = Credentials(username, password)