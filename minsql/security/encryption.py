"""Key-derived byte masking for data at rest and password hashing."""

from __future__ import annotations

import hashlib
import hmac
from itertools import cycle


def _xor(data: bytes, key: bytes) -> bytes:
    if not data:
        return b""
    if not key:
        raise ValueError("encryption key must not be empty")
    return bytes(b ^ k for b, k in zip(data, cycle(key)))


class EncryptionManager:
    """Masks data with a master key, or with a key derived per column."""

    def __init__(self, master_key: bytes) -> None:
        self.master_key = bytes(master_key)

    def encrypt_at_rest(self, data: bytes) -> bytes:
        return _xor(bytes(data), self.master_key)

    def decrypt_at_rest(self, encrypted: bytes) -> bytes:
        return self.encrypt_at_rest(encrypted)

    def _column_key(self, column_name: str) -> bytes:
        return hashlib.sha256(column_name.encode("utf-8") + self.master_key).digest()

    def encrypt_column(self, column_name: str, data: bytes) -> bytes:
        return _xor(bytes(data), self._column_key(column_name))

    def decrypt_column(self, column_name: str, encrypted: bytes) -> bytes:
        return self.encrypt_column(column_name, encrypted)

    def hash_password(self, password: str) -> bytes:
        """SHA-256 of the password followed by the master key."""
        return hashlib.sha256(password.encode("utf-8") + self.master_key).digest()

    def verify_password(self, password: str, hash: bytes) -> bool:
        return hmac.compare_digest(self.hash_password(password), bytes(hash))