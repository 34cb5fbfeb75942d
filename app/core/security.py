"""
Password hashing (passlib).

Digests are unsalted SHA-256 (``hex_sha256``): the same plaintext always
produces the same digest, and verification is digest equality.
"""

from __future__ import annotations

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["hex_sha256"])

PASSWORD_MIN_LENGTH = 6


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # Malformed or foreign digest
        return False


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


class PasswordHasher:
    """Hasher handed to the identity service."""

    def hash(self, plaintext: str) -> str:
        return get_password_hash(plaintext)

    def verify(self, digest: str, plaintext: str) -> bool:
        return verify_password(plaintext, digest)
