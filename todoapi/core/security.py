"""Password hashing and verification."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError


def _get_password_hasher() -> PasswordHash:
    """Get or create the password hasher instance (Argon2 with pwdlib's recommended settings)."""
    if not hasattr(_get_password_hasher, "cached_instance"):
        _get_password_hasher.cached_instance = PasswordHash.recommended()
    return _get_password_hasher.cached_instance


def hash_password(password: str) -> str:
    """Hash a plain-text password using Argon2.

    Each call uses a fresh random salt, so hashing the same password twice gives
    two different strings.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string that can be safely stored in a database
    """
    return _get_password_hasher().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Unrecognised hashes never verify."""
    try:
        return _get_password_hasher().verify(plain_password, hashed_password)
    except UnknownHashError:
        return False


__all__ = [
    "hash_password",
    "verify_password",
]
