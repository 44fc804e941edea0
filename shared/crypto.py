"""
Password hashing helpers.

Uses argon2id (via argon2-cffi). The time cost is passed in by the caller so
the Credential Service can read it from configuration at call time.
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

DEFAULT_TIME_COST = 3


def hash_password(plain_password: str, time_cost: int = DEFAULT_TIME_COST) -> str:
    """Hash *plain_password* with argon2id.

    Args:
        plain_password: The password to hash.
        time_cost: argon2 iteration count; higher is slower.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return PasswordHasher(time_cost=time_cost).hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify *plain_password* against an argon2 *password_hash*.

    The parameters are read from the hash itself, so hashes produced with an
    older time cost keep verifying after the configuration changes.

    Returns:
        ``True`` if the password matches, ``False`` for any failure
        (wrong password, invalid hash, etc.).
    """
    try:
        return PasswordHasher().verify(password_hash, plain_password)
    except (VerificationError, InvalidHashError):
        return False
