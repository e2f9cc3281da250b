"""
Default password hashing built on passlib's bcrypt context.
"""
from functools import lru_cache

from passlib.context import CryptContext


@lru_cache
def get_crypt_context(rounds: int) -> CryptContext:
    """
    Get a bcrypt context for the given cost factor.

    Args:
        rounds: bcrypt cost factor (log2 of the iteration count)

    Returns:
        Cached CryptContext for that cost factor
    """
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(plain_password: str, rounds: int = 10) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash
        rounds: bcrypt cost factor

    Returns:
        Hashed password string
    """
    return get_crypt_context(rounds).hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    The cost factor is read from the hash itself, so any cached context
    can verify it. A hash passlib does not recognise counts as a mismatch.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return get_crypt_context(10).verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False
