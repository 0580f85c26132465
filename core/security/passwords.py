"""
Password hashing with bcrypt.
"""

import bcrypt

from core.config import get_settings

# bcrypt ignores everything past 72 bytes; truncate explicitly so hashing
# and verification agree on the input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with the configured bcrypt cost (BCRYPT_ROUNDS)."""
    cost = rounds or get_settings().bcrypt_rounds
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=cost))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
