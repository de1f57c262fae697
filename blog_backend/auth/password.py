"""Password hashing.

bcrypt embeds a fresh random salt and the cost factor in every digest, so the
same plaintext never hashes to the same string twice. Inputs are truncated to
72 bytes, bcrypt's limit.
"""
import secrets

import bcrypt

from blog_backend.core import config


def hash_password(password: str, rounds: int | None = None) -> str:
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or config.PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext against a stored digest.

    A mismatch returns False. A digest that is not a bcrypt hash raises
    ValueError, since that means the stored record is corrupt.
    """
    pw_bytes = password.encode("utf-8")[:72]
    return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))


def generate_secret() -> str:
    return secrets.token_urlsafe(24)
