from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from blog_backend.core import config


class TokenError(Exception):
    """Raised when a session token cannot be verified."""


@dataclass(frozen=True)
class AuthContext:
    """Claims carried by a verified session token."""
    user_id: str
    is_admin: bool = False


def create_access_token(user_id: str, is_admin: bool = False, expires_minutes: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {"id": str(user_id), "isAdmin": bool(is_admin), "iat": now}
    expire_minutes = config.JWT_EXPIRES_MINUTES if expires_minutes is None else expires_minutes
    if expire_minutes > 0:
        payload["exp"] = now + timedelta(minutes=expire_minutes)
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}") from exc


def verify_access_token(token: str) -> AuthContext:
    payload = decode_access_token(token)
    user_id = payload.get("id")
    if not user_id:
        raise TokenError("Invalid token subject")
    return AuthContext(user_id=str(user_id), is_admin=bool(payload.get("isAdmin", False)))


def issue_session_token(user) -> str:
    return create_access_token(user.id, user.is_admin)
