"""Request models and the response view for user records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class SigninRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ThirdPartyLoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    name: str | None = None
    photo_url: str | None = Field(default=None, alias="googlePhotoUrl")


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    email: str | None = None
    password: str | None = None
    profile_picture: str | None = Field(default=None, alias="profilePicture")


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def to_legacy_view(user) -> dict:
    """Serialize a user without its password hash.

    The camel-cased keys duplicate canonical fields for clients written
    against the previous schema.
    """
    created_at = _isoformat(user.created_at)
    updated_at = _isoformat(user.updated_at)
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "profile_picture": user.profile_picture,
        "auth_provider": user.auth_provider,
        "is_admin": bool(user.is_admin),
        "created_at": created_at,
        "updated_at": updated_at,
        "_id": user.id,
        "isAdmin": bool(user.is_admin),
        "profilePicture": user.profile_picture,
        "authProvider": user.auth_provider,
        "createdAt": created_at,
        "updatedAt": updated_at,
    }
