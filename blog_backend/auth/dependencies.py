from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blog_backend.auth import jwt_handler
from blog_backend.auth.jwt_handler import AuthContext
from blog_backend.core import config
from blog_backend.core.errors import ForbiddenError, UnauthenticatedError

security = HTTPBearer(auto_error=False)


def extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None = None) -> str | None:
    token = request.cookies.get(config.ACCESS_TOKEN_COOKIE_NAME)
    if token:
        return token
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return None


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthContext:
    token = extract_token(request, credentials)
    if not token:
        raise UnauthenticatedError()
    try:
        context = jwt_handler.verify_access_token(token)
    except jwt_handler.TokenError as exc:
        raise UnauthenticatedError() from exc

    request.state.user = context
    return context


def require_owner(context: AuthContext, owner_id: str, message: str | None = None) -> None:
    if context.user_id != str(owner_id):
        raise ForbiddenError(message)


def require_owner_or_admin(context: AuthContext, owner_id: str, message: str | None = None) -> None:
    if context.is_admin or context.user_id == str(owner_id):
        return
    raise ForbiddenError(message)


def require_admin(context: AuthContext, message: str | None = None) -> None:
    if not context.is_admin:
        raise ForbiddenError(message)
