import logging

from blog_backend.auth.jwt_handler import issue_session_token
from blog_backend.auth.password import hash_password, verify_password
from blog_backend.core import config
from blog_backend.core.errors import DuplicateError, InvalidCredentialsError, NotFoundError, ValidationError
from blog_backend.models.user import User
from blog_backend.repositories.user_repository import UniqueConstraintViolation, UserRepository

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or value == ""


def signup(repo: UserRepository, username: str | None, email: str | None, password: str | None) -> User:
    """Create a local account. Raises DuplicateError on a username or email clash."""
    if _is_blank(username) or _is_blank(email) or _is_blank(password):
        raise ValidationError()

    try:
        return repo.insert(
            username=username,
            email=email,
            password=hash_password(password),
            auth_provider=config.LOCAL_PROVIDER,
            is_admin=False,
        )
    except UniqueConstraintViolation as exc:
        logger.info("Signup rejected for duplicate username or email: %s", exc)
        raise DuplicateError() from exc


def signin(repo: UserRepository, email: str | None, password: str | None) -> tuple[User, str]:
    """Check credentials and return the user with a freshly issued session token."""
    if _is_blank(email) or _is_blank(password):
        raise ValidationError()

    user = repo.find_by_email(email)
    if user is None:
        raise NotFoundError()

    if not verify_password(password, user.password):
        raise InvalidCredentialsError()

    return user, issue_session_token(user)
