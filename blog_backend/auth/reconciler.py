"""Third-party login reconciliation.

A provider assertion (already verified upstream) is mapped onto the local
account with the same email, or a new account is created for it.

Photo precedence: a profile picture the user uploaded to platform storage is
never replaced by the provider's photo. Any other picture, or none, is
refreshed from the assertion on every login.

Two first-time logins racing on the same email both see "not found"; the
loser's insert hits the unique email index, re-reads the winner's row and
continues down the existing-account path. Generated usernames can also clash;
those are retried with a new suffix a bounded number of times.
"""
import logging
import secrets

from blog_backend.auth.jwt_handler import issue_session_token
from blog_backend.auth.password import generate_secret, hash_password
from blog_backend.core import config
from blog_backend.core.errors import DuplicateError, ValidationError
from blog_backend.models.user import User, utcnow
from blog_backend.repositories.user_repository import UniqueConstraintViolation, UserRepository

logger = logging.getLogger(__name__)

USERNAME_SUFFIX_DIGITS = 4
MAX_USERNAME_ATTEMPTS = 5


def has_custom_photo(profile_picture: str | None) -> bool:
    return bool(profile_picture) and config.PROFILE_STORAGE_URL_MARKER in profile_picture


def generate_username(display_name: str) -> str:
    base = "".join(display_name.lower().split())
    suffix = str(secrets.randbelow(10 ** USERNAME_SUFFIX_DIGITS)).zfill(USERNAME_SUFFIX_DIGITS)
    return f"{base}{suffix}"


def _update_existing(repo: UserRepository, user: User, photo_url: str | None) -> User:
    fields = {
        "auth_provider": config.THIRD_PARTY_PROVIDER,
        "updated_at": utcnow(),
    }
    if has_custom_photo(user.profile_picture):
        logger.debug("Keeping uploaded profile picture for user %s", user.id)
    else:
        fields["profile_picture"] = photo_url

    return repo.update(user.id, fields)


def _create_new(repo: UserRepository, email: str, display_name: str, photo_url: str | None) -> User:
    password = hash_password(generate_secret())

    for attempt in range(1, MAX_USERNAME_ATTEMPTS + 1):
        try:
            return repo.insert(
                username=generate_username(display_name),
                email=email,
                password=password,
                profile_picture=photo_url,
                auth_provider=config.THIRD_PARTY_PROVIDER,
                is_admin=False,
            )
        except UniqueConstraintViolation as exc:
            existing = repo.find_by_email(email)
            if existing is not None:
                logger.info("Concurrent third-party signup for %s, reconciling existing account", email)
                return _update_existing(repo, existing, photo_url)
            logger.info("Generated username collided (attempt %d): %s", attempt, exc)

    raise DuplicateError("Could not generate a unique username, please try again")


def reconcile_third_party_login(
    repo: UserRepository,
    email: str | None,
    display_name: str | None,
    photo_url: str | None,
) -> tuple[User, str]:
    """Resolve a provider login to a local user and issue its session token."""
    if not email:
        raise ValidationError()

    display_name = display_name or email.split("@", 1)[0]

    user = repo.find_by_email(email)
    if user is not None:
        user = _update_existing(repo, user, photo_url)
    else:
        user = _create_new(repo, email, display_name, photo_url)

    return user, issue_session_token(user)
