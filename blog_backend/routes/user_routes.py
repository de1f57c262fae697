import calendar
import logging
import re
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_backend.auth.cookies import clear_session_cookie
from blog_backend.auth.dependencies import get_current_user, require_admin, require_owner, require_owner_or_admin
from blog_backend.auth.jwt_handler import AuthContext
from blog_backend.auth.password import hash_password
from blog_backend.core import config
from blog_backend.core.errors import (
    DuplicateError,
    InternalError,
    NotFoundError,
    ProviderPasswordChangeError,
    ValidationError,
)
from blog_backend.database import get_db
from blog_backend.models.user import utcnow
from blog_backend.repositories.user_repository import UniqueConstraintViolation, UserRepository
from blog_backend.schemas.user import UpdateUserRequest, to_legacy_view

router = APIRouter(tags=['user'])

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 7
MAX_USERNAME_LENGTH = 20
DEFAULT_PAGE_SIZE = 9
USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9]+$')


def validate_username(username: str) -> str:
    if len(username) < MIN_USERNAME_LENGTH or len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(
            f'Username must be between {MIN_USERNAME_LENGTH} and {MAX_USERNAME_LENGTH} characters'
        )
    if ' ' in username:
        raise ValidationError('Username cannot contain spaces')
    if username != username.lower():
        raise ValidationError('Username must be lowercase')
    if not USERNAME_PATTERN.match(username):
        raise ValidationError('Username can only contain letters and numbers')
    return username


def validate_new_password(password: str, auth_provider: str | None) -> str:
    if auth_provider == config.THIRD_PARTY_PROVIDER:
        raise ProviderPasswordChangeError()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    return hash_password(password)


def one_month_before(now: datetime) -> datetime:
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day, hour=0, minute=0, second=0, microsecond=0)


@router.get('/test')
def test():
    return {'message': 'API is working!'}


@router.put('/update/{user_id}')
def update_user(
    user_id: str,
    data: UpdateUserRequest,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    require_owner(current_user, user_id, 'You are not allowed to update this user')

    repo = UserRepository(db)
    try:
        user = repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError()

        updates = {}
        if data.password:
            updates['password'] = validate_new_password(data.password, user.auth_provider)
        if data.username:
            updates['username'] = validate_username(data.username)
        if data.email:
            updates['email'] = data.email
        if data.profile_picture:
            updates['profile_picture'] = data.profile_picture
        updates['updated_at'] = utcnow()

        updated = repo.update(user_id, updates)
    except UniqueConstraintViolation as exc:
        raise DuplicateError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError() from exc

    return to_legacy_view(updated)


@router.delete('/delete/{user_id}')
def delete_user(
    user_id: str,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    require_owner_or_admin(current_user, user_id, 'You are not allowed to delete this user')

    try:
        UserRepository(db).delete(user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError() from exc

    logger.info('User %s deleted by %s', user_id, current_user.user_id)
    return 'User has been deleted'


@router.post('/signout')
def signout():
    response = JSONResponse(content='User has been signed out')
    return clear_session_cookie(response)


@router.get('/getusers')
def get_users(
    start_index: int = Query(default=0, alias='startIndex', ge=0),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    sort: str = Query(default='desc'),
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    require_admin(current_user, 'You are not allowed to see all users')

    sort_direction = 'asc' if sort == 'asc' else 'desc'
    repo = UserRepository(db)
    try:
        users = repo.list_users(start_index=start_index, limit=limit, sort=sort_direction)
        total_users = repo.count()
        last_month_users = repo.count(created_since=one_month_before(utcnow()))
    except SQLAlchemyError as exc:
        raise InternalError() from exc

    return {
        'users': [to_legacy_view(user) for user in users],
        'totalUsers': total_users,
        'lastMonthUsers': last_month_users,
    }


@router.get('/{user_id}')
def get_user(user_id: str, db: Session = Depends(get_db)):
    try:
        user = UserRepository(db).find_by_id(user_id)
    except SQLAlchemyError as exc:
        raise InternalError() from exc

    if user is None:
        raise NotFoundError()
    return to_legacy_view(user)
