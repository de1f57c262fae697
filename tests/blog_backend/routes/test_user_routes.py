from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from blog_backend.auth.jwt_handler import AuthContext, create_access_token
from blog_backend.auth.password import verify_password
from blog_backend.models.user import User
from blog_backend.routes.user_routes import (
    delete_user,
    get_user,
    get_users,
    one_month_before,
    update_user,
    validate_username,
)
from blog_backend.schemas.user import UpdateUserRequest


def test_update_user_rejects_other_users(user_db, make_user) -> None:
    owner = make_user()

    with pytest.raises(HTTPException) as exception_info:
        update_user(
            user_id=owner.id,
            data=UpdateUserRequest(username='otherguy1'),
            current_user=AuthContext(user_id='someone-else', is_admin=True),
            db=user_db,
        )

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'You are not allowed to update this user'


def test_update_user_rejects_password_change_for_google_account(user_db, make_user) -> None:
    owner = make_user(auth_provider='google')

    with pytest.raises(HTTPException) as exception_info:
        update_user(
            user_id=owner.id,
            data=UpdateUserRequest(password='newsecret'),
            current_user=AuthContext(user_id=owner.id),
            db=user_db,
        )

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Cannot update password for Google accounts'


def test_update_user_changes_password_for_local_account(user_db, make_user) -> None:
    owner = make_user()

    view = update_user(
        user_id=owner.id,
        data=UpdateUserRequest(password='newsecret', profilePicture='https://cdn.example.com/me.png'),
        current_user=AuthContext(user_id=owner.id),
        db=user_db,
    )

    stored = user_db.query(User).filter(User.id == owner.id).first()
    assert verify_password('newsecret', stored.password)
    assert view['profilePicture'] == 'https://cdn.example.com/me.png'
    assert 'password' not in view


def test_update_user_rejects_short_password(user_db, make_user) -> None:
    owner = make_user()

    with pytest.raises(HTTPException) as exception_info:
        update_user(
            user_id=owner.id,
            data=UpdateUserRequest(password='abc'),
            current_user=AuthContext(user_id=owner.id),
            db=user_db,
        )

    assert exception_info.value.detail == 'Password must be at least 6 characters'


def test_update_user_rejects_taken_username(user_db, make_user) -> None:
    owner = make_user()
    make_user(username='takenname', email='b@x.com')

    with pytest.raises(HTTPException) as exception_info:
        update_user(
            user_id=owner.id,
            data=UpdateUserRequest(username='takenname'),
            current_user=AuthContext(user_id=owner.id),
            db=user_db,
        )

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Username or email already exists'


@pytest.mark.parametrize(
    ('username', 'error_detail'),
    [
        ('short', 'Username must be between 7 and 20 characters'),
        ('a' * 21, 'Username must be between 7 and 20 characters'),
        ('has space', 'Username cannot contain spaces'),
        ('UpperCase1', 'Username must be lowercase'),
        ('under_score', 'Username can only contain letters and numbers'),
    ],
)
def test_validate_username_rejects_invalid_names(username: str, error_detail: str) -> None:
    with pytest.raises(HTTPException) as exception_info:
        validate_username(username)

    assert exception_info.value.detail == error_detail


def test_delete_user_allows_admin(user_db, make_user) -> None:
    target = make_user()

    result = delete_user(user_id=target.id, current_user=AuthContext(user_id='admin', is_admin=True), db=user_db)

    assert result == 'User has been deleted'
    assert user_db.query(User).count() == 0


def test_delete_user_denies_non_owner(user_db, make_user) -> None:
    target = make_user()

    with pytest.raises(HTTPException) as exception_info:
        delete_user(user_id=target.id, current_user=AuthContext(user_id='someone-else'), db=user_db)

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'You are not allowed to delete this user'


def test_delete_user_missing_returns_not_found(user_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        delete_user(user_id='missing', current_user=AuthContext(user_id='missing'), db=user_db)

    assert exception_info.value.status_code == 404


def test_get_users_requires_admin(user_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_users(start_index=0, limit=9, sort='desc', current_user=AuthContext(user_id='user'), db=user_db)

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'You are not allowed to see all users'


def test_get_users_paginates_and_counts(user_db, make_user) -> None:
    old = datetime.now(timezone.utc) - timedelta(days=90)
    make_user(username='olduser1', email='old@x.com', created_at=old)
    make_user(username='newuser1', email='new@x.com')
    make_user(username='newuser2', email='new2@x.com')

    result = get_users(
        start_index=0,
        limit=2,
        sort='asc',
        current_user=AuthContext(user_id='admin', is_admin=True),
        db=user_db,
    )

    assert [user['username'] for user in result['users']] == ['olduser1', 'newuser1']
    assert result['totalUsers'] == 3
    assert result['lastMonthUsers'] == 2
    assert all('password' not in user for user in result['users'])


def test_get_user_returns_legacy_view(user_db, make_user) -> None:
    target = make_user()

    view = get_user(user_id=target.id, db=user_db)

    assert view['_id'] == target.id
    assert view['email'] == 'a@x.com'
    assert 'password' not in view


def test_get_user_missing_returns_not_found(user_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_user(user_id='missing', db=user_db)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'User not found'


@pytest.mark.parametrize(
    ('now', 'expected'),
    [
        (datetime(2026, 3, 15, 10, 30), datetime(2026, 2, 15)),
        (datetime(2026, 3, 31, 10, 30), datetime(2026, 2, 28)),
        (datetime(2026, 1, 10, 8, 0), datetime(2025, 12, 10)),
    ],
)
def test_one_month_before_clamps_to_month_end(now: datetime, expected: datetime) -> None:
    assert one_month_before(now) == expected


def test_protected_routes_require_session(client) -> None:
    response = client.get('/api/user/getusers')

    assert response.status_code == 401
    assert response.json() == {'success': False, 'message': 'Unauthorized', 'statusCode': 401}


def test_admin_cookie_lists_users(client, make_user) -> None:
    make_user()
    client.cookies.set('access_token', create_access_token('admin-id', is_admin=True))

    response = client.get('/api/user/getusers', params={'startIndex': 0, 'limit': 5})

    assert response.status_code == 200
    assert response.json()['totalUsers'] == 1


def test_signout_clears_cookie(client) -> None:
    response = client.post('/api/user/signout')

    assert response.status_code == 200
    assert response.json() == 'User has been signed out'
    assert 'Max-Age=0' in response.headers['set-cookie']
