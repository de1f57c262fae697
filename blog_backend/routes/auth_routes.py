from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_backend.auth import local, reconciler
from blog_backend.auth.cookies import set_session_cookie
from blog_backend.core.errors import InternalError
from blog_backend.database import get_db
from blog_backend.repositories.user_repository import UserRepository
from blog_backend.schemas.user import SigninRequest, SignupRequest, ThirdPartyLoginRequest, to_legacy_view

router = APIRouter(tags=['auth'])


def session_response(user, token: str) -> JSONResponse:
    response = JSONResponse(content=to_legacy_view(user))
    return set_session_cookie(response, token)


@router.post('/signup')
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    try:
        local.signup(UserRepository(db), data.username, data.email, data.password)
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError() from exc

    return 'Signup successful'


@router.post('/signin')
def signin(data: SigninRequest, db: Session = Depends(get_db)):
    try:
        user, token = local.signin(UserRepository(db), data.email, data.password)
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError() from exc

    return session_response(user, token)


@router.post('/google')
def google(data: ThirdPartyLoginRequest, db: Session = Depends(get_db)):
    try:
        user, token = reconciler.reconcile_third_party_login(
            UserRepository(db),
            email=data.email,
            display_name=data.name,
            photo_url=data.photo_url,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError() from exc

    return session_response(user, token)
