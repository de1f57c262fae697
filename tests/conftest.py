import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('PASSWORD_HASH_ROUNDS', '4')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from blog_backend.auth.password import hash_password  # noqa: E402
from blog_backend.database import Base, get_db  # noqa: E402
from blog_backend.main import app  # noqa: E402
from blog_backend.models.user import User  # noqa: E402
from blog_backend.repositories.user_repository import UserRepository  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[User.__table__])
        engine.dispose()


@pytest.fixture
def user_db(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repo(user_db) -> UserRepository:
    return UserRepository(user_db)


@pytest.fixture
def make_user(repo):
    def _make_user(
        username: str = 'alice99',
        email: str = 'a@x.com',
        password: str = 'secret1',
        **fields,
    ) -> User:
        return repo.insert(username=username, email=email, password=hash_password(password), **fields)

    return _make_user


@pytest.fixture
def client(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
