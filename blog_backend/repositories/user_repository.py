from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blog_backend.core.errors import NotFoundError
from blog_backend.models.user import User


class UniqueConstraintViolation(Exception):
    """Raised when a write collides with the unique username or email index."""


class UserRepository:
    """Keyed reads and writes against the users table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == str(user_id)).first()

    def insert(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise UniqueConstraintViolation(str(exc.orig)) from exc
        self.db.refresh(user)
        return user

    def update(self, user_id: str, fields: dict) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError()

        for name, value in fields.items():
            setattr(user, name, value)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise UniqueConstraintViolation(str(exc.orig)) from exc
        self.db.refresh(user)
        return user

    def delete(self, user_id: str) -> None:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError()

        self.db.delete(user)
        self.db.commit()

    def list_users(self, start_index: int = 0, limit: int = 9, sort: str = "desc") -> list[User]:
        order = User.created_at.asc() if sort == "asc" else User.created_at.desc()
        return self.db.query(User).order_by(order).offset(start_index).limit(limit).all()

    def count(self, created_since: datetime | None = None) -> int:
        query = self.db.query(User)
        if created_since is not None:
            query = query.filter(User.created_at >= created_since)
        return query.count()
