"""User service operations."""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.db.interceptor import mark_modified
from bookshelf.models.user import User, UserCredential


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email).limit(1))


def get_user_by_id(db: Session, user_id: UUID) -> User | None:
    return db.get(User, user_id)


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.email.asc())).all())


def create_user(db: Session, email: str, hashed_password: str) -> User:
    user = User(id=uuid4(), email=email)
    user.credential = UserCredential(password_hash=hashed_password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user_email(db: Session, user: User, email: str) -> User:
    user.email = email
    mark_modified(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
