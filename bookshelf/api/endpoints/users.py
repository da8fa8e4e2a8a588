"""User endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from bookshelf.core.security import get_password_hash
from bookshelf.db.session import get_db
from bookshelf.models.user import User
from bookshelf.schemas.user import UserCreate, UserEntity, UserRead, UserUpdate
from bookshelf.services.user_service import (
    create_user,
    delete_user,
    get_user_by_email,
    get_user_by_id,
    list_users,
    update_user_email,
)

router: APIRouter = APIRouter()


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user: User | None = get_user_by_id(db=db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with ID {user_id} not found.")
    return user


def _require_unused_email(db: Session, email: str, owner: User | None = None) -> None:
    existing: User | None = get_user_by_email(db=db, email=email)
    if existing is not None and existing is not owner:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")


@router.get("", response_model=list[UserRead])
def get_users(db: Session = Depends(get_db)) -> list[UserRead]:
    return [UserRead.model_validate(user) for user in list_users(db)]


@router.get("/entities", response_model=list[UserEntity])
def get_user_entities(db: Session = Depends(get_db)) -> list[UserEntity]:
    """Return users as full rows, including audit metadata."""
    return [UserEntity.model_validate(user) for user in list_users(db)]


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: UUID, db: Session = Depends(get_db)) -> UserRead:
    return UserRead.model_validate(_get_user_or_404(db, user_id))


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def post_user(payload: UserCreate, response: Response, db: Session = Depends(get_db)) -> UserRead:
    _require_unused_email(db, payload.email)
    user = create_user(db=db, email=payload.email, hashed_password=get_password_hash(payload.password))
    response.headers["Location"] = f"/api/users/{user.id}"
    return UserRead.model_validate(user)


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def put_user(user_id: UUID, payload: UserUpdate, db: Session = Depends(get_db)) -> Response:
    user = _get_user_or_404(db, user_id)
    _require_unused_email(db, payload.email, owner=user)
    update_user_email(db=db, user=user, email=payload.email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(user_id: UUID, db: Session = Depends(get_db)) -> Response:
    user = _get_user_or_404(db, user_id)
    delete_user(db=db, user=user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
