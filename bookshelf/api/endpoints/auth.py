"""Authentication endpoints (API JWT)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bookshelf.core.security import create_access_token, get_current_user, verify_password
from bookshelf.db.session import get_db
from bookshelf.models.user import User
from bookshelf.schemas.auth import LoginRequest, TokenResponse
from bookshelf.schemas.user import UserRead
from bookshelf.services.user_service import get_user_by_email

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate by email and password and issue an access token."""
    user: User | None = get_user_by_email(db=db, email=payload.email)
    if user is None or user.credential is None or not verify_password(payload.password, user.credential.password_hash):
        logger.info("[AUTH] Rejected login for email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    return TokenResponse(access_token=create_access_token(user))


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
