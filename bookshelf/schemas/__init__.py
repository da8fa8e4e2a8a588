"""Schema exports."""

from bookshelf.schemas.audit import AuditTrailRead
from bookshelf.schemas.auth import LoginRequest, TokenResponse
from bookshelf.schemas.catalog import (
    AuthorCreate,
    AuthorEntity,
    AuthorResponse,
    AuthorUpdate,
    BookCreate,
    BookEntity,
    BookResponse,
    BookUpdate,
)
from bookshelf.schemas.user import UserCreate, UserEntity, UserRead, UserUpdate

__all__ = [
    "AuditTrailRead",
    "LoginRequest",
    "TokenResponse",
    "AuthorCreate",
    "AuthorEntity",
    "AuthorResponse",
    "AuthorUpdate",
    "BookCreate",
    "BookEntity",
    "BookResponse",
    "BookUpdate",
    "UserCreate",
    "UserEntity",
    "UserRead",
    "UserUpdate",
]
