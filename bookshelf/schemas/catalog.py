"""Author and book API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuthorCreate(BaseModel):
    """Payload for creating an author."""

    name: str = Field(min_length=1, max_length=200)


class AuthorUpdate(AuthorCreate):
    """Payload for renaming an author."""


class BookCreate(BaseModel):
    """Payload for creating a book."""

    title: str = Field(min_length=1, max_length=300)
    year: int
    author_id: UUID


class BookUpdate(BookCreate):
    """Payload for replacing a book's fields."""


class BookResponse(BaseModel):
    """Serialized book."""

    id: UUID
    title: str
    year: int
    author_id: UUID

    model_config = ConfigDict(from_attributes=True)


class AuthorResponse(BaseModel):
    """Serialized author with books."""

    id: UUID
    name: str
    books: list[BookResponse] = []

    model_config = ConfigDict(from_attributes=True)


class AuditableFields(BaseModel):
    created_at_utc: datetime
    updated_at_utc: datetime | None
    created_by: str
    updated_by: str | None


class BookEntity(BookResponse, AuditableFields):
    """Book row including audit metadata."""


class AuthorEntity(AuditableFields):
    """Author row including audit metadata and book rows."""

    id: UUID
    name: str
    books: list[BookEntity] = []

    model_config = ConfigDict(from_attributes=True)
