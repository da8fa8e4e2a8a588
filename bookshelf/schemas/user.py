"""User request and response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=200)
    password: str = Field(min_length=6)


class UserUpdate(BaseModel):
    email: str = Field(min_length=3, max_length=200)


class UserRead(BaseModel):
    id: UUID
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserEntity(UserRead):
    """User row including audit metadata."""

    created_at_utc: datetime
    updated_at_utc: datetime | None
    created_by: str
    updated_by: str | None
