"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from bookshelf.models import audit_trail as _audit_trail  # noqa: E402,F401
from bookshelf.models import catalog as _catalog  # noqa: E402,F401
from bookshelf.models import user as _user  # noqa: E402,F401
