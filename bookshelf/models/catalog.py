"""Author and book ORM models."""

from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.db.base import Base
from bookshelf.models.mixins import AuditableMixin


class Author(AuditableMixin, Base):
    """Book author; owns its books."""

    __tablename__ = "authors"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    books: Mapped[list["Book"]] = relationship(
        back_populates="author",
        cascade="all, delete-orphan",
        order_by="Book.title",
    )


class Book(AuditableMixin, Base):
    """A single title written by one author."""

    __tablename__ = "books"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[UUID] = mapped_column(ForeignKey("authors.id"), nullable=False, index=True)

    author: Mapped[Author] = relationship(back_populates="books")
