"""Author service operations."""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookshelf.db.interceptor import mark_modified
from bookshelf.models.catalog import Author


def list_authors(db: Session) -> list[Author]:
    """Return all authors with their books loaded."""
    return list(db.scalars(select(Author).options(selectinload(Author.books)).order_by(Author.name.asc())).all())


def get_author(db: Session, author_id: UUID) -> Author | None:
    return db.get(Author, author_id)


def create_author(db: Session, name: str) -> Author:
    author = Author(id=uuid4(), name=name)
    db.add(author)
    db.commit()
    db.refresh(author)
    return author


def rename_author(db: Session, author: Author, name: str) -> Author:
    """Rename an author; the save is audited even when the name is unchanged."""
    author.name = name
    mark_modified(author)
    db.commit()
    db.refresh(author)
    return author


def delete_author(db: Session, author: Author) -> None:
    """Delete an author together with its books."""
    db.delete(author)
    db.commit()
