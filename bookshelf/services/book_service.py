"""Book service operations."""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.db.interceptor import mark_modified
from bookshelf.models.catalog import Book


def list_books(db: Session) -> list[Book]:
    return list(db.scalars(select(Book).order_by(Book.title.asc())).all())


def get_book(db: Session, book_id: UUID) -> Book | None:
    return db.get(Book, book_id)


def create_book(db: Session, title: str, year: int, author_id: UUID) -> Book:
    book = Book(id=uuid4(), title=title, year=year, author_id=author_id)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def update_book(db: Session, book: Book, title: str, year: int, author_id: UUID) -> Book:
    book.title = title
    book.year = year
    book.author_id = author_id
    mark_modified(book)
    db.commit()
    db.refresh(book)
    return book


def delete_book(db: Session, book: Book) -> None:
    db.delete(book)
    db.commit()
