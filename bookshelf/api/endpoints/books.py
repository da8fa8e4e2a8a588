"""Book endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from bookshelf.core.security import get_current_user
from bookshelf.db.session import get_db
from bookshelf.models.catalog import Book
from bookshelf.schemas.catalog import BookCreate, BookEntity, BookResponse, BookUpdate
from bookshelf.services.author_service import get_author
from bookshelf.services.book_service import create_book, delete_book, get_book, list_books, update_book

router: APIRouter = APIRouter(dependencies=[Depends(get_current_user)])


def _get_book_or_404(db: Session, book_id: UUID) -> Book:
    book: Book | None = get_book(db=db, book_id=book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Book with ID {book_id} not found.")
    return book


def _require_author(db: Session, author_id: UUID) -> None:
    if get_author(db=db, author_id=author_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Author with ID {author_id} not found.")


@router.get("", response_model=list[BookResponse])
def get_books(db: Session = Depends(get_db)) -> list[BookResponse]:
    return [BookResponse.model_validate(book) for book in list_books(db)]


@router.get("/entities", response_model=list[BookEntity])
def get_book_entities(db: Session = Depends(get_db)) -> list[BookEntity]:
    """Return books as full rows, including audit metadata."""
    return [BookEntity.model_validate(book) for book in list_books(db)]


@router.get("/{book_id}", response_model=BookResponse)
def get_book_by_id(book_id: UUID, db: Session = Depends(get_db)) -> BookResponse:
    return BookResponse.model_validate(_get_book_or_404(db, book_id))


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def post_book(payload: BookCreate, response: Response, db: Session = Depends(get_db)) -> BookResponse:
    _require_author(db, payload.author_id)
    book = create_book(db=db, title=payload.title, year=payload.year, author_id=payload.author_id)
    response.headers["Location"] = f"/api/books/{book.id}"
    return BookResponse.model_validate(book)


@router.put("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def put_book(book_id: UUID, payload: BookUpdate, db: Session = Depends(get_db)) -> Response:
    book = _get_book_or_404(db, book_id)
    _require_author(db, payload.author_id)
    update_book(db=db, book=book, title=payload.title, year=payload.year, author_id=payload.author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_book(book_id: UUID, db: Session = Depends(get_db)) -> Response:
    book = _get_book_or_404(db, book_id)
    delete_book(db=db, book=book)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
