"""Author endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from bookshelf.core.security import get_current_user
from bookshelf.db.session import get_db
from bookshelf.models.catalog import Author
from bookshelf.schemas.catalog import AuthorCreate, AuthorEntity, AuthorResponse, AuthorUpdate
from bookshelf.services.author_service import create_author, delete_author, get_author, list_authors, rename_author

router: APIRouter = APIRouter(dependencies=[Depends(get_current_user)])


def _get_author_or_404(db: Session, author_id: UUID) -> Author:
    author: Author | None = get_author(db=db, author_id=author_id)
    if author is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Author with ID {author_id} not found.")
    return author


@router.get("", response_model=list[AuthorResponse])
def get_authors(db: Session = Depends(get_db)) -> list[AuthorResponse]:
    """Return all authors along with their books."""
    return [AuthorResponse.model_validate(author) for author in list_authors(db)]


@router.get("/entities", response_model=list[AuthorEntity])
def get_author_entities(db: Session = Depends(get_db)) -> list[AuthorEntity]:
    """Return authors as full rows, including audit metadata."""
    return [AuthorEntity.model_validate(author) for author in list_authors(db)]


@router.get("/{author_id}", response_model=AuthorResponse)
def get_author_by_id(author_id: UUID, db: Session = Depends(get_db)) -> AuthorResponse:
    return AuthorResponse.model_validate(_get_author_or_404(db, author_id))


@router.post("", response_model=AuthorResponse, status_code=status.HTTP_201_CREATED)
def post_author(payload: AuthorCreate, response: Response, db: Session = Depends(get_db)) -> AuthorResponse:
    author = create_author(db=db, name=payload.name)
    response.headers["Location"] = f"/api/authors/{author.id}"
    return AuthorResponse.model_validate(author)


@router.put("/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
def put_author(author_id: UUID, payload: AuthorUpdate, db: Session = Depends(get_db)) -> Response:
    author = _get_author_or_404(db, author_id)
    rename_author(db=db, author=author, name=payload.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_author(author_id: UUID, db: Session = Depends(get_db)) -> Response:
    """Permanently delete an author and its books."""
    author = _get_author_or_404(db, author_id)
    delete_author(db=db, author=author)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
