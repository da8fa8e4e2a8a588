"""API router composition."""

from fastapi import APIRouter

from bookshelf.api.endpoints import audit_trails, auth, authors, books, users

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(authors.router, prefix="/authors", tags=["authors"])
api_router.include_router(books.router, prefix="/books", tags=["books"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(audit_trails.router, prefix="/audit-trails", tags=["audit-trails"])
