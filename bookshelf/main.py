"""FastAPI entrypoint for the audited bookshelf API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from bookshelf.api.api import api_router
from bookshelf.core.config import settings
from bookshelf.db import session as db_session
from bookshelf.db.base import Base
from bookshelf.db.seed import ensure_admin_user

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Manage authors, books and users; every change is recorded in a field-level audit trail.",
    version="1.0.0",
)
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.create_audited_session() as session:
        try:
            created = ensure_admin_user(session)
            logger.info("[BOOTSTRAP] admin seeded: %s", "yes" if created else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Seed failed; continuing startup.")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc), "path": request.url.path})


@app.middleware("http")
async def status_code_pages(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Give bodiless error responses a plain-text status page."""
    response = await call_next(request)
    if response.status_code >= 400 and response.headers.get("content-length") == "0":
        return PlainTextResponse(f"Status Code Page: {response.status_code}", status_code=response.status_code)
    return response


@app.get("/api", include_in_schema=False)
def api_root() -> dict[str, str]:
    return {"name": settings.app_name, "docs": "/docs", "openapi": "/openapi.json"}


@app.get("/health", include_in_schema=False)
def health() -> dict[str, str]:
    return {"status": "ok"}
