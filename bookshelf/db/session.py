"""Database engine and audited session management."""

import sqlite3
from collections.abc import Generator
from typing import Any

from fastapi import Depends
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bookshelf.auth import AnonymousSessionProvider, SessionProvider, get_session_provider
from bookshelf.core.config import settings
from bookshelf.db.interceptor import AuditableInterceptor

connect_args: dict[str, bool] = {"check_same_thread": False}
engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on FK enforcement so audit actor references null out on user delete."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_audited_session(session_provider: SessionProvider | None = None) -> Session:
    """Open a session whose flushes are stamped and audited."""
    db: Session = SessionLocal()
    AuditableInterceptor(session_provider or AnonymousSessionProvider()).attach(db)
    return db


def get_db(
    session_provider: SessionProvider = Depends(get_session_provider),
) -> Generator[Session, None, None]:
    """Yield an audited database session and ensure proper cleanup."""
    db: Session = create_audited_session(session_provider)
    try:
        yield db
    finally:
        db.close()
