"""Audit interceptor behaviour against a real SQLite session."""

from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from bookshelf.auth import CurrentSessionProvider
from bookshelf.db import session as db_session
from bookshelf.db.base import Base
from bookshelf.db.interceptor import AuditableInterceptor, mark_modified
from bookshelf.models import AuditTrail, Author, Book, TrailType, User, UserCredential
from bookshelf.utils.time import as_utc

AUTHOR_FIELDS = {"id", "name", "created_at_utc", "updated_at_utc", "created_by", "updated_by"}


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "audit.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    return testing_session_local


def _audited(actor_id: UUID | None = None) -> Session:
    return db_session.create_audited_session(CurrentSessionProvider(actor_id))


def _create_user(email: str = "actor@example.com") -> UUID:
    with _audited() as db:
        user = User(id=uuid4(), email=email)
        user.credential = UserCredential(password_hash="not-a-real-hash")
        db.add(user)
        db.commit()
        return user.id


def _create_author(name: str = "Ada", actor_id: UUID | None = None) -> UUID:
    with _audited(actor_id) as db:
        author = Author(id=uuid4(), name=name)
        db.add(author)
        db.commit()
        return author.id


def _trails(session_local: sessionmaker, entity_name: str, trail_type: TrailType) -> list[AuditTrail]:
    with session_local() as db:
        return list(
            db.scalars(
                select(AuditTrail).where(
                    AuditTrail.entity_name == entity_name,
                    AuditTrail.trail_type == trail_type,
                )
            ).all()
        )


def test_added_author_is_stamped_by_system_and_fully_audited(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    author_id = _create_author("Ada")

    with session_local() as db:
        author = db.get(Author, author_id)
        assert author is not None
        assert author.created_at_utc is not None
        assert author.created_by == "system"
        assert author.updated_at_utc is None
        assert author.updated_by is None

    trails = _trails(session_local, "Author", TrailType.CREATE)
    assert len(trails) == 6
    assert {trail.changed_field for trail in trails} == AUTHOR_FIELDS
    by_field = {trail.changed_field: trail for trail in trails}
    assert all(trail.actor_id is None for trail in trails)
    assert all(trail.old_value is None for trail in trails)
    assert all(trail.primary_key == str(author_id) for trail in trails)
    assert by_field["name"].new_value == "Ada"
    assert by_field["id"].new_value == str(author_id)
    assert by_field["created_by"].new_value == "system"
    assert by_field["updated_at_utc"].new_value is None


def test_modified_author_records_update_rows_with_actor(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    actor_id = _create_user()
    author_id = _create_author("Ada")

    with session_local() as db:
        original = db.get(Author, author_id)
        original_created_at = original.created_at_utc

    with _audited(actor_id) as db:
        author = db.get(Author, author_id)
        author.name = "Ada Lovelace"
        db.commit()

    with session_local() as db:
        author = db.get(Author, author_id)
        assert author.name == "Ada Lovelace"
        assert author.updated_by == str(actor_id)
        assert author.updated_at_utc >= author.created_at_utc
        assert author.created_at_utc == original_created_at
        assert author.created_by == "system"

    trails = _trails(session_local, "Author", TrailType.UPDATE)
    assert len(trails) == 6
    assert all(trail.actor_id == actor_id for trail in trails)
    by_field = {trail.changed_field: trail for trail in trails}
    assert by_field["name"].old_value == "Ada"
    assert by_field["name"].new_value == "Ada Lovelace"
    assert by_field["created_by"].old_value == by_field["created_by"].new_value == "system"
    assert by_field["id"].old_value == by_field["id"].new_value == str(author_id)
    assert by_field["updated_by"].old_value is None
    assert by_field["updated_by"].new_value == str(actor_id)
    assert by_field["updated_at_utc"].old_value is None
    assert by_field["updated_at_utc"].new_value is not None


def test_deleted_author_records_delete_rows(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    author_id = _create_author("Ada")

    with _audited() as db:
        db.delete(db.get(Author, author_id))
        db.commit()

    trails = _trails(session_local, "Author", TrailType.DELETE)
    assert len(trails) == 6
    assert all(trail.new_value is None for trail in trails)
    by_field = {trail.changed_field: trail for trail in trails}
    assert by_field["name"].old_value == "Ada"
    assert by_field["created_by"].old_value == "system"


def test_unchanged_entities_are_not_stamped_or_audited(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    author_id = _create_author("Ada")

    with _audited() as db:
        author = db.get(Author, author_id)
        author.name = "Ada"
        db.commit()

    with session_local() as db:
        assert db.get(Author, author_id).updated_at_utc is None
        assert db.scalar(select(func.count()).select_from(AuditTrail)) == 6


def test_failed_commit_leaves_no_audit_rows(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    with _audited() as db:
        db.add(Author(id=uuid4(), name=None))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    with session_local() as db:
        assert db.scalar(select(func.count()).select_from(Author)) == 0
        assert db.scalar(select(func.count()).select_from(AuditTrail)) == 0


def test_credentials_are_not_audited(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    _create_user("reader@example.com")

    with session_local() as db:
        entity_names = set(db.scalars(select(AuditTrail.entity_name)).all())
        fields = set(db.scalars(select(AuditTrail.changed_field)).all())
    assert entity_names == {"User"}
    assert "password_hash" not in fields
    assert len(_trails(session_local, "User", TrailType.CREATE)) == 6


def test_deleting_author_also_audits_cascaded_books(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    author_id = _create_author("Ursula")

    with _audited() as db:
        db.add(Book(id=uuid4(), title="The Dispossessed", year=1974, author_id=author_id))
        db.add(Book(id=uuid4(), title="The Lathe of Heaven", year=1971, author_id=author_id))
        db.commit()

    with _audited() as db:
        db.delete(db.get(Author, author_id))
        db.commit()

    assert len(_trails(session_local, "Book", TrailType.CREATE)) == 16
    assert len(_trails(session_local, "Book", TrailType.DELETE)) == 16
    assert len(_trails(session_local, "Author", TrailType.DELETE)) == 6
    with session_local() as db:
        assert db.scalar(select(func.count()).select_from(Book)) == 0


def test_deleting_actor_keeps_history_and_nulls_reference(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    actor_id = _create_user()
    _create_author("Ada", actor_id=actor_id)

    with _audited() as db:
        db.delete(db.get(User, actor_id))
        db.commit()

    trails = _trails(session_local, "Author", TrailType.CREATE)
    assert len(trails) == 6
    assert all(trail.actor_id is None for trail in trails)
    assert {trail.new_value for trail in trails if trail.changed_field == "created_by"} == {str(actor_id)}


def test_system_actor_label_and_clock_are_injectable(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    fixed = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    db = session_local()
    AuditableInterceptor(CurrentSessionProvider(None), system_actor="seed-job", clock=lambda: fixed).attach(db)
    with db:
        author = Author(id=uuid4(), name="Ada")
        db.add(author)
        db.commit()
        author_id = author.id

    with session_local() as db:
        author = db.get(Author, author_id)
        assert author.created_by == "seed-job"
        assert as_utc(author.created_at_utc) == fixed

    trails = _trails(session_local, "Author", TrailType.CREATE)
    assert all(trail.actor_id is None for trail in trails)
    assert {trail.new_value for trail in trails if trail.changed_field == "created_at_utc"} == {
        "2025-01-02T03:04:05+00:00"
    }


def test_failing_session_provider_is_treated_as_anonymous(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    class BrokenProvider:
        def resolve_actor(self) -> UUID | None:
            raise RuntimeError("no request context")

    db = session_local()
    AuditableInterceptor(BrokenProvider()).attach(db)
    with db:
        author = Author(id=uuid4(), name="Ada")
        db.add(author)
        db.commit()
        author_id = author.id

    with session_local() as db:
        assert db.get(Author, author_id).created_by == "system"
    assert all(trail.actor_id is None for trail in _trails(session_local, "Author", TrailType.CREATE))


def test_detached_interceptor_stops_auditing(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    db = session_local()
    interceptor = AuditableInterceptor(CurrentSessionProvider(None))
    interceptor.attach(db)
    interceptor.detach(db)
    with db:
        db.add(Author(id=uuid4(), name="Ada", created_at_utc=datetime.now(timezone.utc), created_by="manual"))
        db.commit()

    with session_local() as db:
        assert db.scalar(select(func.count()).select_from(AuditTrail)) == 0


def test_audit_rows_cannot_be_modified(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    _create_author("Ada")

    with session_local() as db:
        trail = db.scalars(select(AuditTrail).limit(1)).one()
        trail.new_value = "tampered"
        with pytest.raises(ValueError):
            db.commit()


def test_update_after_commit_on_same_instance_keeps_previous_value(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    with _audited() as db:
        author = Author(id=uuid4(), name="Ada")
        db.add(author)
        db.commit()
        author.name = "Ada Lovelace"
        db.commit()

    by_field = {trail.changed_field: trail for trail in _trails(session_local, "Author", TrailType.UPDATE)}
    assert by_field["name"].old_value == "Ada"
    assert by_field["name"].new_value == "Ada Lovelace"
    assert by_field["created_by"].old_value == "system"
    assert by_field["updated_at_utc"].old_value is None


def test_book_removed_from_author_is_audited_as_delete(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    author_id = _create_author("Ursula")

    with _audited() as db:
        db.add(Book(id=uuid4(), title="The Dispossessed", year=1974, author_id=author_id))
        db.add(Book(id=uuid4(), title="The Lathe of Heaven", year=1971, author_id=author_id))
        db.commit()

    with _audited() as db:
        author = db.get(Author, author_id)
        removed = author.books[0]
        removed_id = removed.id
        author.books.remove(removed)
        db.commit()

    delete_rows = _trails(session_local, "Book", TrailType.DELETE)
    assert len(delete_rows) == 8
    assert {row.primary_key for row in delete_rows} == {str(removed_id)}
    by_field = {row.changed_field: row for row in delete_rows}
    assert by_field["title"].old_value == "The Dispossessed"
    assert by_field["author_id"].old_value == str(author_id)
    assert by_field["updated_by"].old_value is None
    assert _trails(session_local, "Book", TrailType.UPDATE) == []
    assert _trails(session_local, "Author", TrailType.UPDATE) == []
    with session_local() as db:
        assert db.get(Book, removed_id) is None
        assert db.scalar(select(func.count()).select_from(Book)) == 1


def test_reassigning_book_author_records_new_foreign_key(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    first_id = _create_author("Ada")
    second_id = _create_author("Grace")

    with _audited() as db:
        book = Book(id=uuid4(), title="Notes", year=1843, author=db.get(Author, first_id))
        db.add(book)
        db.commit()
        book_id = book.id

    created = {row.changed_field: row for row in _trails(session_local, "Book", TrailType.CREATE)}
    assert created["author_id"].new_value == str(first_id)

    with _audited() as db:
        book = db.get(Book, book_id)
        book.author = db.get(Author, second_id)
        db.commit()

    by_field = {row.changed_field: row for row in _trails(session_local, "Book", TrailType.UPDATE)}
    assert by_field["author_id"].old_value == str(first_id)
    assert by_field["author_id"].new_value == str(second_id)
    with session_local() as db:
        assert db.get(Book, book_id).author_id == second_id


def test_marked_entity_is_audited_without_value_changes(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    author_id = _create_author("Ada")

    with _audited() as db:
        author = db.get(Author, author_id)
        author.name = "Ada"
        mark_modified(author)
        db.commit()

    with session_local() as db:
        author = db.get(Author, author_id)
        assert author.updated_at_utc is not None
        assert author.updated_by == "system"

    by_field = {row.changed_field: row for row in _trails(session_local, "Author", TrailType.UPDATE)}
    assert len(by_field) == 6
    assert by_field["name"].old_value == by_field["name"].new_value == "Ada"


def test_mark_modified_requires_a_session() -> None:
    with pytest.raises(ValueError):
        mark_modified(Author(id=uuid4(), name="Ada"))
