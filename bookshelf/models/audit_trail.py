"""Field-level audit trail model written by the save interceptor."""

import enum
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Connection, DateTime, Enum, ForeignKey, String, Text, Uuid, event
from sqlalchemy.orm import Mapped, Mapper, mapped_column, relationship

from bookshelf.db.base import Base


class TrailType(str, enum.Enum):
    """Kind of mutation an audit row describes."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class AuditTrail(Base):
    """One changed field of one entity within one flush. Append-only."""

    __tablename__ = "audit_trails"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    actor_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    trail_type: Mapped[TrailType] = mapped_column(
        Enum(
            TrailType,
            name="trail_type",
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    timestamp_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    primary_key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_field: Mapped[str] = mapped_column(String(100), nullable=False)

    actor: Mapped["User | None"] = relationship()


@event.listens_for(AuditTrail, "before_update")
def _prevent_audit_trail_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditTrail
) -> None:
    """Audit trail rows are append-only; updates are forbidden."""
    raise ValueError("Audit trail entries are immutable and cannot be updated.")


@event.listens_for(AuditTrail, "before_delete")
def _prevent_audit_trail_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditTrail
) -> None:
    """Audit trail rows are never removed through the ORM."""
    raise ValueError("Audit trail entries cannot be deleted.")
