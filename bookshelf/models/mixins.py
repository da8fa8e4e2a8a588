"""Declarative mixins for auditable entities."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, event, inspect
from sqlalchemy.orm import Mapped, mapped_column


class AuditableMixin:
    """Provenance columns stamped by the audit interceptor on every flush.

    Only classes that inherit this mixin are stamped and produce audit trail
    rows; ``created_*`` is written once on insert and ``updated_*`` on each
    later modification.
    """

    created_at_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at_utc: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    @classmethod
    def __declare_last__(cls) -> None:
        # Assigning an expired column loads the stored value first, so update
        # trails always know what was replaced.
        for column_attr in inspect(cls).column_attrs:
            event.listen(column_attr.class_attribute, "set", _on_column_set, active_history=True)

    def stamp_created(self, actor: str, moment: datetime) -> None:
        self.created_at_utc = moment
        self.created_by = actor

    def stamp_updated(self, actor: str, moment: datetime) -> None:
        self.updated_at_utc = moment
        self.updated_by = actor


def _on_column_set(target: Any, value: Any, oldvalue: Any, initiator: Any) -> None:
    pass
