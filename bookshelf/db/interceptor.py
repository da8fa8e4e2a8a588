"""Auditable save interceptor hooked into the SQLAlchemy flush cycle."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import event, inspect
from sqlalchemy.orm import (
    AttributeState,
    InstanceState,
    RelationshipDirection,
    Session,
    UOWTransaction,
    object_session,
)

from bookshelf.auth import SessionProvider
from bookshelf.core.config import settings
from bookshelf.models.audit_trail import AuditTrail, TrailType
from bookshelf.models.mixins import AuditableMixin
from bookshelf.utils.rendering import render_value
from bookshelf.utils.time import utc_now

logger = logging.getLogger(__name__)

FORCED_UPDATES_KEY = "audit_forced_updates"


def mark_modified(entity: AuditableMixin) -> None:
    """Treat ``entity`` as modified on the next flush even if no value changed.

    Call after assigning the incoming values; the entity is then stamped and
    gets a full update snapshot like any other modification.
    """
    session = object_session(entity)
    if session is None:
        raise ValueError(f"{type(entity).__name__} is not attached to a session.")
    session.info.setdefault(FORCED_UPDATES_KEY, set()).add(inspect(entity))


class AuditableInterceptor:
    """Stamp provenance fields and record field-level audit trails on flush.

    Attached to a single session; on every flush it stamps ``created_*`` on
    new auditable entities and ``updated_*`` on modified ones, then adds one
    :class:`AuditTrail` per mapped column of every added, modified or deleted
    auditable entity. The rows join the same flush, so they commit or roll
    back together with the changes they describe.
    """

    def __init__(
        self,
        session_provider: SessionProvider,
        *,
        system_actor: str | None = None,
        max_value_length: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session_provider = session_provider
        self.system_actor = system_actor if system_actor is not None else settings.audit_system_actor
        self.max_value_length = (
            max_value_length if max_value_length is not None else settings.audit_value_max_length
        )
        self._clock = clock

    def attach(self, session: Session) -> Session:
        """Register this interceptor as a ``before_flush`` listener of ``session``."""
        event.listen(session, "before_flush", self.before_flush)
        return session

    def detach(self, session: Session) -> None:
        """Stop auditing flushes of ``session``."""
        event.remove(session, "before_flush", self.before_flush)

    def before_flush(self, session: Session, flush_context: UOWTransaction, instances: Any) -> None:
        forced = session.info.pop(FORCED_UPDATES_KEY, set())
        added = [obj for obj in session.new if isinstance(obj, AuditableMixin)]
        deleted = [obj for obj in session.deleted if isinstance(obj, AuditableMixin)]
        modified: list[AuditableMixin] = []
        for obj in session.dirty:
            if not isinstance(obj, AuditableMixin):
                continue
            state = inspect(obj)
            # The flush deletes persistent orphans after this hook has run.
            if state.has_identity and state.mapper._is_orphan(state):
                deleted.append(obj)
            elif state in forced or session.is_modified(obj, include_collections=False):
                modified.append(obj)
        if not (added or modified or deleted):
            return

        actor_id = self.resolve_actor()
        actor_label = str(actor_id) if actor_id is not None else self.system_actor
        moment = self._clock()

        for entity in [*added, *modified]:
            _sync_many_to_one_keys(entity)

        # Stamping must precede derivation so updated_* show up as changed fields.
        for entity in added:
            entity.stamp_created(actor_label, moment)
        for entity in modified:
            entity.stamp_updated(actor_label, moment)

        trails: list[AuditTrail] = []
        trails.extend(self._derive(added, TrailType.CREATE, actor_id, moment))
        trails.extend(self._derive(modified, TrailType.UPDATE, actor_id, moment))
        trails.extend(self._derive(deleted, TrailType.DELETE, actor_id, moment))

        session.add_all(trails)
        logger.debug(
            "[AUDIT] %s trail rows queued (added=%s modified=%s deleted=%s actor=%s)",
            len(trails),
            len(added),
            len(modified),
            len(deleted),
            actor_label,
        )

    def resolve_actor(self) -> UUID | None:
        """Ask the provider for the acting user; failures count as anonymous."""
        try:
            return self.session_provider.resolve_actor()
        except Exception:
            logger.warning("[AUDIT] Session provider failed; recording change as anonymous.", exc_info=True)
            return None

    def _derive(
        self,
        entities: Iterable[AuditableMixin],
        trail_type: TrailType,
        actor_id: UUID | None,
        moment: datetime,
    ) -> list[AuditTrail]:
        trails: list[AuditTrail] = []
        for entity in entities:
            state: InstanceState[Any] = inspect(entity)
            primary_key = self._render(_primary_key_value(state))
            for column_attr in state.mapper.column_attrs:
                attr = state.attrs[column_attr.key]
                if trail_type is TrailType.CREATE:
                    old_value, new_value = None, self._render(attr.value)
                elif trail_type is TrailType.UPDATE:
                    old_value, new_value = self._render(_original_value(attr)), self._render(attr.value)
                else:
                    old_value, new_value = self._render(_original_value(attr)), None
                trails.append(
                    AuditTrail(
                        id=uuid4(),
                        actor_id=actor_id,
                        trail_type=trail_type,
                        timestamp_utc=moment,
                        entity_name=type(entity).__name__,
                        primary_key=primary_key,
                        old_value=old_value,
                        new_value=new_value,
                        changed_field=column_attr.key,
                    )
                )
        return trails

    def _render(self, value: object) -> str | None:
        return render_value(value, self.max_value_length)


def _primary_key_value(state: InstanceState[Any]) -> object:
    """Return the first primary key column value that is set, if any."""
    mapper = state.mapper
    for column in mapper.primary_key:
        value = state.attrs[mapper.get_property_by_column(column).key].value
        if value is not None:
            return value
    return None


def _sync_many_to_one_keys(entity: AuditableMixin) -> None:
    """Copy keys of newly assigned many-to-one targets into the local FK columns.

    The flush itself copies these keys only after ``before_flush`` has run.
    """
    state: InstanceState[Any] = inspect(entity)
    mapper = state.mapper
    for relationship in mapper.relationships:
        if relationship.direction is not RelationshipDirection.MANYTOONE:
            continue
        history = state.attrs[relationship.key].history
        if not history.added:
            continue
        target = history.added[0]
        target_state = inspect(target) if target is not None else None
        for local_column, remote_column in relationship.local_remote_pairs:
            if target_state is None:
                value = None
            else:
                value = target_state.attrs[target_state.mapper.get_property_by_column(remote_column).key].value
                if value is None:
                    # Key is generated by the flush itself.
                    continue
            setattr(entity, mapper.get_property_by_column(local_column).key, value)


def _original_value(attr: AttributeState) -> object:
    """Value the attribute had when it was loaded from the database."""
    history = attr.history
    if history.deleted:
        return history.deleted[0]
    if history.unchanged:
        return history.unchanged[0]
    if history.added:
        # No stored value existed, as for a pending instance.
        return None
    return attr.value
