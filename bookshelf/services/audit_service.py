"""Audit trail queries."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.models import AuditTrail, TrailType


def list_audit_trails(
    db: Session,
    *,
    entity_name: str | None = None,
    primary_key: str | None = None,
    trail_type: TrailType | None = None,
    actor_id: UUID | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[AuditTrail]:
    """Return audit rows newest first, optionally filtered."""
    query = select(AuditTrail)
    if entity_name is not None:
        query = query.where(AuditTrail.entity_name == entity_name)
    if primary_key is not None:
        query = query.where(AuditTrail.primary_key == primary_key)
    if trail_type is not None:
        query = query.where(AuditTrail.trail_type == trail_type)
    if actor_id is not None:
        query = query.where(AuditTrail.actor_id == actor_id)
    query = query.order_by(AuditTrail.timestamp_utc.desc(), AuditTrail.entity_name.asc(), AuditTrail.changed_field.asc())
    return list(db.scalars(query.limit(limit).offset(offset)).all())
