"""Audit trail response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from bookshelf.models.audit_trail import TrailType


class AuditTrailRead(BaseModel):
    """Serialized audit trail row."""

    id: UUID
    actor_id: UUID | None
    trail_type: TrailType
    timestamp_utc: datetime
    entity_name: str
    primary_key: str | None
    old_value: str | None
    new_value: str | None
    changed_field: str

    model_config = ConfigDict(from_attributes=True)
