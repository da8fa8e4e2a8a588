"""Read-only audit trail endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookshelf.core.security import get_current_user
from bookshelf.db.session import get_db
from bookshelf.models.audit_trail import TrailType
from bookshelf.schemas.audit import AuditTrailRead
from bookshelf.services.audit_service import list_audit_trails

router: APIRouter = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[AuditTrailRead])
def get_audit_trails(
    entity_name: str | None = None,
    primary_key: str | None = None,
    trail_type: TrailType | None = None,
    actor_id: UUID | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> list[AuditTrailRead]:
    """Return field-level change history, newest first."""
    trails = list_audit_trails(
        db,
        entity_name=entity_name,
        primary_key=primary_key,
        trail_type=trail_type,
        actor_id=actor_id,
        limit=limit,
        offset=offset,
    )
    return [AuditTrailRead.model_validate(trail) for trail in trails]
