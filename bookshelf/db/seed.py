"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from bookshelf.core.config import settings
from bookshelf.core.security import get_password_hash
from bookshelf.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def ensure_admin_user(session: Session) -> bool:
    """Ensure the configured admin account exists in development only.

    Returns:
        bool: True when the account was created by this call.
    """
    if settings.app_env != "dev":
        return False

    if get_user_by_email(db=session, email=settings.admin_email) is not None:
        return False

    create_user(
        db=session,
        email=settings.admin_email,
        hashed_password=get_password_hash(settings.admin_password),
    )
    logger.info("[BOOTSTRAP] Created admin user %s", settings.admin_email)
    return True
