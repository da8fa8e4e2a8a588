"""Application models package."""

from bookshelf.models.audit_trail import AuditTrail, TrailType
from bookshelf.models.catalog import Author, Book
from bookshelf.models.mixins import AuditableMixin
from bookshelf.models.user import User, UserCredential

__all__ = ["AuditableMixin", "AuditTrail", "TrailType", "Author", "Book", "User", "UserCredential"]
