"""Request-scoped actor resolution for audited sessions."""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from bookshelf.core.config import settings

optional_bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)


class SessionProvider(Protocol):
    """Source of the principal acting in the current unit of work."""

    def resolve_actor(self) -> UUID | None: ...


class AnonymousSessionProvider:
    """Provider for unauthenticated requests and background work."""

    def resolve_actor(self) -> UUID | None:
        return None


class CurrentSessionProvider:
    """Provider bound to the user id carried by a request's access token."""

    def __init__(self, actor_id: UUID | None) -> None:
        self._actor_id = actor_id

    @classmethod
    def from_token(cls, token: str) -> "CurrentSessionProvider":
        """Build a provider from a bearer token; invalid tokens are anonymous."""
        try:
            payload = decode_access_token(token)
        except JWTError:
            return cls(None)
        return cls(parse_actor_id(payload.get("sub")))

    def resolve_actor(self) -> UUID | None:
        return self._actor_id


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT issued by this application.

    Raises:
        JWTError: When the signature, expiry, issuer or audience is invalid.
    """
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


def parse_actor_id(subject: object) -> UUID | None:
    """Parse a token subject into a user id, or None when it is not a UUID."""
    if subject is None:
        return None
    try:
        return UUID(str(subject))
    except ValueError:
        return None


def get_session_provider(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer_scheme),
) -> SessionProvider:
    """Resolve the session provider for the current request."""
    if credentials is None:
        return AnonymousSessionProvider()
    return CurrentSessionProvider.from_token(credentials.credentials)
