"""
Session models for taskboard.

A SessionContext carries the bearer token and the authenticated user. It is
passed explicitly to whatever needs it (the store client, the CLI) instead of
being read from ambient global storage.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from taskboard.core.tasks.models import User


class AuthResult(BaseModel):
    """Response body of the login and register endpoints."""

    token: str = Field(..., min_length=1, description="Bearer token")
    user: User = Field(..., description="Authenticated user")


class SessionContext(BaseModel):
    """
    Authentication state for one user session.

    Lifecycle:
        - read at process start (``SessionStore.load``)
        - populated on login/register (``populate``)
        - cleared on logout (``clear``)

    Example:
        >>> session = SessionContext()
        >>> session.is_authenticated
        False
    """

    token: str | None = Field(default=None, description="Bearer token")
    user: User | None = Field(default=None, description="Authenticated user")
    authenticated_at: datetime | None = Field(default=None)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def populate(self, result: AuthResult) -> None:
        """Store the token and user returned by the backend."""
        self.token = result.token
        self.user = result.user
        self.authenticated_at = datetime.now(timezone.utc)

    def clear(self) -> None:
        """Forget the token and user."""
        self.token = None
        self.user = None
        self.authenticated_at = None

    def authorization_header(self) -> dict[str, str]:
        """Return the Authorization header for this session, empty if no token."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
