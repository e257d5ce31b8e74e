"""
Authentication service.

Drives the session lifecycle: populate on login/register, clear on logout,
restore at process start. The session context object is shared with the
store client, so changes here apply to the next request.
"""

from __future__ import annotations

import logging
from typing import Protocol

from taskboard.core.session.models import AuthResult, SessionContext
from taskboard.core.session.store import SessionStore
from taskboard.core.tasks.models import User

logger = logging.getLogger(__name__)


class AuthBackend(Protocol):
    """The auth endpoints of the remote store."""

    async def login(self, email: str, password: str) -> AuthResult: ...

    async def register(self, name: str, email: str, password: str) -> AuthResult: ...


class AuthService:
    """
    Login, registration and logout against the remote store.

    Example:
        >>> session = SessionContext()
        >>> auth = AuthService(client, session, SessionStore())
        >>> user = await auth.login("ada@example.com", "secret")
        >>> session.is_authenticated
        True
    """

    def __init__(
        self,
        backend: AuthBackend | None,
        session: SessionContext,
        store: SessionStore | None = None,
    ) -> None:
        self.backend = backend
        self.session = session
        self.store = store

    def restore(self) -> SessionContext:
        """
        Load the saved session into the shared context.

        Raises:
            SessionStoreError: If the session file cannot be read
        """
        if self.store is None:
            return self.session
        saved = self.store.load()
        self.session.token = saved.token
        self.session.user = saved.user
        self.session.authenticated_at = saved.authenticated_at
        return self.session

    async def login(self, email: str, password: str) -> User:
        """
        Log in and persist the session.

        Raises:
            AuthError: If the credentials are rejected
            NetworkError: On transport failure
        """
        result = await self.backend.login(email, password)
        self._start(result)
        logger.info(f"Logged in as {result.user.name}")
        return result.user

    async def register(self, name: str, email: str, password: str) -> User:
        """
        Create an account, log in as it and persist the session.

        Raises:
            ValidationError: If the backend rejects the registration
            NetworkError: On transport failure
        """
        result = await self.backend.register(name, email, password)
        self._start(result)
        logger.info(f"Registered {result.user.email}")
        return result.user

    def logout(self) -> None:
        """Forget the session, in memory and on disk."""
        self.session.clear()
        if self.store is not None:
            self.store.clear()
        logger.info("Logged out")

    def _start(self, result: AuthResult) -> None:
        self.session.populate(result)
        if self.store is not None:
            self.store.save(self.session)
