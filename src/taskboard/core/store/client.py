"""
Remote task store client.

Async HTTP/JSON client for the task board backend. Each call is a single
best-effort round trip: no caching, no retries. Failures surface as the typed
errors in ``taskboard.core.store.exceptions``:

- 401/403 -> AuthError
- 404 -> NotFoundError
- other 4xx -> ValidationError
- 5xx, timeouts, connection failures, undecodable bodies -> NetworkError

Identifiers are normalized here (``_id`` preferred over ``id``) by the task
models, so callers only ever see ``Task.id``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from taskboard.core.session.models import AuthResult, SessionContext
from taskboard.core.store.exceptions import (
    AuthError,
    IdentifierMissing,
    NetworkError,
    NotFoundError,
    TaskStoreError,
    ValidationError,
)
from taskboard.core.tasks.models import Task, TaskDraft, User

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class TaskStoreClient:
    """
    Client for the remote task store.

    The bearer token is read from the session context on every request, so
    logging in or out through the same context takes effect immediately.

    Example:
        >>> session = SessionContext(token="abc", user=None)
        >>> async with TaskStoreClient("http://localhost:3001/api", session) as store:
        ...     tasks = await store.list_tasks()
    """

    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:3001/api``
            session: Session context supplying the bearer token
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> TaskStoreClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    async def list_tasks(self) -> list[Task]:
        """
        Fetch every task visible to the current user.

        Raises:
            AuthError: If the token is missing or rejected
            NetworkError: On transport failure or a malformed response
        """
        data = await self._request("GET", "/tasks")
        if not isinstance(data, list):
            raise NetworkError("Expected a list of tasks", path="/tasks")
        return [self._parse(Task, item, "/tasks") for item in data]

    async def create_task(self, draft: TaskDraft) -> Task:
        """
        Create a task from a draft; the backend assigns id and timestamps.

        Raises:
            ValidationError: If the backend rejects the draft
            NetworkError: On transport failure
        """
        data = await self._request("POST", "/tasks", json=draft.to_payload())
        return self._parse(Task, data, "/tasks")

    async def update_task(self, task_id: str | None, patch: Mapping[str, Any]) -> Task:
        """
        Apply a partial update to a task.

        Args:
            task_id: Task identifier (must be non-empty)
            patch: Wire-named fields to change, e.g. ``{"status": "done"}``

        Returns:
            The canonical task returned by the backend

        Raises:
            IdentifierMissing: If task_id is empty (no request is made)
            NotFoundError: If the backend does not know the task
            NetworkError: On transport failure
        """
        if not task_id:
            raise IdentifierMissing("update")
        path = f"/tasks/{task_id}"
        data = await self._request("PUT", path, json=dict(patch), task_id=task_id)
        return self._parse(Task, data, path)

    async def delete_task(self, task_id: str | None) -> str:
        """
        Delete a task.

        Returns:
            Acknowledgement message from the backend

        Raises:
            IdentifierMissing: If task_id is empty (no request is made)
            NotFoundError: If the backend does not know the task
            NetworkError: On transport failure
        """
        if not task_id:
            raise IdentifierMissing("deletion")
        data = await self._request("DELETE", f"/tasks/{task_id}", task_id=task_id)
        if isinstance(data, dict):
            return str(data.get("message", "Task deleted"))
        return "Task deleted"

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def list_users(self) -> list[User]:
        """Fetch the user directory (for assignee pickers and the team view)."""
        data = await self._request("GET", "/users")
        if not isinstance(data, list):
            raise NetworkError("Expected a list of users", path="/users")
        return [self._parse(User, item, "/users") for item in data]

    async def get_user(self, user_id: str) -> User:
        """Fetch a single user by identifier."""
        if not user_id:
            raise IdentifierMissing("user lookup")
        path = f"/users/{user_id}"
        data = await self._request("GET", path, user_id=user_id)
        return self._parse(User, data, path)

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Exchange credentials for a token.

        Raises:
            AuthError: If the credentials are rejected
            NetworkError: On transport failure
        """
        data = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            authenticated=False,
            rejection=AuthError,
        )
        return self._parse(AuthResult, data, "/auth/login")

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """
        Create an account and return its token.

        Raises:
            ValidationError: If the backend rejects the registration
            NetworkError: On transport failure
        """
        data = await self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
            authenticated=False,
        )
        return self._parse(AuthResult, data, "/auth/register")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        authenticated: bool = True,
        rejection: type[TaskStoreError] = ValidationError,
        **context: object,
    ) -> Any:
        """
        Perform one request and decode its JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API root
            json: Optional JSON body
            authenticated: Attach the bearer token (and require one)
            rejection: Error type for 4xx responses not otherwise classified
            **context: Extra context attached to raised errors

        Returns:
            Decoded JSON body
        """
        headers: dict[str, str] = {}
        if authenticated:
            if not self.session.token:
                raise AuthError("Not authenticated: no session token", path=path, **context)
            headers.update(self.session.authorization_header())

        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"Request timed out after {self.timeout}s: {method} {path}",
                path=path,
                **context,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error: {e}", path=path, **context) from e

        if response.is_error:
            raise self._error_for_response(response, path, rejection, **context)

        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(
                "Invalid JSON in response",
                path=path,
                status_code=response.status_code,
                **context,
            ) from e

    def _error_for_response(
        self,
        response: httpx.Response,
        path: str,
        rejection: type[TaskStoreError],
        **context: object,
    ) -> TaskStoreError:
        """Map an error response to the store error taxonomy."""
        status_code = response.status_code
        message = self._response_message(response) or f"HTTP {status_code}"
        logger.debug(f"{path} failed with HTTP {status_code}: {message}")

        if status_code in (401, 403):
            return AuthError(message, path=path, status_code=status_code, **context)
        if status_code == 404:
            return NotFoundError(message, path=path, status_code=status_code, **context)
        if 400 <= status_code < 500:
            return rejection(message, path=path, status_code=status_code, **context)
        return NetworkError(message, path=path, status_code=status_code, **context)

    @staticmethod
    def _response_message(response: httpx.Response) -> str | None:
        """Extract the backend's ``{"message": ...}`` text, if any."""
        try:
            body = response.json()
        except ValueError:
            return response.text.strip() or None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None

    @staticmethod
    def _parse(model: Any, data: Any, path: str) -> Any:
        """Validate a response object, treating schema mismatches as transport failures."""
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise NetworkError(
                f"Malformed {model.__name__} in response from {path}", path=path
            ) from e
