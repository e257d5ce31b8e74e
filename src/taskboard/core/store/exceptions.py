"""
Exceptions raised by the remote task store client.

Exception Hierarchy:
    TaskStoreError (base)
    ├── NetworkError (transport failure, 5xx, undecodable response)
    ├── AuthError (missing, expired or rejected token)
    ├── ValidationError (backend rejected the payload, 4xx)
    ├── NotFoundError (identifier unknown to the backend)
    └── IdentifierMissing (client-side precondition, never reaches the network)

Example:
    >>> from taskboard.core.store.exceptions import NotFoundError
    >>> try:
    ...     raise NotFoundError("Task not found", task_id="t9", status_code=404)
    ... except NotFoundError as e:
    ...     print(f"{e} ({e.context['task_id']})")
    Task not found (t9)
"""


class TaskStoreError(Exception):
    """
    Base exception for all task store errors.

    Attributes:
        message: Human-readable error message
        context: Additional context (url, status_code, task_id, ...)
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message

    @property
    def status_code(self) -> int | None:
        """HTTP status code that triggered the error, if any."""
        code = self.context.get("status_code")
        return code if isinstance(code, int) else None


class NetworkError(TaskStoreError):
    """
    Transport or connectivity failure.

    Also raised for 5xx responses and response bodies that are not the JSON
    the contract promises. The originating httpx exception is preserved via
    ``__cause__``.
    """


class AuthError(TaskStoreError):
    """Missing, expired or invalid bearer token (401/403), or rejected credentials."""


class ValidationError(TaskStoreError):
    """The backend rejected the payload shape or content (4xx other than 401/403/404)."""


class NotFoundError(TaskStoreError):
    """The operation targeted an identifier the backend does not recognize."""


class IdentifierMissing(TaskStoreError):
    """
    An update or delete was attempted without an identifier.

    This is a programming error on the caller's side and is raised before
    any request is built.
    """

    def __init__(self, operation: str, **context: object) -> None:
        super().__init__(f"Task ID is required for {operation}", operation=operation, **context)
        self.operation = operation


__all__ = [
    "TaskStoreError",
    "NetworkError",
    "AuthError",
    "ValidationError",
    "NotFoundError",
    "IdentifierMissing",
]
