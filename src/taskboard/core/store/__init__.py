"""
Remote task store access.

Provides the async HTTP client for the task board backend and the error
taxonomy it raises.
"""

from taskboard.core.store.backend import TaskStore
from taskboard.core.store.client import TaskStoreClient
from taskboard.core.store.exceptions import (
    AuthError,
    IdentifierMissing,
    NetworkError,
    NotFoundError,
    TaskStoreError,
    ValidationError,
)

__all__ = [
    "TaskStore",
    "TaskStoreClient",
    "TaskStoreError",
    "NetworkError",
    "AuthError",
    "ValidationError",
    "NotFoundError",
    "IdentifierMissing",
]
