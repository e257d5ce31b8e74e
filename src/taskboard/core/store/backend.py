"""
Task store protocol.

Defines the TaskStore protocol the lifecycle controller talks to. The HTTP
TaskStoreClient implements it; tests substitute in-memory fakes.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from taskboard.core.tasks.models import Task, TaskDraft


@runtime_checkable
class TaskStore(Protocol):
    """
    Protocol for remote task persistence.

    Implementations are responsible for:
    - Assigning identifiers and timestamps on create
    - Returning the canonical task after create and update
    - Raising the errors in ``taskboard.core.store.exceptions`` on failure
    """

    async def list_tasks(self) -> list[Task]:
        """
        List every task visible to the current user.

        Raises:
            NetworkError, AuthError
        """
        ...

    async def create_task(self, draft: TaskDraft) -> Task:
        """
        Create a task.

        Returns:
            The canonical task with backend-assigned id and timestamps

        Raises:
            ValidationError, NetworkError
        """
        ...

    async def update_task(self, task_id: str | None, patch: Mapping[str, Any]) -> Task:
        """
        Apply a partial update.

        Returns:
            The canonical task after the update

        Raises:
            IdentifierMissing: If task_id is empty, before any I/O
            NotFoundError, NetworkError
        """
        ...

    async def delete_task(self, task_id: str | None) -> str:
        """
        Delete a task.

        Returns:
            Acknowledgement message

        Raises:
            IdentifierMissing: If task_id is empty, before any I/O
            NotFoundError, NetworkError
        """
        ...
