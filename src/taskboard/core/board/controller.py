"""
Task lifecycle controller.

The controller is the only writer of BoardState. It runs each user intent
(create, update, delete, move) as a multi-step operation against the task
store and the board:

- create, update and delete are confirm-then-apply: the board changes only
  after the store succeeds, so a failure leaves it exactly as it was.
- move is optimistic: the board changes immediately and is rolled back if
  the store rejects the new status (see ``MoveOperation``).

Every failure is reported as an error Notification and then re-raised.

Ordering: operations on different tasks may run concurrently. Two operations
on the same task are not serialized; whichever store response arrives last
determines what the board shows for that task.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from taskboard.core.board.models import Notification, NotificationKind
from taskboard.core.board.moves import MoveOperation
from taskboard.core.board.state import BoardState
from taskboard.core.realtime.channel import HintKind, NotificationChannel
from taskboard.core.store.backend import TaskStore
from taskboard.core.store.exceptions import (
    AuthError,
    IdentifierMissing,
    NetworkError,
    NotFoundError,
    ValidationError,
)
from taskboard.core.tasks.models import Task, TaskDraft, TaskStatus

logger = logging.getLogger(__name__)

NotificationListener = Callable[[Notification], None]


def failure_reason(error: BaseException) -> str:
    """Short, user-facing reason for a failed operation."""
    if isinstance(error, asyncio.CancelledError):
        return "cancelled before the server answered"
    if isinstance(error, IdentifierMissing):
        return "task ID not found"
    if isinstance(error, AuthError):
        return "not authenticated"
    if isinstance(error, NotFoundError):
        return "task no longer exists"
    if isinstance(error, ValidationError):
        return "rejected by the server"
    if isinstance(error, NetworkError):
        return "could not reach the server"
    if isinstance(error, ValueError):
        return "task is not on the board"
    return "unexpected error"


class TaskLifecycleController:
    """
    Orchestrates task mutations against the store and the board.

    Example:
        >>> controller = TaskLifecycleController(store)
        >>> await controller.load()
        >>> task = await controller.create(TaskDraft(title="Spec", priority="high"))
        >>> await controller.move(task.id, TaskStatus.DONE)
    """

    def __init__(
        self,
        store: TaskStore,
        board: BoardState | None = None,
        *,
        channel: NotificationChannel | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            store: Remote task store
            board: Board to manage (a new empty board if omitted)
            channel: Optional hint channel to announce confirmed changes on
        """
        self.store = store
        self.board = board if board is not None else BoardState()
        self.channel = channel
        self._listeners: list[NotificationListener] = []

    # -------------------- notifications --------------------

    def on_notification(self, listener: NotificationListener) -> Callable[[], None]:
        """Register a listener for user-facing notifications."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: NotificationKind, title: str, message: str) -> None:
        notification = Notification(kind=kind, title=title, message=message)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed")

    def _fail(self, action: str, error: BaseException) -> None:
        logger.warning(f"Failed to {action} task: {error}")
        self._emit(
            NotificationKind.ERROR,
            "Error",
            f"Failed to {action} task: {failure_reason(error)}",
        )

    async def _announce(self, task_id: str | None) -> None:
        if self.channel is None:
            return
        try:
            await self.channel.publish(HintKind.TASK_UPDATED, {"taskId": task_id})
        except Exception as e:
            logger.warning(f"Could not announce update of {task_id}: {e}")

    # -------------------- operations --------------------

    async def load(self) -> list[Task]:
        """
        Fetch every task and replace the board with the result.

        Used at start-up, after re-authentication, and when a peer hints
        that something changed.
        """
        try:
            tasks = await self.store.list_tasks()
        except Exception as e:
            self._fail("load", e)
            raise
        self.board.load(tasks)
        logger.debug(f"Loaded board: {self.board}")
        return tasks

    refresh = load

    async def create(self, draft: TaskDraft) -> Task:
        """
        Create a task, then show it once the store has confirmed it.

        Returns:
            The canonical task

        Raises:
            TaskStoreError: Whatever the store raised; the board is untouched
        """
        try:
            task = await self.store.create_task(draft)
        except Exception as e:
            self._fail("create", e)
            raise
        self.board.insert(task)
        self._emit(NotificationKind.SUCCESS, "Task created", f'Created "{task.title}"')
        await self._announce(task.id)
        return task

    async def update(self, task: Task) -> Task:
        """
        Save an edited task, then swap in the canonical version.

        Only fields that differ from the board's copy are sent; the full
        editable field set is sent when there is no board copy or nothing
        differs. A status change moves the task to its new column.

        Raises:
            IdentifierMissing: If the task has no id (no request is made)
            TaskStoreError: Whatever the store raised; the board is untouched
        """
        try:
            if not task.id:
                raise IdentifierMissing("update")
            current = self.board.get(task.id)
            fields = task.changed_fields(current) if current is not None else []
            patch = task.to_payload(fields or None)
            canonical = await self.store.update_task(task.id, patch)
        except Exception as e:
            self._fail("update", e)
            raise
        self.board.replace(task.id, canonical)
        self._emit(NotificationKind.SUCCESS, "Task updated", f'Saved "{canonical.title}"')
        await self._announce(canonical.id)
        return canonical

    async def delete(self, task_id: str | None) -> str:
        """
        Delete a task, then remove it from the board.

        Returns:
            The store's acknowledgement message

        Raises:
            IdentifierMissing: If task_id is empty (no request is made)
            TaskStoreError: Whatever the store raised; the task stays visible
        """
        try:
            if not task_id:
                raise IdentifierMissing("deletion")
            message = await self.store.delete_task(task_id)
        except Exception as e:
            self._fail("delete", e)
            raise
        self.board.remove(task_id)
        self._emit(NotificationKind.SUCCESS, "Task deleted", message)
        await self._announce(task_id)
        return message

    async def move(self, task_id: str | None, new_status: TaskStatus) -> MoveOperation | None:
        """
        Move a task to another column, optimistically.

        The board shows the move before the store is called. On success the
        canonical task replaces the optimistic copy; on failure the task is
        put back in its original column and the error is re-raised.

        Returns:
            The finished MoveOperation, or None if the task already has
            ``new_status`` (nothing is sent)

        Raises:
            IdentifierMissing: If task_id is empty
            ValueError: If the task is not on the board
            TaskStoreError: Whatever the store raised, after rolling back
            asyncio.CancelledError: If cancelled while waiting for the store,
                after rolling back
        """
        if not task_id:
            error = IdentifierMissing("move")
            self._fail("move", error)
            raise error
        current = self.board.status_of(task_id)
        if current is None:
            error = ValueError(f"Task not on board: {task_id}")
            self._fail("move", error)
            raise error
        if current == new_status:
            logger.debug(f"Move of {task_id} to {new_status.value} is a no-op")
            return None

        operation = MoveOperation(task_id, current, new_status)
        operation.relocate(self.board)
        try:
            canonical = await self.store.update_task(task_id, {"status": new_status.value})
        except (Exception, asyncio.CancelledError) as e:
            operation.roll_back(self.board, e)
            self._fail("move", e)
            raise
        operation.confirm(self.board, canonical)
        self._emit(
            NotificationKind.SUCCESS,
            "Task Updated",
            f"Task moved to {new_status.column_title}",
        )
        await self._announce(task_id)
        return operation
