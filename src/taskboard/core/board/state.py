"""
In-memory board state.

BoardState holds the three status columns and is the single source of truth
for what the user sees. It does no I/O. Every operation runs to completion
synchronously, so no caller can observe a task sitting in two columns or in
none.

Invariant: every task id appears in at most one column, and each task's
status equals the status of the column holding it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from taskboard.core.board.models import (
    COLUMN_ORDER,
    BoardAction,
    BoardChange,
    Column,
    resolve_column,
)
from taskboard.core.tasks.models import Task, TaskStatus

logger = logging.getLogger(__name__)

BoardListener = Callable[[BoardChange], None]


class BoardState:
    """
    Ordered columns of tasks, addressed by task identifier.

    Newly inserted tasks go to the head of their column (most recent first).
    Operations on identifiers that are not on the board are no-ops.

    Example:
        >>> board = BoardState()
        >>> board.insert(Task(id="t1", title="Spec"))
        >>> board.relocate("t1", TaskStatus.DONE).status
        <TaskStatus.DONE: 'done'>
        >>> [c.task_ids for c in board.snapshot()]
        [[], [], ['t1']]
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._columns: dict[TaskStatus, list[Task]] = {s: [] for s in COLUMN_ORDER}
        self._listeners: list[BoardListener] = []
        if tasks is not None:
            self._fill(tasks)

    # -------------------- observers --------------------

    def subscribe(self, listener: BoardListener) -> Callable[[], None]:
        """
        Register a listener called after every mutation.

        Returns:
            A callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: BoardChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(f"Board listener failed on {change.action.value}")

    # -------------------- mutations --------------------

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the whole board, keeping the given order within each column."""
        for column in self._columns.values():
            column.clear()
        self._fill(tasks)
        self._notify(BoardChange(BoardAction.LOAD))

    def insert(self, task: Task) -> None:
        """
        Place a task at the head of the column matching its status.

        A task already on the board with the same id is removed first.

        Raises:
            ValueError: If the task has no identifier
        """
        task_id = self._require_id(task)
        self._detach(task_id)
        self._columns[task.status].insert(0, task)
        self._notify(BoardChange(BoardAction.INSERT, task_id, task.status))

    def remove(self, task_id: str) -> Task | None:
        """
        Remove a task from whichever column holds it.

        Returns:
            The removed task, or None if it was not on the board
        """
        found = self._detach(task_id)
        if found is None:
            return None
        status, _, task = found
        self._notify(BoardChange(BoardAction.REMOVE, task_id, status))
        return task

    def relocate(self, task_id: str, new_status: TaskStatus) -> Task | None:
        """
        Move a task to another column, overwriting its status.

        Returns:
            The task as it now sits on the board, or None if it was not found
        """
        location = self._locate(task_id)
        if location is None:
            return None
        status, index = location
        if status == new_status:
            return self._columns[status][index]
        task = self._columns[status].pop(index)
        moved = task.with_status(new_status)
        self._columns[new_status].insert(0, moved)
        self._notify(BoardChange(BoardAction.RELOCATE, task_id, new_status))
        return moved

    def replace(self, task_id: str, task: Task) -> None:
        """
        Swap in the canonical version of a task.

        Removes any task with ``task_id`` and inserts the replacement in the
        column matching its status. If the column is unchanged the task keeps
        its position; otherwise it goes to the head of the new column.
        """
        if task.id is None:
            task = task.model_copy(update={"id": task_id})
        found = self._detach(task_id)
        if task.id != task_id:
            self._detach(task.id)

        column = self._columns[task.status]
        if found is not None and found[0] == task.status:
            column.insert(min(found[1], len(column)), task)
        else:
            column.insert(0, task)
        self._notify(BoardChange(BoardAction.REPLACE, task.id, task.status))

    # -------------------- queries --------------------

    def snapshot(self) -> tuple[Column, ...]:
        """Return copies of all columns in board order."""
        return tuple(self.column(status) for status in COLUMN_ORDER)

    def column(self, status: TaskStatus) -> Column:
        """Return a copy of a single column."""
        return Column(
            id=status.value,
            title=status.column_title,
            status=status,
            tasks=[t.model_copy(deep=True) for t in self._columns[status]],
        )

    def column_for(self, column_id: str) -> Column | None:
        """Return a copy of the column with this id or display title, or None."""
        status = resolve_column(column_id)
        return self.column(status) if status is not None else None

    def get(self, task_id: str) -> Task | None:
        """Return a copy of the task with this id, or None."""
        location = self._locate(task_id)
        if location is None:
            return None
        status, index = location
        return self._columns[status][index].model_copy(deep=True)

    def status_of(self, task_id: str) -> TaskStatus | None:
        """Return the status (column) currently holding the task."""
        location = self._locate(task_id)
        return location[0] if location else None

    def tasks(self) -> list[Task]:
        """Return copies of all tasks in board order."""
        return [t.model_copy(deep=True) for s in COLUMN_ORDER for t in self._columns[s]]

    def counts(self) -> dict[TaskStatus, int]:
        return {status: len(self._columns[status]) for status in COLUMN_ORDER}

    def __len__(self) -> int:
        return sum(len(column) for column in self._columns.values())

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, str) and self._locate(task_id) is not None

    def __str__(self) -> str:
        return ", ".join(
            f"{status.column_title}: {len(self._columns[status])} tasks" for status in COLUMN_ORDER
        )

    # -------------------- internals --------------------

    @staticmethod
    def _require_id(task: Task) -> str:
        if not task.id:
            raise ValueError(f"Cannot place task without an identifier: {task.title!r}")
        return task.id

    def _fill(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            task_id = self._require_id(task)
            self._detach(task_id)
            self._columns[task.status].append(task)

    def _locate(self, task_id: str) -> tuple[TaskStatus, int] | None:
        for status in COLUMN_ORDER:
            for index, task in enumerate(self._columns[status]):
                if task.id == task_id:
                    return status, index
        return None

    def _detach(self, task_id: str | None) -> tuple[TaskStatus, int, Task] | None:
        if not task_id:
            return None
        location = self._locate(task_id)
        if location is None:
            return None
        status, index = location
        return status, index, self._columns[status].pop(index)
