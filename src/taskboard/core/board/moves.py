"""
Optimistic move state machine.

A drag-and-drop move is the one mutation applied to the board before the
backend confirms it. Each move is tracked by a MoveOperation:

    IDLE -> OPTIMISTICALLY_RELOCATED -> CONFIRMED
                                     -> ROLLED_BACK

CONFIRMED and ROLLED_BACK are terminal. The operation drives the board
itself, so the whole protocol can be exercised without a UI or a network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from taskboard.core.board.state import BoardState
from taskboard.core.tasks.models import Task, TaskStatus

logger = logging.getLogger(__name__)


class MoveState(str, Enum):
    """States of a single move operation."""

    IDLE = "idle"
    OPTIMISTICALLY_RELOCATED = "optimistically_relocated"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


class InvalidTransitionError(Exception):
    """Raised when a move operation is driven out of order."""

    pass


@dataclass
class MoveOperation:
    """
    One optimistic move of a task between columns.

    Example:
        >>> board = BoardState([Task(id="t1", title="Spec")])
        >>> op = MoveOperation("t1", TaskStatus.TODO, TaskStatus.DONE)
        >>> op.relocate(board).status
        <TaskStatus.DONE: 'done'>
        >>> op.roll_back(board)
        >>> board.status_of("t1"), op.state
        (<TaskStatus.TODO: 'todo'>, <MoveState.ROLLED_BACK: 'rolled_back'>)
    """

    VALID_TRANSITIONS = {
        MoveState.IDLE: (MoveState.OPTIMISTICALLY_RELOCATED,),
        MoveState.OPTIMISTICALLY_RELOCATED: (MoveState.CONFIRMED, MoveState.ROLLED_BACK),
        MoveState.CONFIRMED: (),
        MoveState.ROLLED_BACK: (),
    }

    task_id: str
    from_status: TaskStatus
    to_status: TaskStatus
    state: MoveState = MoveState.IDLE
    error: BaseException | None = None
    history: list[MoveState] = field(default_factory=lambda: [MoveState.IDLE])

    @property
    def is_terminal(self) -> bool:
        return not self.VALID_TRANSITIONS[self.state]

    def _transition(self, target: MoveState) -> None:
        if target not in self.VALID_TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Move of {self.task_id} cannot go from {self.state.value} to {target.value}"
            )
        logger.debug(f"Move {self.task_id}: {self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)

    def relocate(self, board: BoardState) -> Task | None:
        """Apply the move to the board ahead of confirmation."""
        self._transition(MoveState.OPTIMISTICALLY_RELOCATED)
        return board.relocate(self.task_id, self.to_status)

    def confirm(self, board: BoardState, canonical: Task) -> None:
        """Sync the board with the backend's canonical task."""
        self._transition(MoveState.CONFIRMED)
        board.replace(self.task_id, canonical)

    def roll_back(self, board: BoardState, error: BaseException | None = None) -> None:
        """Return the task to the column it was dragged from."""
        self._transition(MoveState.ROLLED_BACK)
        self.error = error
        logger.warning(
            f"Rolling back move of {self.task_id} to {self.from_status.value}: {error}"
        )
        board.relocate(self.task_id, self.from_status)
