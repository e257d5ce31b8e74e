"""
Board reconciliation engine.

BoardState holds the columns, TaskLifecycleController applies mutations
against the task store (optimistically for moves, via MoveOperation), and
DragAdapter turns drag events into moves. group_by_due_date builds the
calendar view.
"""

from taskboard.core.board.controller import TaskLifecycleController, failure_reason
from taskboard.core.board.drag import DragAdapter, DragEndEvent
from taskboard.core.board.due_dates import CalendarMonth, group_by_due_date, parse_month
from taskboard.core.board.models import (
    COLUMN_ORDER,
    BoardAction,
    BoardChange,
    Column,
    Notification,
    NotificationKind,
    resolve_column,
)
from taskboard.core.board.moves import InvalidTransitionError, MoveOperation, MoveState
from taskboard.core.board.state import BoardState

__all__ = [
    # State
    "BoardState",
    "BoardAction",
    "BoardChange",
    "Column",
    "COLUMN_ORDER",
    "resolve_column",
    # Lifecycle
    "TaskLifecycleController",
    "Notification",
    "NotificationKind",
    "failure_reason",
    "MoveOperation",
    "MoveState",
    "InvalidTransitionError",
    # Drag
    "DragAdapter",
    "DragEndEvent",
    # Calendar
    "CalendarMonth",
    "group_by_due_date",
    "parse_month",
]
