"""
Board data models.

Columns are fixed: one per TaskStatus, in board order. A column is keyed by
the status value ("todo", "in-progress", "done") and carries a display title.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from taskboard.core.tasks.models import Task, TaskStatus

# Board order, left to right.
COLUMN_ORDER: tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
)


def resolve_column(identifier: str | None) -> TaskStatus | None:
    """
    Resolve a column identifier or display title to its status.

    Accepts the stable column id ("in-progress") or the display title
    ("In Progress", case-insensitive).

    Returns:
        The matching status, or None if nothing matches
    """
    if not identifier:
        return None
    key = identifier.strip()
    for status in COLUMN_ORDER:
        if key == status.value or key.lower() == status.column_title.lower():
            return status
    return None


class Column(BaseModel):
    """
    A read-only view of one board column.

    Example:
        >>> column = Column(id="todo", title="To Do", status=TaskStatus.TODO)
        >>> column.count
        0
    """

    id: str = Field(..., description="Stable column identifier")
    title: str = Field(..., description="Display title")
    status: TaskStatus = Field(..., description="Status shared by every task in the column")
    tasks: list[Task] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.tasks)

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks if t.id]


class BoardAction(str, Enum):
    """Kinds of board mutation reported to observers."""

    LOAD = "load"
    INSERT = "insert"
    REMOVE = "remove"
    RELOCATE = "relocate"
    REPLACE = "replace"


@dataclass(frozen=True)
class BoardChange:
    """A single mutation applied to the board."""

    action: BoardAction
    task_id: str | None = None
    status: TaskStatus | None = None


class NotificationKind(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A user-facing message about a completed or failed mutation."""

    kind: NotificationKind
    title: str
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.kind == NotificationKind.ERROR
