"""
Task data models for taskboard.

Defines the Task model and related enums as they travel between the remote
task store and the board. The backend exposes its identifier as either
``_id`` or ``id`` depending on the call site; both are folded into the single
``id`` field here, at validation time, so nothing downstream has to look at
the raw payload again.
"""

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Primary identifier field first; the first non-empty one wins.
IDENTIFIER_FIELDS: tuple[str, ...] = ("_id", "id")


def resolve_identifier(data: Mapping[str, Any]) -> str | None:
    """
    Resolve "the" identifier of a raw backend object.

    Checks ``_id`` before ``id`` and returns the first non-empty value.

    Args:
        data: Raw JSON object from the backend

    Returns:
        Identifier as a string, or None if neither field is present

    Example:
        >>> resolve_identifier({"_id": "665f", "id": "legacy"})
        '665f'
        >>> resolve_identifier({"id": "t1"})
        't1'
    """
    for field_name in IDENTIFIER_FIELDS:
        value = data.get(field_name)
        if value is not None and value != "":
            return str(value)
    return None


class TaskStatus(str, Enum):
    """Task status values, one per board column."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @property
    def column_title(self) -> str:
        """Display title of the column holding tasks with this status."""
        return _COLUMN_TITLES[self]


_COLUMN_TITLES: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IdentifiedModel(BaseModel):
    """Base for backend objects whose identifier may arrive as ``_id`` or ``id``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, description="Backend-assigned identifier")

    @model_validator(mode="before")
    @classmethod
    def normalize_identifier(cls, data: Any) -> Any:
        """Fold ``_id``/``id`` into a single ``id`` key."""
        if not isinstance(data, Mapping):
            return data
        normalized = {k: v for k, v in data.items() if k not in IDENTIFIER_FIELDS}
        normalized["id"] = resolve_identifier(data)
        return normalized


class Assignee(IdentifiedModel):
    """Reference to a user assigned to a task, with display fields."""

    name: str = ""
    email: str = ""
    avatar: str = ""


class User(IdentifiedModel):
    """
    A user of the board.

    Owned by the backend; the client only holds read-only copies (the
    password field is never part of the payload).
    """

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    avatar: str = Field(default="", description="Avatar URL")
    role: str | None = None
    phone: str | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)

    def as_assignee(self) -> Assignee:
        """Return the assignee reference for this user."""
        return Assignee(id=self.id, name=self.name, email=self.email, avatar=self.avatar)


def _coerce_due_date(value: Any) -> Any:
    # The backend stores full datetimes; only the calendar date matters here.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


def _coerce_assignees(value: Any) -> Any:
    # Unpopulated references arrive as bare identifier strings.
    if isinstance(value, list):
        return [{"id": item} if isinstance(item, str) else item for item in value]
    return value


class Task(IdentifiedModel):
    """
    A task on the board.

    Example:
        >>> task = Task.model_validate(
        ...     {"_id": "t1", "title": "Spec", "priority": "high", "dueDate": "2024-06-01"}
        ... )
        >>> task.id, task.status, task.due_date
        ('t1', <TaskStatus.TODO: 'todo'>, datetime.date(2024, 6, 1))
    """

    # Fields the user may change through the edit form, in wire order.
    EDITABLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "title",
        "description",
        "status",
        "priority",
        "due_date",
        "assignees",
    )

    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(default="", description="Task description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Current column")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: date | None = Field(default=None, alias="dueDate")
    assignees: list[Assignee] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: Any) -> Any:
        return _coerce_due_date(v)

    @field_validator("assignees", mode="before")
    @classmethod
    def validate_assignees(cls, v: Any) -> Any:
        return _coerce_assignees(v)

    @property
    def assignee_ids(self) -> list[str]:
        """Identifiers of assigned users, skipping unresolved references."""
        return [a.id for a in self.assignees if a.id]

    def with_status(self, status: TaskStatus) -> "Task":
        """Return a copy of this task with a different status."""
        return self.model_copy(update={"status": status})

    def changed_fields(self, other: "Task") -> list[str]:
        """
        List editable fields whose values differ from ``other``.

        Assignees are compared by identifier only; display fields of a user
        are not something the edit form can change.
        """
        changed = []
        for name in self.EDITABLE_FIELDS:
            if name == "assignees":
                if self.assignee_ids != other.assignee_ids:
                    changed.append(name)
            elif getattr(self, name) != getattr(other, name):
                changed.append(name)
        return changed

    def to_payload(self, fields: list[str] | tuple[str, ...] | None = None) -> dict[str, Any]:
        """
        Serialize editable fields into a JSON request body.

        Args:
            fields: Field names to include (defaults to all editable fields)

        Returns:
            Dict keyed by wire names (``dueDate``), assignees as id list
        """
        include = set(fields or self.EDITABLE_FIELDS)
        payload = self.model_dump(mode="json", by_alias=True, include=include)
        if "assignees" in include:
            payload["assignees"] = self.assignee_ids
        return payload


class TaskDraft(BaseModel):
    """User-supplied fields of a task before the backend assigns an identifier."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(default="")
    status: TaskStatus = Field(default=TaskStatus.TODO)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: date | None = Field(default=None, alias="dueDate")
    assignee_ids: list[str] = Field(default_factory=list, alias="assignees")

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: Any) -> Any:
        return _coerce_due_date(v)

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the create-task request body."""
        return self.model_dump(mode="json", by_alias=True)
