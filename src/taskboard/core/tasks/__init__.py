"""
Task data models.

Provides the Task, TaskDraft, User and Assignee models shared by the store
client, the board state and the lifecycle controller.
"""

from .models import (
    Assignee,
    Task,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    User,
    resolve_identifier,
)

__all__ = [
    "Assignee",
    "Task",
    "TaskDraft",
    "TaskPriority",
    "TaskStatus",
    "User",
    "resolve_identifier",
]
