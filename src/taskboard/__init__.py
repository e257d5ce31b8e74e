"""
Taskboard - collaborative task board client.

Keeps a columnar view of tasks (To Do / In Progress / Done) in sync with a
remote task store, with optimistic drag-and-drop moves and rollback.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from taskboard.core.config.models import TaskboardConfig
from taskboard.core.tasks.models import Task, TaskDraft, TaskPriority, TaskStatus

__all__ = [
    "TaskboardConfig",
    "Task",
    "TaskDraft",
    "TaskPriority",
    "TaskStatus",
    "__version__",
]
