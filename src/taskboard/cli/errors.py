"""
Standardized error handling and exit codes for the taskboard CLI.

Provides consistent error messages with actionable guidance and the exit
codes every command uses.
"""

from enum import IntEnum

from rich.console import Console

from taskboard.core.board.controller import failure_reason
from taskboard.core.store.exceptions import AuthError, TaskStoreError

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for taskboard CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """The remote store rejected or failed the operation."""

    USER_ERROR = 2
    """Bad input or missing login (actionable by the user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Not logged in",
        ...     reason="Task commands need a session token",
        ...     solution="taskboard login",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_not_logged_in_error() -> None:
    """Print error when a command needs a session and there is none."""
    print_error(
        "Not logged in",
        reason="Task commands need a session token from the task store",
        solution="taskboard login --email you@example.com",
    )


def print_task_not_found_error(task_id: str) -> None:
    """Print error when a task ID is not on the board."""
    print_error(
        f"Task not found: {task_id}",
        solution="taskboard board  # list task IDs",
    )


def print_invalid_target_error(target: str) -> None:
    """Print error when a move target is neither a column nor a task."""
    print_error(
        f"Invalid drop target: {target}",
        reason="Expected a column (todo, in-progress, done) or the ID of another task",
    )


def print_store_error(action: str, error: TaskStoreError) -> None:
    """Print error for a failed task store call."""
    solution = "taskboard login" if isinstance(error, AuthError) else None
    print_error(
        f"Failed to {action}: {failure_reason(error)}",
        reason=str(error),
        solution=solution,
    )
