"""
Taskboard CLI - board and task commands.

Every command loads the board from the task store first, then runs one
operation through the lifecycle controller. The controller reports the
outcome as a notification, which is printed as it happens.
"""

import asyncio
import json
from datetime import date, datetime
from itertools import zip_longest

import typer
from rich.console import Console
from rich.table import Table

from taskboard.cli.context import Workspace, open_workspace
from taskboard.cli.errors import (
    ExitCode,
    print_error,
    print_invalid_target_error,
    print_store_error,
    print_task_not_found_error,
)
from taskboard.core.board import (
    CalendarMonth,
    DragAdapter,
    DragEndEvent,
    group_by_due_date,
    parse_month,
)
from taskboard.core.store.exceptions import AuthError, TaskStoreError
from taskboard.core.tasks.models import (
    Assignee,
    Task,
    TaskDraft,
    TaskPriority,
    TaskStatus,
)

console = Console()

_PRIORITY_STYLES = {
    TaskPriority.LOW: "green",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "red",
}


def _store_failed(error: TaskStoreError) -> typer.Exit:
    # The controller has already printed the failure notification.
    if isinstance(error, AuthError):
        console.print("[cyan]→ Try:[/cyan] taskboard login")
    return typer.Exit(ExitCode.GENERAL_ERROR)


async def _load(ws: Workspace) -> None:
    try:
        await ws.controller.load()
    except TaskStoreError as e:
        raise _store_failed(e)


def _format_card(task: Task) -> str:
    style = _PRIORITY_STYLES[task.priority]
    lines = [f"[bold]{task.title}[/bold]", f"[dim]{task.id}[/dim]"]
    details = [f"[{style}]{task.priority.value}[/{style}]"]
    if task.due_date:
        details.append(f"due {task.due_date.isoformat()}")
    lines.append(" · ".join(details))
    names = [a.name for a in task.assignees if a.name]
    if names:
        lines.append(", ".join(names))
    return "\n".join(lines)


def _render_board(ws: Workspace) -> None:
    columns = ws.controller.board.snapshot()
    table = Table(show_header=True, header_style="bold", show_lines=True)
    for column in columns:
        table.add_column(f"{column.title} ({column.count})", min_width=24)
    for cards in zip_longest(*(column.tasks for column in columns)):
        table.add_row(*(_format_card(task) if task else "" for task in cards))
    console.print(table)


async def _board(json_output: bool) -> None:
    async with open_workspace() as ws:
        await _load(ws)
        if json_output:
            payload = [
                column.model_dump(mode="json", by_alias=True)
                for column in ws.controller.board.snapshot()
            ]
            console.print(json.dumps(payload, indent=2))
            return
        _render_board(ws)


def _format_entry(task: Task) -> str:
    style = _PRIORITY_STYLES[task.priority]
    return f"[{style}]{task.title}[/{style}] [dim]{task.id}[/dim]"


def _render_calendar(month: CalendarMonth, total: int) -> None:
    console.print(f"[bold]{month.title}[/bold] [dim]({total} tasks on the board)[/dim]")
    if not month.days:
        console.print(f"[dim]No tasks due in {month.title}[/dim]")
    else:
        table = Table(show_header=True, header_style="bold", show_lines=True)
        table.add_column("Day", style="cyan", no_wrap=True)
        table.add_column(f"Due ({month.count})", min_width=30)
        table.add_column("Column", style="dim")
        for day, tasks in month.days.items():
            table.add_row(
                day.strftime("%a %d"),
                "\n".join(_format_entry(t) for t in tasks),
                "\n".join(t.status.column_title for t in tasks),
            )
        console.print(table)
    if month.undated:
        console.print(f"[dim]{len(month.undated)} tasks without a due date[/dim]")


async def _calendar(year: int, month_number: int, json_output: bool) -> None:
    async with open_workspace() as ws:
        await _load(ws)
        tasks = ws.controller.board.tasks()
    month = group_by_due_date(tasks, year, month_number)

    if json_output:
        payload = {
            "month": f"{year:04d}-{month_number:02d}",
            "count": month.count,
            "days": {
                day.isoformat(): [t.model_dump(mode="json", by_alias=True) for t in day_tasks]
                for day, day_tasks in month.days.items()
            },
            "undated": [t.id for t in month.undated],
        }
        console.print(json.dumps(payload, indent=2))
        return
    _render_calendar(month, len(tasks))


async def _create(draft: TaskDraft) -> None:
    async with open_workspace() as ws:
        try:
            task = await ws.controller.create(draft)
        except TaskStoreError as e:
            raise _store_failed(e)
        console.print(f"[dim]{task.id}[/dim]")


async def _edit(task_id: str, changes: dict, assignee_ids: list[str] | None) -> None:
    async with open_workspace() as ws:
        await _load(ws)
        current = ws.controller.board.get(task_id)
        if current is None:
            print_task_not_found_error(task_id)
            raise typer.Exit(ExitCode.USER_ERROR)
        if assignee_ids is not None:
            changes["assignees"] = [Assignee(id=a) for a in assignee_ids]
        edited = Task.model_validate({**current.model_dump(), **changes})
        try:
            await ws.controller.update(edited)
        except TaskStoreError as e:
            raise _store_failed(e)


async def _delete(task_id: str) -> None:
    async with open_workspace() as ws:
        await _load(ws)
        if task_id not in ws.controller.board:
            print_task_not_found_error(task_id)
            raise typer.Exit(ExitCode.USER_ERROR)
        try:
            await ws.controller.delete(task_id)
        except TaskStoreError as e:
            raise _store_failed(e)


async def _move(task_id: str, target: str) -> None:
    async with open_workspace() as ws:
        await _load(ws)
        if task_id not in ws.controller.board:
            print_task_not_found_error(task_id)
            raise typer.Exit(ExitCode.USER_ERROR)
        adapter = DragAdapter(ws.controller)
        if adapter.resolve_target(target) is None:
            print_invalid_target_error(target)
            raise typer.Exit(ExitCode.USER_ERROR)
        adapter.drag_start(task_id)
        try:
            operation = await adapter.drag_end(DragEndEvent(active_id=task_id, over_id=target))
        except TaskStoreError as e:
            raise _store_failed(e)
        if operation is None:
            status = ws.controller.board.status_of(task_id)
            title = status.column_title if status else target
            console.print(f"[dim]Task {task_id} is already in {title}[/dim]")


async def _users(json_output: bool) -> None:
    async with open_workspace() as ws:
        try:
            users = await ws.client.list_users()
        except TaskStoreError as e:
            print_store_error("list users", e)
            raise typer.Exit(ExitCode.GENERAL_ERROR)

    if json_output:
        console.print(
            json.dumps([u.model_dump(mode="json") for u in users], indent=2)
        )
        return

    if not users:
        console.print("[dim]No users found[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Role")
    for user in users:
        table.add_row(user.id or "", user.name, user.email, user.role or "")
    console.print(table)


def board(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """
    Show the board: To Do, In Progress and Done.

    Examples:
        taskboard board
        taskboard board --json
    """
    asyncio.run(_board(json_output))


def calendar(
    month: str | None = typer.Option(
        None,
        "--month",
        "-m",
        help="Month to show (YYYY-MM, default: this month)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """
    Show tasks by due date, one month at a time.

    Examples:
        taskboard calendar
        taskboard calendar --month 2024-06
    """
    if month is None:
        today = date.today()
        year, month_number = today.year, today.month
    else:
        try:
            year, month_number = parse_month(month)
        except ValueError as e:
            print_error("Invalid month", reason=str(e))
            raise typer.Exit(ExitCode.USER_ERROR)
    asyncio.run(_calendar(year, month_number, json_output))


def create(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    status: TaskStatus = typer.Option(TaskStatus.TODO, "--status", "-s", help="Initial column"),
    priority: TaskPriority = typer.Option(
        TaskPriority.MEDIUM, "--priority", "-p", help="Task priority"
    ),
    due: datetime | None = typer.Option(
        None, "--due", formats=["%Y-%m-%d"], help="Due date (YYYY-MM-DD)"
    ),
    assignees: list[str] | None = typer.Option(
        None, "--assignee", "-a", help="User ID to assign (repeatable)"
    ),
) -> None:
    """
    Create a task.

    Examples:
        taskboard create "Write release notes"
        taskboard create "Fix login" --priority high --due 2024-06-01 -a 665f1c
    """
    if not title.strip():
        print_error("Invalid task", reason="Title cannot be empty")
        raise typer.Exit(ExitCode.USER_ERROR)
    try:
        draft = TaskDraft(
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due.date() if due else None,
            assignee_ids=assignees or [],
        )
    except ValueError as e:
        print_error("Invalid task", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    asyncio.run(_create(draft))


def edit(
    task_id: str = typer.Argument(..., help="Task ID"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="New description"
    ),
    status: TaskStatus | None = typer.Option(None, "--status", "-s", help="New column"),
    priority: TaskPriority | None = typer.Option(
        None, "--priority", "-p", help="New priority"
    ),
    due: datetime | None = typer.Option(
        None, "--due", formats=["%Y-%m-%d"], help="New due date (YYYY-MM-DD)"
    ),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    assignees: list[str] | None = typer.Option(
        None, "--assignee", "-a", help="Replace assignees with these user IDs (repeatable)"
    ),
) -> None:
    """
    Edit a task. Only the fields that changed are sent.

    Examples:
        taskboard edit 665f1c --title "Ship it" --priority high
        taskboard edit 665f1c --clear-due
    """
    changes: dict = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if status is not None:
        changes["status"] = status
    if priority is not None:
        changes["priority"] = priority
    if due is not None:
        changes["due_date"] = due.date()
    if clear_due:
        changes["due_date"] = None

    if not changes and assignees is None:
        print_error(
            "Nothing to change",
            solution="taskboard edit --help  # list editable fields",
        )
        raise typer.Exit(ExitCode.USER_ERROR)
    if title is not None and not title.strip():
        print_error("Invalid task", reason="Title cannot be empty")
        raise typer.Exit(ExitCode.USER_ERROR)

    asyncio.run(_edit(task_id, changes, assignees))


def delete(
    task_id: str = typer.Argument(..., help="Task ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """
    Delete a task.

    Examples:
        taskboard delete 665f1c --yes
    """
    if not yes:
        typer.confirm(f"Delete task {task_id}?", abort=True)
    asyncio.run(_delete(task_id))


def move(
    task_id: str = typer.Argument(..., help="Task ID"),
    target: str = typer.Argument(
        ...,
        help="Column (todo, in-progress, done, or its title) or the ID of a task in it",
    ),
) -> None:
    """
    Move a task to another column, as if dragged there.

    The board updates immediately and is rolled back if the server
    rejects the move.

    Examples:
        taskboard move 665f1c done
        taskboard move 665f1c "In Progress"
        taskboard move 665f1c 665f2a    # into the column holding 665f2a
    """
    asyncio.run(_move(task_id, target))


def users(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """
    List users that tasks can be assigned to.

    Examples:
        taskboard users
    """
    asyncio.run(_users(json_output))
