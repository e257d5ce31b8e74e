"""
Taskboard CLI - login, registration and session commands.
"""

import asyncio

import typer
from rich.console import Console

from taskboard.cli.context import local_auth, open_workspace, restore_session
from taskboard.cli.errors import ExitCode, print_error, print_store_error
from taskboard.core.session import SessionStoreError
from taskboard.core.store.exceptions import TaskStoreError

console = Console()


async def _login(email: str, password: str) -> None:
    async with open_workspace(require_auth=False) as ws:
        try:
            user = await ws.auth.login(email, password)
        except TaskStoreError as e:
            print_error("Invalid credentials", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR)
        except SessionStoreError as e:
            print_error("Logged in, but could not save the session", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(f"[green]Welcome back![/green] Logged in as {user.name}")


async def _register(name: str, email: str, password: str) -> None:
    async with open_workspace(require_auth=False) as ws:
        try:
            user = await ws.auth.register(name, email, password)
        except TaskStoreError as e:
            print_store_error("register", e)
            raise typer.Exit(ExitCode.GENERAL_ERROR)
        except SessionStoreError as e:
            print_error("Registered, but could not save the session", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print(f"[green]Welcome![/green] Account created for {user.email}")


def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Account password"
    ),
) -> None:
    """
    Log in and remember the session.

    Examples:
        taskboard login --email ada@example.com
    """
    asyncio.run(_login(email, password))


def register(
    name: str = typer.Option(..., "--name", "-n", prompt=True, help="Display name"),
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Account password",
    ),
) -> None:
    """
    Create an account and log in as it.

    Examples:
        taskboard register --name "Ada Lovelace" --email ada@example.com
    """
    asyncio.run(_register(name, email, password))


def logout() -> None:
    """Forget the saved session."""
    try:
        local_auth().logout()
    except SessionStoreError as e:
        print_error("Could not remove the session file", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print("[green]Goodbye![/green] Logged out successfully")


def whoami() -> None:
    """Show the logged-in user."""
    session = restore_session(local_auth())
    if not session.is_authenticated or session.user is None:
        console.print("[dim]Not logged in[/dim]")
        raise typer.Exit(ExitCode.USER_ERROR)
    console.print(f"{session.user.name} <{session.user.email}>")
