"""
Shared wiring for CLI commands.

Builds the config, session, store client and controller a command needs,
and renders controller notifications to the console.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import typer
from rich.console import Console

from taskboard.cli.errors import ExitCode, print_error, print_not_logged_in_error
from taskboard.core.board.controller import TaskLifecycleController
from taskboard.core.board.models import Notification, NotificationKind
from taskboard.core.config import TaskboardConfig, load_config
from taskboard.core.session import (
    AuthService,
    SessionContext,
    SessionStore,
    SessionStoreError,
)
from taskboard.core.store.client import TaskStoreClient

console = Console()

_NOTIFICATION_STYLES = {
    NotificationKind.INFO: "cyan",
    NotificationKind.SUCCESS: "green",
    NotificationKind.WARNING: "yellow",
    NotificationKind.ERROR: "red",
}


def print_notification(notification: Notification) -> None:
    """Render a controller notification."""
    style = _NOTIFICATION_STYLES[notification.kind]
    console.print(f"[{style}]{notification.title}:[/{style}] {notification.message}")


def local_auth() -> AuthService:
    """Auth service for commands that only read or clear the saved session."""
    return AuthService(None, SessionContext(), SessionStore(load_config().session.path))


def build_client(config: TaskboardConfig, session: SessionContext) -> TaskStoreClient:
    """Create the store client for a command."""
    return TaskStoreClient(
        config.api.base_url,
        session,
        timeout=config.api.timeout_seconds,
    )


@dataclass
class Workspace:
    """Everything a command needs to talk to the board."""

    config: TaskboardConfig
    session: SessionContext
    client: TaskStoreClient
    auth: AuthService
    controller: TaskLifecycleController


def restore_session(auth: AuthService) -> SessionContext:
    """Restore the saved session, exiting with a readable error if it is corrupt."""
    try:
        return auth.restore()
    except SessionStoreError as e:
        print_error(
            "Could not read saved session",
            reason=str(e),
            solution="taskboard logout  # then log in again",
        )
        raise typer.Exit(ExitCode.USER_ERROR)


@asynccontextmanager
async def open_workspace(*, require_auth: bool = True) -> AsyncIterator[Workspace]:
    """
    Open a client session for one command.

    Args:
        require_auth: Exit with a login hint when there is no saved session
    """
    config = load_config()
    session = SessionContext()
    client = build_client(config, session)
    async with client:
        auth = AuthService(client, session, SessionStore(config.session.path))
        restore_session(auth)
        if require_auth and not session.is_authenticated:
            print_not_logged_in_error()
            raise typer.Exit(ExitCode.USER_ERROR)

        controller = TaskLifecycleController(client)
        controller.on_notification(print_notification)
        yield Workspace(
            config=config,
            session=session,
            client=client,
            auth=auth,
            controller=controller,
        )
