"""
Taskboard CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging

import typer
from rich.console import Console

from taskboard import __version__
from taskboard.cli import auth, board
from taskboard.cli.errors import ExitCode
from taskboard.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_BOARD = "Work with the Board"
PANEL_ACCOUNT = "Manage Your Account"

# Create the main Typer app
app = typer.Typer(
    name="taskboard",
    help="Collaborative task board in your terminal",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Taskboard - collaborative task board.

    Tasks live on a shared server and are shown in three columns:
    To Do, In Progress and Done.

    Quick Start:
        1. taskboard login                    # Log in (or: taskboard register)
        2. taskboard create "Write the spec"  # Create a task
        3. taskboard board                    # See the board
           taskboard calendar                 # Or see what is due this month
        4. taskboard move <id> done           # Move a task

    Configuration:
        TASKBOARD_API_URL        Task store base URL
        TASKBOARD_TIMEOUT        Request timeout in seconds
        TASKBOARD_SESSION_FILE   Where the login session is kept
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    ctx.obj = {"debug": debug}


# =============================================================================
# Work with the Board
# =============================================================================

app.command(name="board", rich_help_panel=PANEL_BOARD)(board.board)
app.command(name="calendar", rich_help_panel=PANEL_BOARD)(board.calendar)
app.command(name="create", rich_help_panel=PANEL_BOARD)(board.create)
app.command(name="edit", rich_help_panel=PANEL_BOARD)(board.edit)
app.command(name="delete", rich_help_panel=PANEL_BOARD)(board.delete)
app.command(name="move", rich_help_panel=PANEL_BOARD)(board.move)
app.command(name="users", rich_help_panel=PANEL_BOARD)(board.users)


# =============================================================================
# Manage Your Account
# =============================================================================

app.command(name="login", rich_help_panel=PANEL_ACCOUNT)(auth.login)
app.command(name="register", rich_help_panel=PANEL_ACCOUNT)(auth.register)
app.command(name="logout", rich_help_panel=PANEL_ACCOUNT)(auth.logout)
app.command(name="whoami", rich_help_panel=PANEL_ACCOUNT)(auth.whoami)


@app.command(rich_help_panel=PANEL_ACCOUNT)
def version() -> None:
    """Show taskboard version and exit."""
    console.print(f"taskboard version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        raise SystemExit(ExitCode.SIGINT)


__all__ = ["app", "cli_main"]
