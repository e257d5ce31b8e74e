"""
Session persistence.

Keeps the session context in a small JSON file so the CLI stays logged in
between invocations. The default location follows XDG:

    ~/.local/share/taskboard/session.json
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from taskboard.core.session.models import SessionContext

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """Error reading or writing the session file."""

    pass


def get_default_session_path() -> Path:
    """
    Get the default session file path.

    Returns:
        Path under $XDG_DATA_HOME (defaults to ~/.local/share)
    """
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if not xdg_data_home:
        xdg_data_home = os.path.expanduser("~/.local/share")
    return Path(xdg_data_home) / "taskboard" / "session.json"


class SessionStore:
    """
    Reads and writes the session file.

    Example:
        >>> store = SessionStore(tmp_path / "session.json")
        >>> session = store.load()          # empty if no file yet
        >>> store.save(session)
        >>> store.clear()
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else get_default_session_path()

    def load(self) -> SessionContext:
        """
        Read the session saved by a previous process.

        Returns:
            The saved session, or an empty one if there is no session file

        Raises:
            SessionStoreError: If the file exists but cannot be parsed
        """
        if not self.path.exists():
            return SessionContext()
        try:
            data = json.loads(self.path.read_text())
            return SessionContext.model_validate(data)
        except json.JSONDecodeError as e:
            raise SessionStoreError(f"Invalid JSON in session file {self.path}: {e}") from e
        except ValidationError as e:
            raise SessionStoreError(f"Invalid session file {self.path}: {e}") from e
        except OSError as e:
            raise SessionStoreError(f"Failed to read session file {self.path}: {e}") from e

    def save(self, session: SessionContext) -> None:
        """Write the session, readable by the owner only."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(session.model_dump(mode="json", by_alias=True), indent=2)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(content)
            # O_CREAT only sets the mode of a new file
            self.path.chmod(0o600)
        except OSError as e:
            raise SessionStoreError(f"Failed to write session file {self.path}: {e}") from e
        logger.debug(f"Saved session to {self.path}")

    def clear(self) -> None:
        """Delete the session file if present."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise SessionStoreError(f"Failed to remove session file {self.path}: {e}") from e
