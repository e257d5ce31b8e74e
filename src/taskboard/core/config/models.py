"""
Configuration data models for taskboard.

These models define the structure of .taskboard.json and
~/.config/taskboard/config.json files, with validation via Pydantic.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiConfig(BaseModel):
    """
    Remote task store connection settings.
    """
    base_url: str = Field(
        default="http://localhost:3001/api",
        description="API root of the task store (routes live under /tasks, /users, /auth)"
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout in seconds"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


class SessionConfig(BaseModel):
    """
    Where the login session is kept between runs.
    """
    path: Optional[Path] = Field(
        default=None,
        description="Session file (defaults to $XDG_DATA_HOME/taskboard/session.json)"
    )


class TaskboardConfig(BaseModel):
    """
    Top-level taskboard configuration.

    Example:
        >>> config = TaskboardConfig()
        >>> config.api.base_url
        'http://localhost:3001/api'
    """
    model_config = ConfigDict(extra="ignore")

    api: ApiConfig = Field(default_factory=ApiConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
