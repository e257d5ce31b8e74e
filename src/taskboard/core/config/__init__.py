"""
Configuration models and loading.

Pydantic models for taskboard configuration with multi-layer merging:
defaults < user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import ApiConfig, SessionConfig, TaskboardConfig

__all__ = [
    # Models
    "ApiConfig",
    "SessionConfig",
    "TaskboardConfig",
    # Loading
    "load_config",
    "clear_cache",
    "load_layered_env",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
]
