"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import TaskboardConfig

logger = logging.getLogger(__name__)

# Cache so repeated commands in one process share a single load
_config_cache: TaskboardConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Path to ~/.config/taskboard/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "taskboard" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """Path to .taskboard.json in the given directory (defaults to cwd)."""
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".taskboard.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two dictionaries, ``override`` winning.

    Example:
        >>> deep_merge({"api": {"base_url": "a", "timeout_seconds": 5}}, {"api": {"base_url": "b"}})
        {'api': {'base_url': 'b', 'timeout_seconds': 5}}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON object from a file.

    Returns:
        Parsed dict, or None if the file is missing or not a JSON object
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None
    if isinstance(data, dict):
        return data
    logger.warning(f"Ignoring config at {path}: expected a JSON object")
    return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides.

    Supported env vars:
        TASKBOARD_API_URL - overrides api.base_url
        TASKBOARD_TIMEOUT - overrides api.timeout_seconds
        TASKBOARD_SESSION_FILE - overrides session.path
    """
    result = copy.deepcopy(config_dict)

    if api_url := os.environ.get("TASKBOARD_API_URL"):
        result.setdefault("api", {})["base_url"] = api_url

    if timeout_str := os.environ.get("TASKBOARD_TIMEOUT"):
        try:
            timeout = float(timeout_str)
        except ValueError:
            logger.warning(f"Invalid TASKBOARD_TIMEOUT value '{timeout_str}', ignoring")
        else:
            if timeout <= 0:
                logger.warning(f"TASKBOARD_TIMEOUT must be > 0, got {timeout}, ignoring")
            else:
                result.setdefault("api", {})["timeout_seconds"] = timeout

    if session_file := os.environ.get("TASKBOARD_SESSION_FILE"):
        result.setdefault("session", {})["path"] = session_file

    return result


def get_default_config() -> dict[str, Any]:
    """Hardcoded defaults."""
    return {
        "api": {"base_url": "http://localhost:3001/api", "timeout_seconds": 30.0},
        "session": {},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> TaskboardConfig:
    """
    Load configuration with multi-layer merging.

    Precedence (highest to lowest):
        1. Environment variables (TASKBOARD_*)
        2. Project config (.taskboard.json)
        3. User config (~/.config/taskboard/config.json)
        4. Hardcoded defaults

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = TaskboardConfig(**merged)
    _config_cache = config
    return config


def clear_cache() -> None:
    """Forget the cached config (tests and long-running processes)."""
    global _config_cache
    _config_cache = None
