"""
Tests for configuration loading and .env layering.
"""

import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from taskboard.core.config import (
    ApiConfig,
    TaskboardConfig,
    get_project_config_path,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from taskboard.core.config.loader import apply_env_overrides, deep_merge


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestDefaults:
    def test_defaults(self):
        config = load_config(use_cache=False)

        assert config.api.base_url == "http://localhost:3001/api"
        assert config.api.timeout_seconds == 30.0
        assert config.session.path is None

    def test_base_url_trailing_slash_stripped(self):
        assert ApiConfig(base_url="https://tasks.example.com/api/").base_url == (
            "https://tasks.example.com/api"
        )

    def test_base_url_requires_http(self):
        with pytest.raises(ValidationError):
            ApiConfig(base_url="ftp://tasks.example.com")

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            ApiConfig(timeout_seconds=0)

    def test_unknown_keys_ignored(self):
        assert TaskboardConfig(theme="dark").api.base_url == "http://localhost:3001/api"


class TestLayering:
    def test_user_then_project(self, tmp_path):
        write_json(
            get_user_config_path(),
            {"api": {"base_url": "http://user.test/api", "timeout_seconds": 5}},
        )
        write_json(get_project_config_path(tmp_path), {"api": {"base_url": "http://project.test/api"}})

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.api.base_url == "http://project.test/api"
        assert config.api.timeout_seconds == 5

    def test_env_wins(self, tmp_path, monkeypatch):
        write_json(get_project_config_path(tmp_path), {"api": {"base_url": "http://project.test/api"}})
        monkeypatch.setenv("TASKBOARD_API_URL", "http://env.test/api")
        monkeypatch.setenv("TASKBOARD_TIMEOUT", "2.5")
        monkeypatch.setenv("TASKBOARD_SESSION_FILE", str(tmp_path / "s.json"))

        config = load_config(project_dir=tmp_path, use_cache=False)

        assert config.api.base_url == "http://env.test/api"
        assert config.api.timeout_seconds == 2.5
        assert config.session.path == tmp_path / "s.json"

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_bad_timeout_env_ignored(self, monkeypatch, value):
        monkeypatch.setenv("TASKBOARD_TIMEOUT", value)

        assert load_config(use_cache=False).api.timeout_seconds == 30.0

    def test_invalid_json_skipped(self, tmp_path):
        get_project_config_path(tmp_path).write_text("{oops")

        assert load_config(project_dir=tmp_path, use_cache=False).api.timeout_seconds == 30.0

    def test_cache(self, tmp_path):
        first = load_config()
        write_json(get_project_config_path(tmp_path), {"api": {"timeout_seconds": 1}})

        assert load_config() is first
        assert load_config(use_cache=False).api.timeout_seconds == 1


class TestHelpers:
    def test_deep_merge(self):
        merged = deep_merge({"api": {"a": 1, "b": 2}, "x": 1}, {"api": {"b": 3}})

        assert merged == {"api": {"a": 1, "b": 3}, "x": 1}

    def test_env_overrides_do_not_mutate_input(self, monkeypatch):
        monkeypatch.setenv("TASKBOARD_API_URL", "http://env.test/api")
        original = {"api": {"base_url": "http://a.test"}}

        apply_env_overrides(original)

        assert original == {"api": {"base_url": "http://a.test"}}


class TestLayeredEnv:
    def test_project_overrides_user_but_not_shell(self, tmp_path, monkeypatch):
        user_env = tmp_path / "user.env"
        project = tmp_path / "proj"
        project.mkdir()
        user_env.write_text("TASKBOARD_API_URL=http://user.test/api\nTASKBOARD_TIMEOUT=7\n")
        (project / ".env").write_text("TASKBOARD_API_URL=http://project.test/api\n")
        monkeypatch.setenv("TASKBOARD_SESSION_FILE", "/from/shell")
        (project / ".env.local").write_text("TASKBOARD_SESSION_FILE=/from/file\n")
        # monkeypatch restores these after the test
        monkeypatch.setenv("TASKBOARD_API_URL", "placeholder")
        monkeypatch.delenv("TASKBOARD_API_URL")
        monkeypatch.setenv("TASKBOARD_TIMEOUT", "placeholder")
        monkeypatch.delenv("TASKBOARD_TIMEOUT")

        applied = load_layered_env(project_dir=project, user_env_paths=[user_env])

        assert os.environ["TASKBOARD_API_URL"] == "http://project.test/api"
        assert os.environ["TASKBOARD_TIMEOUT"] == "7"
        assert os.environ["TASKBOARD_SESSION_FILE"] == "/from/shell"
        assert "TASKBOARD_SESSION_FILE" not in applied
