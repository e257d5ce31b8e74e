"""
Pytest configuration and shared fixtures.

Provides an in-memory task store with controllable failures and response
gating, a fake task store HTTP backend for ``httpx.MockTransport``, and
config/session isolation for CLI tests.
"""

import asyncio
import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest

from taskboard.core.config import clear_cache
from taskboard.core.session import SessionContext
from taskboard.core.store.exceptions import IdentifierMissing, NotFoundError
from taskboard.core.tasks.models import Task, TaskDraft, User

# ==============================================================================
# Task Fixtures
# ==============================================================================


def make_task(task_id: str, title: str | None = None, status: str = "todo", **fields: Any) -> Task:
    """Build a task the way the backend would return it."""
    return Task.model_validate(
        {"_id": task_id, "title": title or f"Task {task_id}", "status": status, **fields}
    )


@pytest.fixture
def sample_user():
    return User(id="u1", name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def sample_tasks():
    """Three tasks, one per column."""
    return [
        make_task("t1", "Write spec", "todo", priority="high"),
        make_task("t2", "Build board", "in-progress"),
        make_task("t3", "Ship it", "done", priority="low"),
    ]


# ==============================================================================
# In-memory Task Store
# ==============================================================================


class FakeTaskStore:
    """
    In-memory TaskStore.

    ``fail[op]`` makes the next call of ``op`` raise; ``gate(task_id)``
    holds update responses for that task until the returned event is set.
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[str, Task] = {t.id: t for t in tasks or []}
        self.fail: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, Any]] = []
        self._next_id = 100

    def gate(self, task_id: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[task_id] = event
        return event

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise self.fail.pop(op)

    async def list_tasks(self) -> list[Task]:
        self.calls.append(("list", None))
        self._maybe_fail("list")
        return [t.model_copy(deep=True) for t in self.tasks.values()]

    async def create_task(self, draft: TaskDraft) -> Task:
        self.calls.append(("create", draft))
        self._maybe_fail("create")
        self._next_id += 1
        now = datetime.now(timezone.utc)
        task = Task.model_validate(
            {**draft.to_payload(), "_id": f"t{self._next_id}", "createdAt": now, "updatedAt": now}
        )
        self.tasks[task.id] = task
        return task.model_copy(deep=True)

    async def update_task(self, task_id: str | None, patch: Mapping[str, Any]) -> Task:
        if not task_id:
            raise IdentifierMissing("update")
        self.calls.append(("update", (task_id, dict(patch))))
        if task_id in self.gates:
            await self.gates.pop(task_id).wait()
        self._maybe_fail("update")
        if task_id not in self.tasks:
            raise NotFoundError("Task not found", task_id=task_id, status_code=404)
        current = self.tasks[task_id].model_dump(by_alias=True)
        updated = Task.model_validate(
            {**current, **patch, "updatedAt": datetime.now(timezone.utc)}
        )
        self.tasks[task_id] = updated
        return updated.model_copy(deep=True)

    async def delete_task(self, task_id: str | None) -> str:
        if not task_id:
            raise IdentifierMissing("deletion")
        self.calls.append(("delete", task_id))
        self._maybe_fail("delete")
        if self.tasks.pop(task_id, None) is None:
            raise NotFoundError("Task not found", task_id=task_id, status_code=404)
        return "Task deleted"

    def calls_of(self, op: str) -> list[Any]:
        return [args for name, args in self.calls if name == op]


@pytest.fixture
def store(sample_tasks):
    return FakeTaskStore(sample_tasks)


# ==============================================================================
# Fake HTTP backend
# ==============================================================================


class FakeBackend:
    """
    Minimal task store HTTP backend for ``httpx.MockTransport``.

    Speaks the wire format (``_id``, ``dueDate``, ``{"message": ...}``
    errors) and records every request it sees.
    """

    TOKEN = "token-123"

    def __init__(self) -> None:
        self.tasks: dict[str, dict[str, Any]] = {}
        self.users: dict[str, dict[str, Any]] = {
            "u1": {
                "_id": "u1",
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "secret",
                "avatar": "https://example.com/ada.png",
                "role": "Engineer",
            }
        }
        self.requests: list[httpx.Request] = []
        self._next_id = 0

    def add_task(self, **fields: Any) -> dict[str, Any]:
        self._next_id += 1
        task = {
            "_id": f"t{self._next_id}",
            "title": "Untitled",
            "description": "",
            "status": "todo",
            "priority": "medium",
            "assignees": [],
            "createdAt": "2024-05-01T09:00:00.000Z",
            "updatedAt": "2024-05-01T09:00:00.000Z",
            **fields,
        }
        self.tasks[task["_id"]] = task
        return task

    @staticmethod
    def _public(user: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in user.items() if k != "password"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        body = json.loads(request.content) if request.content else None

        if path == "/auth/login":
            for user in self.users.values():
                if user["email"] == body["email"] and user["password"] == body["password"]:
                    return httpx.Response(
                        200, json={"token": self.TOKEN, "user": self._public(user)}
                    )
            return httpx.Response(400, json={"message": "Invalid credentials"})

        if path == "/auth/register":
            if any(u["email"] == body["email"] for u in self.users.values()):
                return httpx.Response(400, json={"message": "User already exists"})
            user = {"_id": f"u{len(self.users) + 1}", "avatar": "", **body}
            self.users[user["_id"]] = user
            return httpx.Response(201, json={"token": self.TOKEN, "user": self._public(user)})

        if request.headers.get("Authorization") != f"Bearer {self.TOKEN}":
            return httpx.Response(401, json={"message": "Token is not valid"})

        if path == "/users":
            return httpx.Response(200, json=[self._public(u) for u in self.users.values()])
        if path.startswith("/users/"):
            user = self.users.get(path.split("/")[-1])
            if user is None:
                return httpx.Response(404, json={"message": "User not found"})
            return httpx.Response(200, json=self._public(user))

        if path == "/tasks" and request.method == "GET":
            return httpx.Response(200, json=list(self.tasks.values()))
        if path == "/tasks" and request.method == "POST":
            if not body.get("title"):
                return httpx.Response(400, json={"message": "Title is required"})
            return httpx.Response(201, json=self.add_task(**body))

        task_id = path.split("/")[-1]
        if task_id not in self.tasks:
            return httpx.Response(404, json={"message": "Task not found"})
        if request.method == "PUT":
            self.tasks[task_id].update(body)
            self.tasks[task_id]["updatedAt"] = "2024-05-02T10:00:00.000Z"
            return httpx.Response(200, json=self.tasks[task_id])
        if request.method == "DELETE":
            del self.tasks[task_id]
            return httpx.Response(200, json={"message": "Task deleted"})
        return httpx.Response(405, json={"message": "Method not allowed"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session(sample_user):
    return SessionContext(token=FakeBackend.TOKEN, user=sample_user)


# ==============================================================================
# Environment isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point XDG dirs at tmp_path and drop TASKBOARD_* vars and cached config."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for name in ("TASKBOARD_API_URL", "TASKBOARD_TIMEOUT", "TASKBOARD_SESSION_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_cache()
    yield
    clear_cache()
