"""
Tests for task models.

Covers identifier normalization, due date handling and request payloads.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from taskboard.core.tasks.models import (
    Task,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    User,
    resolve_identifier,
)


class TestResolveIdentifier:
    """Test identifier precedence between _id and id."""

    def test_prefers_underscore_id(self):
        assert resolve_identifier({"_id": "a", "id": "b"}) == "a"

    def test_falls_back_to_id(self):
        assert resolve_identifier({"id": "b"}) == "b"

    def test_empty_underscore_id_falls_back(self):
        assert resolve_identifier({"_id": "", "id": "b"}) == "b"

    def test_missing_returns_none(self):
        assert resolve_identifier({"title": "x"}) is None


class TestTaskParsing:
    """Test building tasks from backend responses."""

    def test_parses_wire_fields(self):
        task = Task.model_validate(
            {
                "_id": "t1",
                "title": "Spec",
                "description": "Write it",
                "status": "in-progress",
                "priority": "high",
                "dueDate": "2024-06-01T00:00:00.000Z",
                "assignees": [{"_id": "u1", "name": "Ada", "email": "ada@example.com"}],
                "createdAt": "2024-05-01T09:00:00.000Z",
                "updatedAt": "2024-05-02T10:00:00.000Z",
            }
        )

        assert task.id == "t1"
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.priority == TaskPriority.HIGH
        assert task.due_date == date(2024, 6, 1)
        assert task.assignees[0].id == "u1"
        assert task.created_at is not None

    def test_both_identifiers_prefers_underscore_id(self):
        task = Task.model_validate({"_id": "mongo", "id": "other", "title": "x"})
        assert task.id == "mongo"

    def test_id_only(self):
        task = Task.model_validate({"id": "t9", "title": "x"})
        assert task.id == "t9"

    def test_defaults(self):
        task = Task.model_validate({"_id": "t1", "title": "x"})
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.MEDIUM
        assert task.description == ""
        assert task.due_date is None
        assert task.assignees == []

    def test_bare_assignee_ids(self):
        task = Task.model_validate({"_id": "t1", "title": "x", "assignees": ["u1", "u2"]})
        assert task.assignee_ids == ["u1", "u2"]

    def test_unknown_fields_ignored(self):
        task = Task.model_validate({"_id": "t1", "title": "x", "__v": 0})
        assert not hasattr(task, "__v")

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            Task.model_validate({"_id": "t1", "title": ""})

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Task.model_validate({"_id": "t1", "title": "x", "status": "blocked"})


class TestTaskHelpers:
    """Test status copies, diffs and payloads."""

    def test_with_status_copies(self):
        task = Task(id="t1", title="x")
        moved = task.with_status(TaskStatus.DONE)

        assert moved.status == TaskStatus.DONE
        assert task.status == TaskStatus.TODO

    def test_changed_fields(self):
        before = Task(id="t1", title="x", priority="low")
        after = before.model_copy(update={"title": "y", "priority": TaskPriority.HIGH})

        assert after.changed_fields(before) == ["title", "priority"]

    def test_changed_fields_compares_assignee_ids(self):
        before = Task.model_validate(
            {"_id": "t1", "title": "x", "assignees": [{"_id": "u1", "name": "Ada"}]}
        )
        after = Task.model_validate({"_id": "t1", "title": "x", "assignees": ["u1"]})

        assert after.changed_fields(before) == []

    def test_payload_uses_wire_names(self):
        task = Task.model_validate(
            {"_id": "t1", "title": "x", "dueDate": "2024-06-01", "assignees": [{"_id": "u1"}]}
        )

        payload = task.to_payload()

        assert payload == {
            "title": "x",
            "description": "",
            "status": "todo",
            "priority": "medium",
            "dueDate": "2024-06-01",
            "assignees": ["u1"],
        }

    def test_payload_subset(self):
        task = Task(id="t1", title="x", status="done")
        assert task.to_payload(["status"]) == {"status": "done"}


class TestTaskDraft:
    """Test the create-task payload."""

    def test_payload(self):
        draft = TaskDraft(title="New", priority="high", due_date=date(2024, 6, 1), assignee_ids=["u1"])

        assert draft.to_payload() == {
            "title": "New",
            "description": "",
            "status": "todo",
            "priority": "high",
            "dueDate": "2024-06-01",
            "assignees": ["u1"],
        }

    def test_requires_title(self):
        with pytest.raises(ValidationError):
            TaskDraft(title="")


class TestUser:
    def test_as_assignee(self):
        user = User.model_validate(
            {"_id": "u1", "name": "Ada", "email": "ada@example.com", "skills": ["python"]}
        )

        assignee = user.as_assignee()

        assert assignee.id == "u1"
        assert assignee.name == "Ada"
        assert assignee.email == "ada@example.com"
