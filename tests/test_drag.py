"""
Tests for DragAdapter.
"""

import pytest

from taskboard.core.board import (
    DragAdapter,
    DragEndEvent,
    MoveState,
    TaskLifecycleController,
)
from taskboard.core.board.state import BoardState
from taskboard.core.store.exceptions import NetworkError
from taskboard.core.tasks.models import TaskStatus


@pytest.fixture
def controller(store):
    board = BoardState(t.model_copy(deep=True) for t in store.tasks.values())
    return TaskLifecycleController(store, board)


@pytest.fixture
def adapter(controller):
    return DragAdapter(controller)


class TestResolveTarget:
    @pytest.mark.parametrize(
        "over_id,expected",
        [
            ("todo", TaskStatus.TODO),
            ("in-progress", TaskStatus.IN_PROGRESS),
            ("done", TaskStatus.DONE),
            ("In Progress", TaskStatus.IN_PROGRESS),
            ("to do", TaskStatus.TODO),
            ("t3", TaskStatus.DONE),
            ("t2", TaskStatus.IN_PROGRESS),
        ],
    )
    def test_targets(self, adapter, over_id, expected):
        assert adapter.resolve_target(over_id) == expected

    @pytest.mark.parametrize("over_id", [None, "", "backlog", "t99"])
    def test_invalid_targets(self, adapter, over_id):
        assert adapter.resolve_target(over_id) is None


class TestDragEnd:
    @pytest.mark.asyncio
    async def test_drop_on_column(self, adapter, controller, store):
        adapter.drag_start("t1")
        assert adapter.active_id == "t1"

        operation = await adapter.drag_end(DragEndEvent(active_id="t1", over_id="done"))

        assert operation.state == MoveState.CONFIRMED
        assert controller.board.status_of("t1") == TaskStatus.DONE
        assert adapter.active_id is None
        assert store.calls_of("update") == [("t1", {"status": "done"})]

    @pytest.mark.asyncio
    async def test_drop_on_card_uses_its_column(self, adapter, controller):
        await adapter.drag_end(DragEndEvent(active_id="t1", over_id="t2"))

        assert controller.board.status_of("t1") == TaskStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_drop_outside_is_noop(self, adapter, controller, store):
        adapter.drag_start("t1")

        assert await adapter.drag_end(DragEndEvent(active_id="t1")) is None
        assert adapter.active_id is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_drop_on_unknown_target_is_noop(self, adapter, store):
        assert await adapter.drag_end(DragEndEvent(active_id="t1", over_id="backlog")) is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_unknown_dragged_task_is_noop(self, adapter, store):
        assert await adapter.drag_end(DragEndEvent(active_id="ghost", over_id="done")) is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_drop_on_own_column_is_noop(self, adapter, store):
        assert await adapter.drag_end(DragEndEvent(active_id="t1", over_id="todo")) is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_rejected_drop_rolls_back(self, adapter, controller, store):
        store.fail["update"] = NetworkError("down")

        with pytest.raises(NetworkError):
            await adapter.drag_end(DragEndEvent(active_id="t1", over_id="done"))

        assert controller.board.status_of("t1") == TaskStatus.TODO
