"""
Drag interaction adapter.

Turns raw drag events from the rendering layer into controller moves. The
rendering layer reports the identifier of the dragged card and of whatever
it was dropped on. A drop target is either a column (by id or display title)
or another task card, in which case the card's column is the target.
Drops on nothing, on unknown targets, or of unknown cards are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from taskboard.core.board.controller import TaskLifecycleController
from taskboard.core.board.models import resolve_column
from taskboard.core.board.moves import MoveOperation
from taskboard.core.tasks.models import TaskStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DragEndEvent:
    """A finished drag: the dragged card and the drop target (None if dropped outside)."""

    active_id: str
    over_id: str | None = None


class DragAdapter:
    """
    Maps drag-end events to target statuses and starts moves.

    Example:
        >>> adapter = DragAdapter(controller)
        >>> adapter.drag_start("t1")
        >>> await adapter.drag_end(DragEndEvent(active_id="t1", over_id="done"))
    """

    def __init__(self, controller: TaskLifecycleController) -> None:
        self.controller = controller
        self.active_id: str | None = None

    def drag_start(self, active_id: str) -> None:
        """Remember which card is being dragged (for overlays)."""
        self.active_id = active_id

    def resolve_target(self, over_id: str | None) -> TaskStatus | None:
        """
        Resolve a drop target identifier to a status.

        Columns win over cards if an identifier could mean either.
        """
        if not over_id:
            return None
        status = resolve_column(over_id)
        if status is not None:
            return status
        return self.controller.board.status_of(over_id)

    async def drag_end(self, event: DragEndEvent) -> MoveOperation | None:
        """
        Finish a drag and move the card if the drop is valid.

        Returns:
            The finished MoveOperation, or None for ignored drops and
            drops onto the card's own column

        Raises:
            TaskStoreError: If the store rejected the move (already rolled back)
        """
        self.active_id = None
        target = self.resolve_target(event.over_id)
        if target is None:
            logger.debug(f"Ignoring drop of {event.active_id} on {event.over_id!r}")
            return None
        if event.active_id not in self.controller.board:
            logger.debug(f"Ignoring drop of unknown task {event.active_id}")
            return None
        return await self.controller.move(event.active_id, target)
