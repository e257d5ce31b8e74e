"""Re-fetch the board when a peer announces a change."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from taskboard.core.realtime.channel import Hint, HintKind, NotificationChannel

if TYPE_CHECKING:
    from taskboard.core.board.controller import TaskLifecycleController

logger = logging.getLogger(__name__)


class RefreshOnHint:
    """
    Hint handler that reloads a controller's board.

    The hint payload is never applied; the store stays the source of truth.
    """

    def __init__(self, controller: TaskLifecycleController) -> None:
        self.controller = controller
        self.refreshes = 0

    def attach(self, channel: NotificationChannel) -> Callable[[], None]:
        """Subscribe to a channel; returns the unsubscribe callable."""
        return channel.subscribe(self)

    async def __call__(self, hint: Hint) -> None:
        if hint.kind != HintKind.TASK_UPDATED:
            return
        logger.debug(f"Refreshing board after hint from {hint.sender}")
        await self.controller.refresh()
        self.refreshes += 1
