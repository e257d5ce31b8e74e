"""
Real-time hint channel.

Peers announce "task updated" events and receive each other's announcements.
A hint carries no merge semantics: receivers treat it as a prompt to
re-fetch, never as a source of truth. Delivery is fire-and-forget with no
acknowledgement or ordering guarantee.

LocalChannel is an in-process hub with broadcast semantics: a hint reaches
every connected peer except the sender.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class HintKind(str, Enum):
    """Kinds of hint exchanged between peers."""

    TASK_UPDATED = "taskUpdated"


@dataclass(frozen=True)
class Hint:
    """A single announcement on the channel."""

    kind: HintKind
    sender: str
    payload: dict[str, Any] = field(default_factory=dict)


HintHandler = Callable[[Hint], Awaitable[None]]


@runtime_checkable
class NotificationChannel(Protocol):
    """Protocol for a peer's connection to the hint channel."""

    async def publish(self, kind: HintKind, payload: dict[str, Any] | None = None) -> None:
        """Announce a hint to other peers."""
        ...

    def subscribe(self, handler: HintHandler) -> Callable[[], None]:
        """Register a handler for hints from other peers; returns an unsubscribe callable."""
        ...


class LocalEndpoint:
    """One peer's connection to a LocalChannel."""

    def __init__(self, hub: LocalChannel, client_id: str) -> None:
        self.hub = hub
        self.client_id = client_id
        self._handlers: list[HintHandler] = []

    async def publish(self, kind: HintKind, payload: dict[str, Any] | None = None) -> None:
        self.hub.broadcast(Hint(kind=kind, sender=self.client_id, payload=payload or {}))

    def subscribe(self, handler: HintHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def disconnect(self) -> None:
        self.hub.disconnect(self.client_id)

    @property
    def handlers(self) -> list[HintHandler]:
        return list(self._handlers)


class LocalChannel:
    """
    In-process broadcast hub.

    Example:
        >>> hub = LocalChannel()
        >>> alice, bob = hub.connect("alice"), hub.connect("bob")
        >>> bob.subscribe(handler)
        >>> await alice.publish(HintKind.TASK_UPDATED, {"taskId": "t1"})
        >>> await hub.drain()   # handler has now run for bob only
    """

    def __init__(self) -> None:
        self._peers: dict[str, LocalEndpoint] = {}
        self._pending: set[asyncio.Task[None]] = set()

    def connect(self, client_id: str) -> LocalEndpoint:
        """Join the channel as ``client_id``."""
        endpoint = LocalEndpoint(self, client_id)
        self._peers[client_id] = endpoint
        logger.debug(f"Peer connected: {client_id}")
        return endpoint

    def disconnect(self, client_id: str) -> None:
        if self._peers.pop(client_id, None) is not None:
            logger.debug(f"Peer disconnected: {client_id}")

    @property
    def peers(self) -> list[str]:
        return list(self._peers)

    def broadcast(self, hint: Hint) -> None:
        """Schedule delivery of a hint to every peer but the sender."""
        loop = asyncio.get_running_loop()
        for client_id, endpoint in self._peers.items():
            if client_id == hint.sender:
                continue
            for handler in endpoint.handlers:
                task = loop.create_task(self._deliver(handler, hint, client_id))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    @staticmethod
    async def _deliver(handler: HintHandler, hint: Hint, client_id: str) -> None:
        try:
            await handler(hint)
        except Exception:
            # Best-effort channel: a failing receiver must not affect the sender.
            logger.exception(f"Hint handler failed for peer {client_id} ({hint.kind.value})")
