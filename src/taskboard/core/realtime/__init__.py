"""
Best-effort real-time hints between peers.

Hints prompt a re-fetch; they are not a consistency mechanism.
"""

from taskboard.core.realtime.channel import (
    Hint,
    HintHandler,
    HintKind,
    LocalChannel,
    LocalEndpoint,
    NotificationChannel,
)
from taskboard.core.realtime.refresh import RefreshOnHint

__all__ = [
    "Hint",
    "HintHandler",
    "HintKind",
    "LocalChannel",
    "LocalEndpoint",
    "NotificationChannel",
    "RefreshOnHint",
]
