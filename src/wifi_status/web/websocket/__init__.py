"""WebSocket support for real-time status updates."""

from .events import ActionFailedEvent, EventType, StatusChangedEvent, WebSocketEvent
from .manager import ConnectionManager

__all__ = [
    "ActionFailedEvent",
    "ConnectionManager",
    "EventType",
    "StatusChangedEvent",
    "WebSocketEvent",
]
