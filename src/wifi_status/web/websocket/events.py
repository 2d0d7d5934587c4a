"""WebSocket event models and types."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


class EventType(str, Enum):
    """WebSocket event types."""

    STATUS_CHANGED = "status_changed"
    ACTION_FAILED = "action_failed"


class WebSocketEvent(BaseModel):
    """Base WebSocket event."""

    type: EventType
    timestamp: str = Field(default_factory=_utc_timestamp)
    data: Dict[str, Any] = Field(default_factory=dict)


class StatusChangedEvent(WebSocketEvent):
    """Status view changed event."""

    type: EventType = EventType.STATUS_CHANGED

    def __init__(self, view: Dict[str, Any], **kwargs: Any):
        """Initialize status changed event.

        Args:
            view: Serialized StatusView
            **kwargs: Additional fields
        """
        super().__init__(data={"view": view}, **kwargs)


class ActionFailedEvent(WebSocketEvent):
    """A user action (scan, power toggle, connect) failed."""

    type: EventType = EventType.ACTION_FAILED

    def __init__(self, action: str, error: str, **kwargs: Any):
        """Initialize action failed event.

        Args:
            action: Action name ("scan", "toggle_power", "connect")
            error: Error message reported by the adapter
            **kwargs: Additional fields
        """
        super().__init__(data={"action": action, "error": error}, **kwargs)
