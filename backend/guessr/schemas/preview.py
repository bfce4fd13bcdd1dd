"""WebSocket event schemas for the location preview stream.

Event Types:
- preview_state: Sent on every preview cycler transition
- connection_error: Map lookup failed, the socket is closed afterwards
- ping / pong: Client heartbeat
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PreviewEventType(str, Enum):
    """WebSocket event types for the preview stream."""

    # Connection events
    CONNECTION_ERROR = "connection_error"

    # Preview lifecycle
    PREVIEW_STATE = "preview_state"

    # Client commands
    PING = "ping"
    PONG = "pong"


class BasePreviewEvent(BaseModel):
    """Base class for all preview stream events."""

    type: PreviewEventType = Field(..., description="Event type identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Event timestamp (UTC)",
    )


class PreviewStateEvent(BasePreviewEvent):
    """Current preview frame after a cycler transition."""

    type: PreviewEventType = PreviewEventType.PREVIEW_STATE
    slug: str = Field(..., description="Map being previewed")
    phase: str = Field(..., description="idle, steady, fading_out or fading_in")
    visual: str = Field(..., description="Fade class to apply: none, fade_out or fade_in")
    index: Optional[int] = Field(None, ge=0, description="Displayed location index")
    url: Optional[str] = Field(None, description="Street View embed URL to display")
    total: int = Field(..., ge=0, description="Number of preview locations")


class ConnectionErrorEvent(BasePreviewEvent):
    """Event sent when the preview stream cannot be opened."""

    type: PreviewEventType = PreviewEventType.CONNECTION_ERROR
    error_code: str = Field(..., description="Error code for client handling")
    message: str = Field(..., description="Human-readable error message")


class PongEvent(BasePreviewEvent):
    """Pong response to ping for connection keep-alive."""

    type: PreviewEventType = PreviewEventType.PONG


class PreviewMessage(BaseModel):
    """Wrapper for WebSocket messages."""

    event: dict = Field(..., description="Event payload")

    @classmethod
    def from_event(cls, event: BasePreviewEvent) -> "PreviewMessage":
        """Create a message from an event."""
        return cls(event=event.model_dump(mode="json"))
