"""Pydantic schemas for request/response validation."""

from guessr.schemas.map import (
    Coordinate,
    MapPageResponse,
    MapRecord,
    MapViewModel,
    UserRecord,
)
from guessr.schemas.preview import (
    ConnectionErrorEvent,
    PongEvent,
    PreviewEventType,
    PreviewMessage,
    PreviewStateEvent,
)

__all__ = [
    "Coordinate",
    "MapRecord",
    "UserRecord",
    "MapViewModel",
    "MapPageResponse",
    "PreviewEventType",
    "PreviewStateEvent",
    "ConnectionErrorEvent",
    "PongEvent",
    "PreviewMessage",
]
