"""SQLAlchemy models for WorldGuessr."""

from guessr.models.map import Map
from guessr.models.user import User

__all__ = [
    "User",
    "Map",
]
