"""Map model for community-created guessing game maps."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from guessr.core.database import Base


class Map(Base):
    """
    Community map: a named list of locations players are dropped into.

    ``data`` holds the ordered locations as ``[{"lat": .., "lng": ..}, ...]``.
    """

    __tablename__ = "maps"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Public address of the map page
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    # Map metadata
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description_short: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    description_long: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Locations
    data: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    # Counters
    plays: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    hearts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Author
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    # Relationships
    author: Mapped["User"] = relationship("User", back_populates="maps")

    def __repr__(self) -> str:
        return f"<Map(id={self.id}, slug={self.slug})>"
