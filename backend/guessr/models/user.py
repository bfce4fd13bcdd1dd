"""User model for map authors."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from guessr.core.database import Base


class User(Base):
    """
    Map author.

    Only the public identity is modelled here; accounts and sign-in are
    handled by the game service.
    """

    __tablename__ = "users"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Public identity
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    maps: Mapped[list["Map"]] = relationship("Map", back_populates="author")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
