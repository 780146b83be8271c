"""
User model for authentication.
"""
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline.models.columns import utcnow
from timeline.database import Base

if TYPE_CHECKING:
    from timeline.models.photo import Photo


class User(Base):
    """User account. Never updated or deleted once registered."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    photos: Mapped[List["Photo"]] = relationship("Photo", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id})>"
