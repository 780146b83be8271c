"""
Photo model for storing photo metadata.
Uploaded image files live under the configured upload directory;
URL-based photos only carry their image_url.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Integer, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline.models.columns import utcnow
from timeline.database import Base

if TYPE_CHECKING:
    from timeline.models.user import User


class Photo(Base):
    """
    A single shared photo with its like counter.
    likes only ever changes through PhotoService.like_photo.
    """

    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )

    # Storage locator
    filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image_url: Mapped[str] = mapped_column(String(2048), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)
    taken_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="photos")

    def __repr__(self) -> str:
        return f"<Photo(id={self.id}, user_id={self.user_id}, likes={self.likes})>"
