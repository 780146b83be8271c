"""
Photo-related Pydantic schemas for request/response validation.
"""
from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, Field, ConfigDict, field_validator

DESCRIPTION_MAX_LENGTH = 2000


class PhotoBase(BaseModel):
    """Base schema with common photo attributes."""

    description: str = Field(..., max_length=DESCRIPTION_MAX_LENGTH)
    taken_at: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Description is required")
        return v


class PhotoCreate(PhotoBase):
    """
    Photo creation data once the image locator is known.
    filename is set only for files stored in the upload directory.
    """

    image_url: str
    filename: Optional[str] = None


class PhotoUrlCreate(PhotoBase):
    """JSON body for creating a photo that points at an external image URL."""

    image_url: AnyHttpUrl

    model_config = ConfigDict(extra="forbid")


class PhotoResponse(BaseModel):
    """Schema for photo response."""

    id: int
    user_id: int
    filename: Optional[str] = None
    image_url: str
    description: str
    taken_at: Optional[datetime] = None
    likes: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PhotoWithUsername(PhotoResponse):
    """Feed entry: photo plus the uploader's username."""

    username: str
