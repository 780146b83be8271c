"""
User-related Pydantic schemas for request/response validation.
"""
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict


class UserBase(BaseModel):
    """Base schema with common user attributes."""

    username: str = Field(..., min_length=3, max_length=100)


class UserCreate(UserBase):
    """Schema for user registration."""

    password: str = Field(..., min_length=8, max_length=72)


class UserLogin(BaseModel):
    """Schema for user login."""

    username: str
    password: str


class UserResponse(UserBase):
    """Schema for user response (excludes the password hash)."""

    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    """Schema for JWT token payload."""

    sub: int  # User ID
    exp: datetime
