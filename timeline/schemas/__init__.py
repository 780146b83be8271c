"""
Pydantic schemas package.
All schemas are exported here for easy import.
"""
from timeline.schemas.user import (
    UserCreate,
    UserResponse,
    UserLogin,
    Token,
    TokenPayload,
)
from timeline.schemas.photo import (
    PhotoCreate,
    PhotoUrlCreate,
    PhotoResponse,
    PhotoWithUsername,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserResponse",
    "UserLogin",
    "Token",
    "TokenPayload",
    # Photo schemas
    "PhotoCreate",
    "PhotoUrlCreate",
    "PhotoResponse",
    "PhotoWithUsername",
]
