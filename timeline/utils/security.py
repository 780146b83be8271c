"""
Security utility functions for password hashing and JWT token management.
"""
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import PurePath
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from timeline.config import get_settings
from timeline.schemas.user import TokenPayload

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User ID to encode in the token
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {
        "sub": str(user_id),  # JWT subject must be a string
        "exp": expire,
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> Optional[TokenPayload]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id = payload.get("sub")
        exp = payload.get("exp")
        if user_id is None or exp is None:
            return None

        return TokenPayload(
            sub=int(user_id),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (JWTError, ValueError, TypeError):
        return None


def generate_unique_filename(original_filename: str) -> str:
    """
    Generate a unique filename for uploaded files, keeping the original extension.

    Args:
        original_filename: Original filename from upload

    Returns:
        Unique filename with original extension (lowercased)
    """
    ext = PurePath(original_filename).suffix.lower()
    return f"{uuid.uuid4().hex}{ext}"
