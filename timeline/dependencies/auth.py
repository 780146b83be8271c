"""
Authentication dependencies for FastAPI.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from timeline.database import get_db
from timeline.models.user import User
from timeline.services.auth import AuthService
from timeline.utils.security import decode_access_token

logger = logging.getLogger("timeline.auth")

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user.

    Args:
        credentials: Bearer token from request header
        db: Database session

    Returns:
        Current authenticated User

    Raises:
        HTTPException: If token is missing, invalid, or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not credentials:
        logger.warning("Auth failed", extra={"event": "auth", "reason": "no_token"})
        raise credentials_exception

    token_payload = decode_access_token(credentials.credentials)

    if token_payload is None:
        logger.warning("Auth failed", extra={"event": "auth", "reason": "invalid_or_expired_token"})
        raise credentials_exception

    user = await AuthService(db).get_user_by_id(token_payload.sub)

    if user is None:
        logger.warning("Auth failed", extra={"event": "auth", "reason": "user_not_found", "user_id": token_payload.sub})
        raise credentials_exception

    return user
