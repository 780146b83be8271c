"""
Authentication router for user registration and login.
"""
import time

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeline.database import get_db
from timeline.dependencies.auth import get_current_user
from timeline.exceptions import UsernameTakenError
from timeline.models.user import User
from timeline.schemas.user import UserCreate, UserResponse, UserLogin, Token
from timeline.services.auth import AuthService
from timeline.utils.logger import log_info, log_warning
from timeline.utils.prometheus_metrics import (
    login_duration_seconds,
    user_login_total,
    user_registration_total,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Register a new user account.

    - **username**: Username (3-100 characters, must be unique)
    - **password**: Password (8-72 characters)
    """
    auth_service = AuthService(db)

    try:
        user = await auth_service.register(user_data)
    except UsernameTakenError as e:
        user_registration_total.labels(result="failure").inc()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    await db.commit()
    user_registration_total.labels(result="success").inc()
    log_info("User registration completed", event="user_registration", user_id=user.id)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=Token,
    summary="Login to get access token",
)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """
    Login with username and password to get a JWT access token.

    The token goes in the Authorization header as `Bearer <token>`
    for every /photos endpoint.
    """
    auth_service = AuthService(db)
    start = time.perf_counter()
    token = await auth_service.login(login_data.username, login_data.password)
    result = "success" if token else "failure"
    login_duration_seconds.labels(result=result).observe(time.perf_counter() - start)
    user_login_total.labels(result=result).inc()

    if not token:
        log_warning("Login failed - invalid credentials", event="user_login")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return token


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current authenticated user's profile.
    """
    return UserResponse.model_validate(current_user)
