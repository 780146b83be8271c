"""
Authentication service for user management.
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeline.exceptions import UsernameTakenError
from timeline.models.user import User
from timeline.schemas.user import UserCreate, Token
from timeline.utils.logger import log_info, log_warning
from timeline.utils.security import hash_password, verify_password, create_access_token


class AuthService:
    """
    Service for handling user authentication.
    Provides methods for registration, login, and user lookup.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, user_data: UserCreate) -> User:
        """
        Register a new user.

        Args:
            user_data: User registration data

        Returns:
            Created User model

        Raises:
            UsernameTakenError: If the username already exists
        """
        if await self.get_user_by_username(user_data.username):
            log_warning("Registration failed", event="auth", reason="username_exists")
            raise UsernameTakenError(user_data.username)

        user = User(
            username=user_data.username,
            hashed_password=hash_password(user_data.password),
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            # 동시 가입 경쟁: unique 제약 위반
            await self.db.rollback()
            log_warning("Registration failed", event="auth", reason="username_exists")
            raise UsernameTakenError(user_data.username)
        await self.db.refresh(user)
        log_info("Registration", event="auth", user_id=user.id)
        return user

    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate a user with username and password.

        Returns:
            User if authentication successful, None otherwise
        """
        user = await self.get_user_by_username(username)

        if not user:
            log_warning("Login failed", event="auth", reason="user_not_found")
            return None
        if not verify_password(password, user.hashed_password):
            log_warning("Login failed", event="auth", user_id=user.id, reason="invalid_password")
            return None
        log_info("Login", event="auth", user_id=user.id)
        return user

    async def login(self, username: str, password: str) -> Optional[Token]:
        """
        Login user and return JWT token.

        Returns:
            Token if login successful, None otherwise
        """
        user = await self.authenticate(username, password)

        if not user:
            return None

        return Token(access_token=create_access_token(user.id))

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        result = await self.db.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()
