"""Authentication service: JWT tokens, password hashing, user management."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.config import settings
from dealboard.core.exceptions import NotFoundError
from dealboard.models.user import User

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: uuid.UUID) -> str:
    """Create a JWT access token for the given user ID."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": str(user_id),
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Decode a JWT token and return the user ID string, or None if invalid."""
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload.get("sub")
    except JWTError:
        return None


class AuthService:
    """Handles user registration, login, lookup and role management."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="auth_service")

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> User:
        """Register a new user. Raises ValueError if email/username taken."""
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none():
            raise ValueError("Email is already registered")

        stmt = select(User).where(User.username == username)
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none():
            raise ValueError("Username is already taken")

        user = User(
            email=email,
            username=username,
            full_name=full_name,
            hashed_password=hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValueError("Email or username is already taken")

        self.logger.info("user_registered", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Verify credentials and return user, or None if invalid."""
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            self.logger.info("login_failed", email=email)
            return None

        if not user.is_active:
            return None

        user.last_login_at = datetime.now(timezone.utc)
        return user

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Fetch user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_users(self) -> List[User]:
        """All users, newest first (root dashboard)."""
        result = await self.db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def update_user(
        self,
        user_id: uuid.UUID,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        full_name: Optional[str] = None,
    ) -> User:
        """Change a user's role, active flag or name.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))

        if role is not None:
            user.role = role
        if is_active is not None:
            user.is_active = is_active
        if full_name is not None:
            user.full_name = full_name

        await self.db.flush()
        self.logger.info(
            "user_updated",
            user_id=str(user_id),
            role=user.role,
            is_active=user.is_active,
        )
        return user

    async def update_profile(
        self,
        user: User,
        full_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """Let a signed-in user change their own display name and avatar."""
        if full_name is not None:
            user.full_name = full_name
        if avatar_url is not None:
            user.avatar_url = avatar_url
        await self.db.flush()
        return user
