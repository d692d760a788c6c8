"""FastAPI dependency injection providers."""

import uuid
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.core.exceptions import PermissionDenied
from dealboard.db.session import async_session_factory
from dealboard.models.user import ROLE_ADMIN, ROLE_ROOT_ADMIN, User
from dealboard.services.auth_service import AuthService, decode_access_token
from dealboard.voting import AuthContext

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for request-scoped usage.

    The session is committed on success or rolled back on error, and
    always closed after the request completes.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession,
) -> Optional[User]:
    if not credentials:
        return None

    user_id_str = decode_access_token(credentials.credentials)
    if not user_id_str:
        return None

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        return None

    user = await AuthService(db).get_user_by_id(user_id)
    if not user or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the JWT bearer token, return the authenticated user.

    Raises 401 if the token is missing or invalid, or the user is gone or inactive.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await _user_from_credentials(credentials, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user but returns None instead of raising 401."""
    return await _user_from_credentials(credentials, db)


async def get_auth_context(
    user: Optional[User] = Depends(get_optional_user),
) -> AuthContext:
    """The caller as the voting layer sees it; anonymous when not signed in."""
    if user is None:
        return AuthContext.anonymous()
    return AuthContext(user_id=user.id, role=user.role)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow admins and root admins."""
    if user.role not in (ROLE_ADMIN, ROLE_ROOT_ADMIN):
        raise PermissionDenied(ROLE_ADMIN)
    return user


async def require_root_admin(user: User = Depends(get_current_user)) -> User:
    """Allow root admins only."""
    if user.role != ROLE_ROOT_ADMIN:
        raise PermissionDenied(ROLE_ROOT_ADMIN)
    return user
