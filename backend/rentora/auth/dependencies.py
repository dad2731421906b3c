"""FastAPI authentication dependencies for route protection."""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.auth.jwt import decode_token
from rentora.auth.permissions import Action, authorize
from rentora.database import get_db
from rentora.models.user import User

# Missing credentials are reported as 401 by get_current_user, not 403.
_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _user_from_token(token: str, db: AsyncSession) -> User:
    """Resolve an access token to an active user or raise 401."""
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired") from None
    except JWTError:
        raise _unauthorized("Invalid or expired token") from None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    sub: str | None = payload.get("sub")
    if sub is None:
        raise _unauthorized("Invalid token payload")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise _unauthorized("Invalid token payload") from None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise _unauthorized("Could not validate credentials")
    if not user.is_active:
        raise _unauthorized("User account is inactive")

    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the Bearer token, then return the authenticated user.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired, of the
            wrong type, or the user is unknown or inactive.
    """
    if credentials is None:
        raise _unauthorized("Authorization token required")
    return await _user_from_token(credentials.credentials, db)


def require(action: Action) -> Callable[..., Awaitable[User]]:
    """Dependency factory: the current user, provided they may perform ``action``.

    For actions that do not depend on a specific resource, e.g.
    ``Depends(require(Action.ADMIN_ACCESS))``.
    """

    async def _dependency(user: User = Depends(get_current_user)) -> User:
        authorize(user, action)
        return user

    return _dependency
