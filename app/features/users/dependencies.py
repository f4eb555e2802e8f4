"""
FastAPI dependencies for authentication.
"""
from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.engine import get_db
from app.core.exceptions import Unauthenticated
from app.features.auth.sessions import SessionStore
from app.features.permissions.context import AuthContext
from app.features.users.models import User


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(config.SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User:
    """
    Get the current authenticated user from the session cookie.

    This dependency:
    1. Reads the opaque session token from the cookie
    2. Resolves it against the server-side session store
    3. Slides the session expiry forward

    Usage:
        @router.get("/user")
        async def get_me(user: User = Depends(get_current_user)):
            return user
    """
    token = get_session_token(request)
    if not token:
        raise Unauthenticated()

    user = await SessionStore(db).resolve(token)
    if user is None:
        raise Unauthenticated()

    return user


async def get_auth_context(
    user: Annotated[User, Depends(get_current_user)]
) -> AuthContext:
    """Build the immutable per-request AuthContext for the current user."""
    return AuthContext.from_user(user)
