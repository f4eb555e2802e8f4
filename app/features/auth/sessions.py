"""
Server-side session store.

Sessions live in the `sessions` table, keyed by an opaque random token that
the client holds in an httpOnly cookie. Lifetime is a sliding window of
SESSION_TTL_HOURS.
"""
import secrets
from datetime import datetime, timedelta, timezone
from fastapi import Response
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.features.auth.models import UserSession
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)


def utc_now() -> datetime:
    """Naive UTC now, matching the naive `expires_at` column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _expiry() -> datetime:
    return utc_now() + timedelta(hours=config.SESSION_TTL_HOURS)


class SessionStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_id: str) -> str:
        """Open a session for `user_id` and return its token."""
        await self.purge_expired()

        token = secrets.token_urlsafe(32)
        self.db.add(UserSession(token=token, user_id=user_id, expires_at=_expiry()))
        await self.db.commit()
        log.debug("Session opened for user %s", user_id)
        return token

    async def resolve(self, token: str) -> User | None:
        """
        Return the user owning a live session, sliding its expiry forward.

        Unknown and expired tokens resolve to None.
        """
        session = await self.db.scalar(
            select(UserSession).where(
                UserSession.token == token,
                UserSession.expires_at > utc_now(),
            )
        )
        if session is None:
            return None

        user = await self.db.scalar(select(User).where(User.id == session.user_id))
        if user is None:
            return None

        session.expires_at = _expiry()
        await self.db.commit()
        return user

    async def destroy(self, token: str) -> None:
        await self.db.execute(delete(UserSession).where(UserSession.token == token))
        await self.db.commit()

    async def purge_expired(self) -> None:
        await self.db.execute(
            delete(UserSession).where(UserSession.expires_at <= utc_now())
        )


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=config.SESSION_TTL_HOURS * 60 * 60,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
