"""
Authentication routes: register, login, logout.

Register and login are the only routes reachable without a session.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core import config
from app.core.database.engine import get_db
from app.core.exceptions import Unauthenticated, ValidationError
from app.core.limiter import limiter
from app.features.auth.credentials import hash_password, verify_password
from app.features.auth.sessions import SessionStore, clear_session_cookie, set_session_cookie
from app.features.companies.service import count_company_users, get_or_create_company
from app.features.permissions.registry import RoleRegistry, get_role_registry
from app.features.users.dependencies import get_current_user, get_session_token
from app.features.users.models import User
from app.features.users.schemas import AuthResponse, UserCredentials, UserRegister, UserResponse
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


async def _open_session(db: AsyncSession, response: Response, user: User) -> None:
    token = await SessionStore(db).create(user.id)
    set_session_cookie(response, token)


@router.post("/register", response_model=AuthResponse)
@limiter.limit(config.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    response: Response,
    payload: UserRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
    registry: Annotated[RoleRegistry, Depends(get_role_registry)],
):
    """
    Register a user and log them in.

    The company is looked up by name and created if new. The first user of
    a company becomes "admin"; later users get "user". The steps commit
    separately, there is no surrounding transaction.
    """
    existing = await db.scalar(select(User).where(User.username == payload.username))
    if existing is not None:
        raise ValidationError("Username already exists")

    company = await get_or_create_company(db, payload.company_name)
    admin_role, user_role = await registry.ensure_bootstrap_roles()

    password_hash = await run_in_threadpool(hash_password, payload.password)
    user = User(username=payload.username, password_hash=password_hash, company_id=company.id)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("Username already exists")
    await db.refresh(user)

    is_first_user = await count_company_users(db, company.id) == 1
    role = admin_role if is_first_user else user_role
    await registry.assign_role(user.id, role.id)
    await db.refresh(user, attribute_names=["roles"])
    log.info(f"Registered user {user.id} in company {company.id} with role {role.name!r}")

    await _open_session(db, response, user)
    return AuthResponse(message="Registration successful", user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(config.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: UserCredentials,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Verify credentials and open a session. 401 on any mismatch."""
    user = await db.scalar(select(User).where(User.username == credentials.username))
    if user is None:
        raise Unauthenticated("Invalid username or password")

    is_match = await run_in_threadpool(verify_password, credentials.password, user.password_hash)
    if not is_match:
        log.info(f"Failed login for user {user.id}")
        raise Unauthenticated("Invalid username or password")

    await _open_session(db, response, user)
    return AuthResponse(message="Login successful", user=UserResponse.model_validate(user))


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Destroy the current session and clear its cookie."""
    await SessionStore(db).destroy(get_session_token(request))
    clear_session_cookie(response)
    log.debug(f"Session closed for user {user.id}")
    return {"message": "Logged out successfully"}
