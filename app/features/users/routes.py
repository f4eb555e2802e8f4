"""
User feature routes.

Company-scoped user administration. Everything except /user requires the
"admin" role, and an admin only ever sees users of their own company.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.exceptions import NotFound, StorageError
from app.features.permissions.context import AuthContext
from app.features.permissions.dependencies import ensure_same_company, require_admin
from app.features.permissions.registry import RoleRegistry, get_role_registry
from app.features.permissions.schemas import AssignRoleToUser
from app.features.users.dependencies import get_current_user
from app.features.users.models import User
from app.features.users.schemas import UserResponse
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter(tags=["users"])


@router.get("/user", response_model=UserResponse)
async def get_current_user_profile(
    user: Annotated[User, Depends(get_current_user)]
):
    """Get current authenticated user's profile."""
    return user


# Admin-only routes
@router.get("/users", response_model=list[UserResponse])
async def list_company_users(
    auth: Annotated[AuthContext, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """List the admin's company users with their roles (admin only)."""
    try:
        result = await db.execute(
            select(User)
            .where(User.company_id == auth.company_id)
            .order_by(User.created_at, User.username)
        )
        return result.scalars().all()
    except SQLAlchemyError as e:
        log.error(f"Failed to fetch users: {e}", exc_info=True)
        raise StorageError("Failed to fetch users") from e


@router.post("/users/{user_id}/roles")
async def assign_role(
    user_id: str,
    assignment: AssignRoleToUser,
    auth: Annotated[AuthContext, Depends(require_admin)],
    registry: Annotated[RoleRegistry, Depends(get_role_registry)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Assign a role to a user of the admin's own company (admin only)."""
    target = await db.scalar(select(User).where(User.id == user_id))
    ensure_same_company(auth, target)

    role = await registry.get_role(assignment.role_id)
    if role is None:
        raise NotFound("Role not found")

    try:
        await registry.assign_role(target.id, role.id)
    except SQLAlchemyError as e:
        log.error(f"Error assigning role {role.id} to user {target.id}: {e}", exc_info=True)
        raise StorageError("Error assigning role") from e

    return {"message": "Role assigned successfully"}
