"""
Role registry.

Get-or-create access to the global roles table and user role assignment.
One instance per request session, injected through `get_role_registry`.
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy import select, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.permissions.models import Role
from app.features.permissions.schemas import RolePermissions
from app.features.users.models import user_roles
from app.utils import get_logger


log = get_logger(__name__)


ADMIN_ROLE = "admin"
USER_ROLE = "user"

ADMIN_PERMISSIONS = RolePermissions(
    all=True,
    create=True,
    read=True,
    update=True,
    delete=True,
    manage_users=True,
)

USER_PERMISSIONS = RolePermissions(
    create=True,
    read=True,
    update=True,
    delete=True,
)


class RoleRegistry:
    """Named roles mapped to permission flags."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_role(self, role_id: str) -> Role | None:
        return await self.db.scalar(select(Role).where(Role.id == role_id))

    async def get_role_by_name(self, name: str) -> Role | None:
        return await self.db.scalar(select(Role).where(Role.name == name))

    async def list_roles(self) -> list[Role]:
        result = await self.db.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def ensure_role(self, name: str, permissions: RolePermissions) -> Role:
        """
        Return the role called `name`, creating it with `permissions` if missing.

        Existing roles are returned untouched; there is no update path. If a
        concurrent request inserts the same name first, the unique constraint
        rejects our insert and the winner's row is returned instead.
        """
        role = await self.get_role_by_name(name)
        if role is not None:
            return role

        role = Role(name=name, permissions=permissions.to_storage())
        self.db.add(role)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            log.info("Role %r created concurrently, reusing existing row", name)
            role = await self.get_role_by_name(name)
            if role is None:
                raise
            return role

        await self.db.refresh(role)
        log.info("Created role %r", name)
        return role

    async def ensure_bootstrap_roles(self) -> tuple[Role, Role]:
        """Create the system-wide "admin" and "user" roles on first use."""
        admin = await self.ensure_role(ADMIN_ROLE, ADMIN_PERMISSIONS)
        user = await self.ensure_role(USER_ROLE, USER_PERMISSIONS)
        return admin, user

    async def assign_role(self, user_id: str, role_id: str) -> bool:
        """
        Attach a role to a user.

        Returns False when the user already holds the role.
        """
        existing = await self.db.execute(
            select(user_roles.c.user_id).where(
                user_roles.c.user_id == user_id,
                user_roles.c.role_id == role_id,
            )
        )
        if existing.first() is not None:
            return False

        await self.db.execute(insert(user_roles).values(user_id=user_id, role_id=role_id))
        await self.db.commit()
        log.info("Assigned role %s to user %s", role_id, user_id)
        return True


async def get_role_registry(
    db: Annotated[AsyncSession, Depends(get_db)]
) -> RoleRegistry:
    return RoleRegistry(db)
