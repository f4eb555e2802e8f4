"""
Pydantic schemas for roles and permission flags.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, Field, ConfigDict


class PermissionFlag(str, Enum):
    """Flags checked by the authorization guard."""
    ALL = "all"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE_USERS = "manage_users"


class RolePermissions(BaseModel):
    """
    Permission flags attached to a role.

    `all` is a super-permission that satisfies create/read/update/delete.
    Stored with camelCase keys (`manageUsers`).
    """
    all: bool = False
    create: bool = False
    read: bool = False
    update: bool = False
    delete: bool = False
    manage_users: bool = Field(False, alias="manageUsers")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def grants(self, flag: PermissionFlag) -> bool:
        """True if this flag is set, or `all` covers it."""
        if getattr(self, flag.value):
            return True
        return self.all and flag in (
            PermissionFlag.CREATE,
            PermissionFlag.READ,
            PermissionFlag.UPDATE,
            PermissionFlag.DELETE,
        )

    def to_storage(self) -> Dict[str, bool]:
        return self.model_dump(by_alias=True)


class RoleResponse(BaseModel):
    """Schema for role responses."""
    id: str
    name: str
    permissions: Dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RolePublic(BaseModel):
    """Role embedded in user responses."""
    id: str
    name: str
    permissions: Dict[str, Any]

    model_config = ConfigDict(from_attributes=True)


class AssignRoleToUser(BaseModel):
    """Schema for assigning a role to a user (admin only)."""
    role_id: str = Field(..., alias="roleId", min_length=1, description="Role to assign")

    model_config = ConfigDict(populate_by_name=True)
