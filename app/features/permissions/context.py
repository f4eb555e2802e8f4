"""
Per-request authorization context.
"""
from dataclasses import dataclass

from app.features.permissions.registry import ADMIN_ROLE
from app.features.permissions.schemas import PermissionFlag, RolePermissions


@dataclass(frozen=True)
class RoleGrant:
    """Snapshot of one assigned role."""
    name: str
    permissions: RolePermissions


@dataclass(frozen=True)
class AuthContext:
    """
    Immutable identity of the caller, built once per request.

    Passed explicitly to repository calls; company_id is the only tenant
    scope any query may use.
    """
    user_id: str
    company_id: str
    roles: tuple[RoleGrant, ...] = ()

    @classmethod
    def from_user(cls, user) -> "AuthContext":
        return cls(
            user_id=user.id,
            company_id=user.company_id,
            roles=tuple(
                RoleGrant(name=role.name, permissions=RolePermissions.model_validate(role.permissions or {}))
                for role in user.roles
            ),
        )

    def allows(self, flag: PermissionFlag) -> bool:
        """OR across every assigned role of (flag or `all`)."""
        return any(grant.permissions.grants(flag) for grant in self.roles)

    def has_role(self, name: str) -> bool:
        return any(grant.name == name for grant in self.roles)

    @property
    def is_admin(self) -> bool:
        """Literal "admin" role. Independent of the `all` flag."""
        return self.has_role(ADMIN_ROLE)
