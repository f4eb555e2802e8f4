"""
Authorization guard dependencies.

Each request is resolved into an AuthContext by `get_auth_context`
(unauthenticated callers get 401 there). The dependencies below then
enforce permission flags, the literal "admin" role, and same-company
membership before the route body runs.
"""
from typing import Annotated
from fastapi import Depends

from app.core.exceptions import Forbidden
from app.features.permissions.context import AuthContext
from app.features.permissions.schemas import PermissionFlag
from app.features.users.dependencies import get_auth_context
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)


def require_permission(flag: PermissionFlag):
    """
    FastAPI dependency to require a permission flag on any assigned role.

    Usage:
        @router.post("/objects")
        async def create_object(
            auth: AuthContext = Depends(require_permission(PermissionFlag.CREATE))
        ):
            pass

    Raises:
        Forbidden: 403 if no role grants `flag` (or `all`)
    """
    async def permission_dependency(
        auth: Annotated[AuthContext, Depends(get_auth_context)]
    ) -> AuthContext:
        if not auth.allows(flag):
            log.debug(f"User {auth.user_id} denied {flag.value} in company {auth.company_id}")
            raise Forbidden()
        return auth

    return permission_dependency


async def require_admin(
    auth: Annotated[AuthContext, Depends(get_auth_context)]
) -> AuthContext:
    """
    Require a role literally named "admin".

    This is stronger than the flag check and does not consult `all`.
    """
    if not auth.is_admin:
        log.debug(f"User {auth.user_id} denied admin access")
        raise Forbidden()
    return auth


def ensure_same_company(auth: AuthContext, target: User | None) -> User:
    """
    Reject a target user outside the caller's company.

    A missing target is rejected the same way.
    """
    if target is None or target.company_id != auth.company_id:
        log.info(f"User {auth.user_id} refused access to user outside company {auth.company_id}")
        raise Forbidden()
    return target
