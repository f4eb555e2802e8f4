"""
Role management API routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import StorageError
from app.features.permissions.context import AuthContext
from app.features.permissions.dependencies import require_admin
from app.features.permissions.registry import RoleRegistry, get_role_registry
from app.features.permissions.schemas import RoleResponse
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    auth: Annotated[AuthContext, Depends(require_admin)],
    registry: Annotated[RoleRegistry, Depends(get_role_registry)],
):
    """List all roles (admin only). Roles are global, so this is not company-filtered."""
    try:
        return await registry.list_roles()
    except SQLAlchemyError as e:
        log.error(f"Error fetching roles: {e}", exc_info=True)
        raise StorageError("Error fetching roles") from e
