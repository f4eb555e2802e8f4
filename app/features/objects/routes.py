"""
Object catalog API routes.

All routes are scoped to the caller's company. Mutations additionally need
the matching permission flag; reads need only a session.
"""
import json
from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import StorageError, ValidationError
from app.features.objects.repository import ObjectRepository, get_object_repository
from app.features.objects.schemas import (
    ObjectCreate,
    ObjectFilter,
    ObjectResponse,
    ObjectTypeCreate,
    ObjectTypeResponse,
    ObjectUpdate,
    RelationCreate,
    RelationResponse,
    SortField,
    SortOrder,
)
from app.features.permissions.context import AuthContext
from app.features.permissions.dependencies import require_permission
from app.features.permissions.schemas import PermissionFlag
from app.features.users.dependencies import get_auth_context
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


def _parse_field_filters(raw: str | None) -> dict[str, str]:
    """Decode the `fields` query parameter, a JSON object of name -> substring."""
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError("fields must be a JSON object")
    if not isinstance(decoded, dict):
        raise ValidationError("fields must be a JSON object")
    if any('"' in key for key in decoded):
        raise ValidationError("field names must not contain '\"'")
    return {
        key: value if isinstance(value, str) else json.dumps(value)
        for key, value in decoded.items()
        if value not in (None, "")
    }


def _parse_sort(sort_by: str | None, sort_order: str | None) -> tuple[SortField | None, SortOrder | None]:
    """Unknown sort columns fall back to the default ordering."""
    try:
        field = SortField(sort_by) if sort_by else None
    except ValueError:
        field = None
    order = SortOrder.DESC if sort_order == SortOrder.DESC.value else SortOrder.ASC
    return field, order


@router.get("/objects", response_model=list[ObjectResponse])
async def list_objects(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
    search: str | None = None,
    type: str | None = None,
    fields: str | None = Query(None, description="JSON object of field name -> substring"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
):
    """
    List the caller's company objects.

    Parameters:
        search: substring matched against name, type and description
        type: exact type; "_all" disables the filter
        fields: JSON-encoded per-field substring filters
        sortBy: name, type or createdAt (default createdAt descending)
        sortOrder: asc or desc
    """
    field, order = _parse_sort(sort_by, sort_order)
    filters = ObjectFilter(
        search=search,
        type=type,
        fields=_parse_field_filters(fields),
        sort_by=field,
        sort_order=order,
    )
    try:
        return await repo.list_objects(auth.company_id, filters)
    except SQLAlchemyError as e:
        log.error(f"Failed to fetch objects: {e}", exc_info=True)
        raise StorageError("Failed to fetch objects") from e


@router.get("/object-types", response_model=list[str])
async def list_object_types(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Distinct types used by the company plus the suggested defaults."""
    try:
        return await repo.list_distinct_types(auth.company_id)
    except SQLAlchemyError as e:
        log.error(f"Failed to fetch object types: {e}", exc_info=True)
        raise StorageError("Failed to fetch object types") from e


@router.get("/object-templates", response_model=list[ObjectTypeResponse])
async def list_object_templates(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Advisory field templates created within the company."""
    return await repo.list_type_templates(auth.company_id)


@router.post("/object-templates", response_model=ObjectTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_object_template(
    template: ObjectTypeCreate,
    auth: Annotated[AuthContext, Depends(require_permission(PermissionFlag.CREATE))],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Save a field template. Templates are never enforced on objects."""
    return await repo.create_type_template(auth.user_id, template)


@router.post("/objects", response_model=ObjectResponse)
async def create_object(
    object_data: ObjectCreate,
    auth: Annotated[AuthContext, Depends(require_permission(PermissionFlag.CREATE))],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Create an object owned by the caller's company."""
    try:
        return await repo.create(auth.company_id, auth.user_id, object_data)
    except SQLAlchemyError as e:
        log.error(f"Failed to create object: {e}", exc_info=True)
        raise StorageError("Failed to create object") from e


@router.get("/objects/{object_id}", response_model=ObjectResponse)
async def get_object(
    object_id: str,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Get one object; 404 if missing or owned by another company."""
    return await repo.get(object_id, auth.company_id)


@router.put("/objects/{object_id}", response_model=ObjectResponse)
async def update_object(
    object_id: str,
    patch: ObjectUpdate,
    auth: Annotated[AuthContext, Depends(require_permission(PermissionFlag.UPDATE))],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Partially update an object; 404 if missing or owned by another company."""
    try:
        return await repo.update(object_id, auth.company_id, patch)
    except SQLAlchemyError as e:
        log.error(f"Failed to update object {object_id}: {e}", exc_info=True)
        raise StorageError("Failed to update object") from e


@router.delete("/objects/{object_id}")
async def delete_object(
    object_id: str,
    auth: Annotated[AuthContext, Depends(require_permission(PermissionFlag.DELETE))],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Delete an object and its relations; 404 if missing or owned by another company."""
    try:
        await repo.delete(object_id, auth.company_id)
    except SQLAlchemyError as e:
        log.error(f"Failed to delete object {object_id}: {e}", exc_info=True)
        raise StorageError("Failed to delete object") from e
    return {"message": "Object deleted successfully"}


# Relations

@router.get("/objects/{object_id}/relations", response_model=list[RelationResponse])
async def list_relations(
    object_id: str,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Relations where the object is the source or the target."""
    return await repo.list_relations(object_id, auth.company_id)


@router.post("/objects/{object_id}/relations", response_model=RelationResponse)
async def create_relation(
    object_id: str,
    relation: RelationCreate,
    auth: Annotated[AuthContext, Depends(require_permission(PermissionFlag.UPDATE))],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Relate two objects of the caller's company."""
    try:
        return await repo.create_relation(object_id, auth.company_id, relation)
    except SQLAlchemyError as e:
        log.error(f"Failed to create relation: {e}", exc_info=True)
        raise StorageError("Failed to create relation") from e


@router.delete("/objects/{object_id}/relations/{relation_id}")
async def delete_relation(
    object_id: str,
    relation_id: str,
    auth: Annotated[AuthContext, Depends(require_permission(PermissionFlag.UPDATE))],
    repo: Annotated[ObjectRepository, Depends(get_object_repository)],
):
    """Remove a relation touching the object."""
    await repo.delete_relation(object_id, relation_id, auth.company_id)
    return {"message": "Relation removed successfully"}
