"""
Tenant-scoped object repository.

Every query starts from `company_id == caller's company`. Lookups by id
always include the company predicate, so a row owned by another company is
indistinguishable from a missing one (both raise NotFound).
"""
from typing import Annotated
from fastapi import Depends
from sqlalchemy import select, delete, or_, asc, desc, case, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.exceptions import NotFound
from app.features.objects.models import Object, ObjectRelation, ObjectType
from app.features.objects.schemas import (
    ObjectCreate,
    ObjectFilter,
    ObjectTypeCreate,
    ObjectUpdate,
    RelationCreate,
    SortField,
    SortOrder,
)
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)


# Offered alongside whatever types a company already uses
SUGGESTED_TYPES = ["Contact", "Lead", "Company", "Project", "Task"]

# Type filter value meaning "any type"
ALL_TYPES = "_all"

_SORT_COLUMNS = {
    SortField.NAME: Object.name,
    SortField.TYPE: Object.type,
    SortField.CREATED_AT: Object.created_at,
}


def _field_text(db: AsyncSession, key: str):
    """
    Text form of a custom field as it appears in JSON.

    SQLite extracts booleans as 1/0, so they are mapped back to true/false.
    """
    value = Object.fields[key].as_string()
    if db.get_bind().dialect.name != "sqlite":
        return value
    kind = func.json_type(Object.fields, f'$."{key}"')
    return case((kind.in_(("true", "false")), kind), else_=value)


def _contains_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ObjectRepository:
    """CRUD over a company's objects and their relations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_objects(self, company_id: str, filters: ObjectFilter | None = None) -> list[Object]:
        filters = filters or ObjectFilter()
        stmt = select(Object).where(Object.company_id == company_id)

        if filters.search:
            pattern = _contains_pattern(filters.search)
            stmt = stmt.where(
                or_(
                    Object.name.ilike(pattern, escape="\\"),
                    Object.type.ilike(pattern, escape="\\"),
                    Object.description.ilike(pattern, escape="\\"),
                )
            )

        if filters.type and filters.type != ALL_TYPES:
            stmt = stmt.where(Object.type == filters.type)

        for key, value in filters.fields.items():
            if value:
                stmt = stmt.where(
                    _field_text(self.db, key).ilike(_contains_pattern(value), escape="\\")
                )

        if filters.sort_by is not None:
            order = desc if filters.sort_order == SortOrder.DESC else asc
            stmt = stmt.order_by(order(_SORT_COLUMNS[filters.sort_by]), Object.id)
        else:
            stmt = stmt.order_by(desc(Object.created_at), desc(Object.id))

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get(self, object_id: str, company_id: str) -> Object:
        obj = await self.db.scalar(
            select(Object).where(
                Object.id == object_id,
                Object.company_id == company_id,
            )
        )
        if obj is None:
            raise NotFound("Object not found")
        return obj

    async def create(self, company_id: str, created_by: str, attrs: ObjectCreate) -> Object:
        """Insert an object owned by the caller's company."""
        data = attrs.model_dump(mode="json")
        obj = Object(
            name=data["name"],
            type=data["type"],
            description=data.get("description"),
            fields=data.get("fields") or {},
            created_by=created_by,
            company_id=company_id,
        )
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        log.info(f"Created object {obj.id} ({obj.type}) in company {company_id}")
        return obj

    async def update(self, object_id: str, company_id: str, patch: ObjectUpdate) -> Object:
        obj = await self.get(object_id, company_id)

        update_data = patch.model_dump(mode="json", exclude_unset=True)
        for key, value in update_data.items():
            setattr(obj, key, value)

        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def delete(self, object_id: str, company_id: str) -> None:
        obj = await self.get(object_id, company_id)

        await self.db.execute(
            delete(ObjectRelation).where(
                or_(
                    ObjectRelation.source_id == obj.id,
                    ObjectRelation.target_id == obj.id,
                )
            )
        )
        await self.db.delete(obj)
        await self.db.commit()
        log.info(f"Deleted object {object_id} in company {company_id}")

    async def list_distinct_types(self, company_id: str) -> list[str]:
        """Types in use by the company, then the suggested types not already present."""
        result = await self.db.execute(
            select(Object.type)
            .where(Object.company_id == company_id)
            .distinct()
            .order_by(Object.type)
        )
        types = list(result.scalars().all())
        types.extend(t for t in SUGGESTED_TYPES if t not in types)
        return types

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    async def list_relations(self, object_id: str, company_id: str) -> list[ObjectRelation]:
        """Relations where the object is either source or target."""
        obj = await self.get(object_id, company_id)
        result = await self.db.execute(
            select(ObjectRelation)
            .where(
                or_(
                    ObjectRelation.source_id == obj.id,
                    ObjectRelation.target_id == obj.id,
                )
            )
            .order_by(ObjectRelation.created_at, ObjectRelation.id)
        )
        return list(result.scalars().all())

    async def create_relation(
        self,
        source_id: str,
        company_id: str,
        relation: RelationCreate
    ) -> ObjectRelation:
        """Both ends must belong to the caller's company."""
        source = await self.get(source_id, company_id)
        target = await self.get(relation.target_id, company_id)

        db_relation = ObjectRelation(source_id=source.id, target_id=target.id, type=relation.type)
        self.db.add(db_relation)
        await self.db.commit()
        await self.db.refresh(db_relation)
        return db_relation

    async def delete_relation(self, object_id: str, relation_id: str, company_id: str) -> None:
        obj = await self.get(object_id, company_id)
        db_relation = await self.db.scalar(
            select(ObjectRelation).where(
                ObjectRelation.id == relation_id,
                or_(
                    ObjectRelation.source_id == obj.id,
                    ObjectRelation.target_id == obj.id,
                ),
            )
        )
        if db_relation is None:
            raise NotFound("Relation not found")

        await self.db.delete(db_relation)
        await self.db.commit()

    # ------------------------------------------------------------------
    # Type templates
    # ------------------------------------------------------------------

    async def list_type_templates(self, company_id: str) -> list[ObjectType]:
        """Templates created by members of the company."""
        result = await self.db.execute(
            select(ObjectType)
            .join(User, User.id == ObjectType.created_by)
            .where(User.company_id == company_id)
            .order_by(ObjectType.name)
        )
        return list(result.scalars().all())

    async def create_type_template(self, created_by: str, template: ObjectTypeCreate) -> ObjectType:
        object_type = ObjectType(name=template.name, fields=template.fields, created_by=created_by)
        self.db.add(object_type)
        await self.db.commit()
        await self.db.refresh(object_type)
        return object_type


async def get_object_repository(
    db: Annotated[AsyncSession, Depends(get_db)]
) -> ObjectRepository:
    return ObjectRepository(db)
