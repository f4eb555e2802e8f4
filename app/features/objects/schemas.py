"""
Pydantic schemas for objects, object relations and type templates.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, model_validator


# Value stored under a custom field. Exact JSON types win: true stays a
# bool, 3 an int, "2024-01-01" a string. Datetimes are stored as ISO strings.
FieldValue = Optional[Union[bool, int, float, datetime, str]]


class SortField(str, Enum):
    NAME = "name"
    TYPE = "type"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ObjectFilter(BaseModel):
    """
    Filters for listing a company's objects.

    search: case-insensitive substring over name, type and description (OR)
    type: exact type match
    fields: custom field name -> case-insensitive substring
    sort_by/sort_order: ordering; default createdAt descending
    """
    search: str | None = None
    type: str | None = None
    fields: Dict[str, str] = Field(default_factory=dict)
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None


class ObjectBase(BaseModel):
    """Base schema for objects."""
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    fields: Dict[str, FieldValue] = Field(default_factory=dict)


class ObjectCreate(ObjectBase):
    """
    Schema for creating an object.

    company_id and created_by are never read from input; unknown keys are
    dropped.
    """
    pass


class ObjectUpdate(BaseModel):
    """Schema for partially updating an object."""
    name: str | None = Field(None, min_length=1, max_length=255)
    type: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    fields: Dict[str, FieldValue] | None = None

    @model_validator(mode="after")
    def required_columns_not_null(self):
        for key in ("name", "type", "fields"):
            if key in self.model_fields_set and getattr(self, key) is None:
                raise ValueError(f"{key} cannot be null")
        return self


class ObjectResponse(BaseModel):
    """Schema for object responses."""
    id: str
    name: str
    type: str
    description: str | None = None
    fields: Dict[str, Any]
    created_by: str | None = None
    company_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RelationCreate(BaseModel):
    """Schema for relating an object to another object."""
    target_id: str = Field(..., alias="targetId", min_length=1)
    type: str = Field("Related", min_length=1, max_length=50)

    model_config = ConfigDict(populate_by_name=True)


class RelationResponse(BaseModel):
    """Schema for relation responses."""
    id: str
    source_id: str
    target_id: str
    type: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ObjectTypeCreate(BaseModel):
    """Schema for an advisory field template."""
    name: str = Field(..., min_length=1, max_length=100)
    fields: Dict[str, Any] = Field(default_factory=dict)


class ObjectTypeResponse(BaseModel):
    id: str
    name: str
    fields: Dict[str, Any]
    created_by: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
