"""
Object catalog models.

Objects are generic typed CRM records (contacts, leads, ...) with a
schema-less `fields` map. Every object belongs to exactly one company.
"""
from typing import Any, Dict
from sqlalchemy import String, ForeignKey, Index, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Object(Base, TimestampMixin):
    """
    Generic CRM record.

    Attributes:
        id: ULID primary key
        name: Display name
        type: Free-text type (e.g. 'Contact', 'Lead')
        description: Optional long description
        fields: Custom field name -> value (string, number, boolean or ISO datetime)
        created_by: User who created the record
        company_id: Owning company, fixed at creation
    """
    __tablename__ = "objects"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    fields: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_by: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    company_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("companies.id"),
        nullable=False,
        index=True
    )

    __table_args__ = (
        Index("ix_objects_company_type", "company_id", "type"),
    )

    def __repr__(self) -> str:
        return f"<Object(id={self.id}, name={self.name!r}, type={self.type!r}, company_id={self.company_id})>"


class ObjectType(Base, TimestampMixin):
    """
    Advisory field template for an object type.

    Never enforced against Object.fields.
    """
    __tablename__ = "object_types"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    fields: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_by: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<ObjectType(id={self.id}, name={self.name!r})>"


class ObjectRelation(Base, TimestampMixin):
    """Directed edge between two objects of the same company."""
    __tablename__ = "object_relations"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    source_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("objects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    target_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("objects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<ObjectRelation(id={self.id}, {self.source_id} -{self.type}-> {self.target_id})>"
