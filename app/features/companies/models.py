"""
Company model.

A company is the tenant boundary: every user and every object belongs to
exactly one company.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Company(Base, TimestampMixin):
    """
    Company (tenant) model.

    Companies are created on first registration under a new name and are
    never deleted in normal flow.
    """
    __tablename__ = "companies"

    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name!r})>"
