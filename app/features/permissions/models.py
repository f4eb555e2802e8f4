"""
Role model for role-based access control.

Roles are global (not per-company) and shared by name across tenants. Each
role carries a fixed set of permission flags stored as JSON:

    {"all": bool, "create": bool, "read": bool, "update": bool,
     "delete": bool, "manageUsers": bool}
"""
from typing import Any, Dict
from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class Role(Base, TimestampMixin):
    """
    Role model grouping permission flags.

    The unique constraint on name is what keeps concurrent get-or-create
    calls from inserting duplicates.
    Examples: admin, user, viewer
    """
    __tablename__ = "roles"

    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    # Role definition
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)

    # Permission flags, fixed once the role is created
    permissions: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name!r})>"
