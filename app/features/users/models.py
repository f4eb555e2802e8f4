"""
User model with ULID primary keys.
"""
from sqlalchemy import String, ForeignKey, Table, Column, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid


# User-Role relationship. The (user_id, role_id) pair is the whole identity.
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(26), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", String(26), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)


class User(Base, TimestampMixin):
    """
    User model representing authenticated users.

    Every user belongs to exactly one company. Roles are global and attached
    through the user_roles table.
    """
    __tablename__ = "users"

    # Primary key using ULID (Universally Unique Lexicographically Sortable Identifier)
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    # Login name
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    # bcrypt hash, salt embedded. Never serialized.
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    company_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("companies.id"),
        nullable=False,
        index=True
    )

    # Relationships
    company: Mapped["Company"] = relationship(  # type: ignore
        "Company",
        lazy="selectin"
    )

    roles: Mapped[list["Role"]] = relationship(  # type: ignore
        "Role",
        secondary=user_roles,
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r}, company_id={self.company_id})>"
