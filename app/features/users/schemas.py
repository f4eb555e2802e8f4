"""
Pydantic schemas for user-related requests and responses.

Response schemas never include the password hash.
"""
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.features.permissions.schemas import RolePublic


# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class UserCredentials(BaseModel):
    """Schema for logging in."""
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class UserRegister(UserCredentials):
    """Schema for registering a new user under a (new or existing) company."""
    company_name: str = Field(..., alias="companyName", min_length=1, max_length=255)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("username", "company_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserResponse(BaseModel):
    """Schema for user responses."""
    id: str
    username: str
    company_id: str
    roles: list[RolePublic] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Login/registration result."""
    message: str
    user: UserResponse
