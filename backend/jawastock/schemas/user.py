"""User Schemas: registration, login and public user view.

Invariants:
    - UserResponse has no password field: it cannot leak by construction
    - Field limits mirror core.validate_input (which re-checks them)
"""

from datetime import datetime

from pydantic import Field, field_validator

from jawastock.core.domain_types import UserRole
from jawastock.schemas.base import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.USER
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = Field(None, max_length=2000)
    profile_image: str | None = None

    @field_validator("username", "email")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()


class LoginRequest(CamelModel):
    email: str
    password: str = Field(min_length=6)


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    role: UserRole
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    created_at: datetime
