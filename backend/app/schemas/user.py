"""User Schemas — registration, login, and public user views.

Invariants:
    - UserCreate.username: at least 3 chars, stripped
    - Password length is checked by the account service (field-level message),
      not here: the raw password must never be echoed back in a validation error
    - No response model exposes password_hash

Design Decisions:
    - UserResponse embeds a blog summary {id, title, author, url}, mirroring how
      BlogResponse embeds an owner summary
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.core.domain_types import USERNAME_MIN_LENGTH


class UserCreate(BaseModel):
    """User registration payload."""
    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=64)
    name: str | None = Field(None, max_length=200)
    password: str = Field(max_length=256)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN_LENGTH:
            raise ValueError(
                f"username must be at least {USERNAME_MIN_LENGTH} characters",
            )
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    username: str
    name: str | None = None


class UserBlog(BaseModel):
    id: UUID
    title: str
    author: str | None
    url: str


class UserResponse(BaseModel):
    """User response — public-facing account data."""
    id: UUID
    username: str
    name: str | None = None
    blogs: list[UserBlog] = Field(default_factory=list)
