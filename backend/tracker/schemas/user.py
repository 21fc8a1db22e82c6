"""User Schemas — creation, partial update and response shapes.

Invariants:
    - username: 1-50 chars, letters/digits/._- only, stripped
    - email: <= 100 chars, local@domain.tld, stripped and lower-cased
    - full_name: 1-100 chars, stripped, non-empty
    - UserUpdate: explicit null is rejected (every user column is non-nullable)
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _clean_username(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("username cannot be empty or whitespace")
    if len(v) > 50:
        raise ValueError("username must be 50 characters or less")
    if not USERNAME_PATTERN.match(v):
        raise ValueError("username may contain only letters, digits, '.', '_' and '-'")
    return v


def _clean_email(v: str) -> str:
    v = v.strip().lower()
    if len(v) > 100:
        raise ValueError("email must be 100 characters or less")
    if not EMAIL_PATTERN.match(v):
        raise ValueError("email must be a valid address")
    return v


def _clean_full_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("full_name cannot be empty or whitespace")
    if len(v) > 100:
        raise ValueError("full_name must be 100 characters or less")
    return v


class UserCreate(BaseModel):
    """User creation — every field required."""
    username: str
    email: str
    full_name: str

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _clean_email(v)

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return _clean_full_name(v)


class UserUpdate(BaseModel):
    """Partial user update — only supplied fields change."""
    username: str | None = None
    email: str | None = None
    full_name: str | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str | None:
        return None if v is None else _clean_username(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return None if v is None else _clean_email(v)

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str | None) -> str | None:
        return None if v is None else _clean_full_name(v)

    @model_validator(mode="after")
    def reject_explicit_null(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class UserSummary(BaseModel):
    """Nested user shape embedded in task responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str


class UserResponse(UserSummary):
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[UserResponse]
    total: int
    count: int
    limit: int
    offset: int
    has_more: bool = Field(serialization_alias="hasMore")
