"""Task Schemas — creation, partial update, status transition, list response.

Invariants:
    - title: 1-200 chars after strip; description: <= 1000 chars
    - status/priority must be enum members (strict, unlike list filters)
    - due_date must be a YYYY-MM-DD string or a date
    - assigned_to: positive int, or null (null = unassign, only in updates/creation)
    - TaskUpdate rejects explicit null for title, status, priority
"""

import re
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tracker.core.domain_types import MAX_ROW_ID, TaskPriority, TaskStatus
from tracker.schemas.user import UserSummary

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NON_NULLABLE = ("title", "status", "priority")


def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    if len(v) > 200:
        raise ValueError("title must be 200 characters or less")
    return v


def _clean_description(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if len(v) > 1000:
        raise ValueError("description must be 1000 characters or less")
    return v


def _check_due_date(v: object) -> object:
    if v is None or isinstance(v, date):
        return v
    if not isinstance(v, str) or not DATE_PATTERN.match(v):
        raise ValueError("due_date must be in YYYY-MM-DD format")
    return v


class TaskCreate(BaseModel):
    """Task creation — only title is required."""
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    assigned_to: int | None = Field(None, gt=0, le=MAX_ROW_ID)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return _clean_description(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v: object) -> object:
        return _check_due_date(v)


class TaskUpdate(BaseModel):
    """Partial task update — only supplied fields change."""
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    assigned_to: int | None = Field(None, gt=0, le=MAX_ROW_ID)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        return None if v is None else _clean_title(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return _clean_description(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v: object) -> object:
        return _check_due_date(v)

    @model_validator(mode="after")
    def reject_explicit_null(self):
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class StatusTransition(BaseModel):
    """Target status for the state machine."""
    status: TaskStatus


class TaskResponse(BaseModel):
    """Task with its assignee resolved (null when unassigned)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: date | None = None
    assigned_to: int | None = None
    assignee: UserSummary | None = None
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None


class TaskListResponse(BaseModel):
    """One page of tasks plus pagination metadata and facets."""
    model_config = ConfigDict(populate_by_name=True)

    items: list[TaskResponse]
    total: int
    count: int
    limit: int
    offset: int
    has_more: bool = Field(serialization_alias="hasMore")
    facets: dict[str, dict[str, int]] = {}
