"""Comment Schemas — append-only notes, so there is no update shape."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tracker.core.domain_types import MAX_ROW_ID


class CommentCreate(BaseModel):
    author_id: int = Field(gt=0, le=MAX_ROW_ID)
    body: str

    @field_validator("body")
    @classmethod
    def check_body(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("body cannot be empty or whitespace")
        if len(v) > 2000:
            raise ValueError("body must be 2000 characters or less")
        return v


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    author_id: int
    body: str
    created_at: datetime
