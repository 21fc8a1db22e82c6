"""User ORM — identity that tasks reference by assignment.

Invariants:
    - username and email are unique (storage constraint is the final authority)
    - email stored lower-cased so the unique constraint is case-insensitive
    - Owns tasks by reference only: deletion nullifies, never cascades

Design Decisions:
    - No ORM relationship to Task: the delete cascade is an explicit engine policy,
      not something the ORM does implicitly on flush
"""

from datetime import datetime

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from tracker.db.base import Base, utcnow


class User(Base):
    """User entity."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    email: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True,
    )
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
