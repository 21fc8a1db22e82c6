"""Task ORM — a ticket moving through todo -> in_progress -> done.

Invariants:
    - assigned_to is NULL or an existing users.id (never dangling)
    - closed_at is set iff status == done
    - created_at immutable; updated_at bumped by every mutation

Design Decisions:
    - ON DELETE SET NULL on assigned_to: storage backstop for the engine's own
      nullification, which runs first inside the same transaction
    - status/priority stored as short strings: enums live in core/domain_types.py
"""

from datetime import date, datetime

from sqlalchemy import Integer, String, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from tracker.core.domain_types import TaskPriority, TaskStatus
from tracker.db.base import Base, utcnow


class Task(Base):
    """Task entity."""
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_assigned_to", "assigned_to"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.TODO.value,
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskPriority.MEDIUM.value,
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
