"""Task Service — create and partially update tasks.

Invariants:
    - assigned_to must resolve to an existing user at write time (ReferentialIntegrityError)
    - assigned_to: null in an update unassigns the task
    - A status different from the current one goes through the state machine;
      the same status is a no-op so repeating an identical update never fails
    - closed_at set iff status is done (creation as done stamps it too)
    - Partial updates need at least one field; updated_at moves on every update
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.domain_types import TaskId, UserId
from tracker.core.errors import (
    NotFoundError, ReferentialIntegrityError, ValidationError,
)
from tracker.db.base import utcnow
from tracker.infrastructure.database import DatabaseSessionManager
from tracker.models.task import Task
from tracker.models.user import User
from tracker.schemas import validate_input
from tracker.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from tracker.services.integrity import apply_transition
from tracker.services.task_queries import assemble_task

logger = logging.getLogger(__name__)


async def require_user(session: AsyncSession, user_id: UserId, field: str) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise ReferentialIntegrityError("User", user_id, field)
    return user


def _plain(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


class TaskService:
    """Task writes with referential checks."""

    def __init__(
        self, db: DatabaseSessionManager, log: logging.Logger | None = None,
    ):
        self.db = db
        self.log = log or logger

    async def create_task(
        self, data: TaskCreate | Mapping[str, Any],
    ) -> TaskResponse:
        body = validate_input(TaskCreate, data)
        async with self.db.transaction() as session:
            assignee = None
            if body.assigned_to is not None:
                assignee = await require_user(session, body.assigned_to, "assigned_to")

            now = utcnow()
            task = Task(
                title=body.title,
                description=body.description,
                status=body.status.value,
                priority=body.priority.value,
                due_date=body.due_date,
                assigned_to=body.assigned_to,
                created_at=now,
                updated_at=now,
                closed_at=now if body.status.is_terminal else None,
            )
            session.add(task)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ReferentialIntegrityError(
                    "User", body.assigned_to, "assigned_to",
                ) from e

        self.log.info(
            "Task created",
            extra={"action": "create_task", "task_id": task.id, "user_id": task.assigned_to},
        )
        return assemble_task(task, assignee)

    async def update_task(
        self, task_id: TaskId, data: TaskUpdate | Mapping[str, Any],
    ) -> TaskResponse:
        changes = validate_input(TaskUpdate, data).changes()
        if not changes:
            raise ValidationError("At least one field must be provided for update")

        async with self.db.transaction() as session:
            result = await session.execute(
                select(Task).where(Task.id == task_id).with_for_update(),
            )
            task = result.scalar_one_or_none()
            if task is None:
                raise NotFoundError("Task", task_id)

            now = utcnow()
            target_status = changes.pop("status", None)
            if changes.get("assigned_to") is not None:
                await require_user(session, changes["assigned_to"], "assigned_to")

            for name, value in changes.items():
                setattr(task, name, _plain(value))
            if target_status is not None and target_status.value != task.status:
                apply_transition(task, target_status, now)
            task.updated_at = now

            try:
                await session.flush()
            except IntegrityError as e:
                raise ReferentialIntegrityError(
                    "User", changes.get("assigned_to"), "assigned_to",
                ) from e
            assignee = (
                await session.get(User, task.assigned_to)
                if task.assigned_to is not None else None
            )

        fields = sorted(changes) + (["status"] if target_status is not None else [])
        self.log.info(
            "Task updated",
            extra={"action": "update_task", "task_id": task_id, "fields": fields},
        )
        return assemble_task(task, assignee)
