"""Integrity Enforcer — delete cascade policy and the status state machine.

Invariants:
    - delete_user nullifies tasks.assigned_to, removes the user's comments and the user
      in ONE transaction: no reader ever sees a dangling assignee
    - delete_task removes the task's comments with it, in one transaction
    - transition_status accepts exactly one forward step; entering done stamps closed_at,
      other transitions leave closed_at untouched
    - Existence is checked before any mutation (NotFoundError, nothing written)

Design Decisions:
    - Nullify, not reject and not cascade-delete: removing a person must not lose work
    - The engine nullifies explicitly even though the FK says ON DELETE SET NULL:
      updated_at must move, and the user-facing semantics must not depend on the
      storage engine's constraint support
    - Rows locked FOR UPDATE where the dialect supports it, so two concurrent
      transitions on one task serialize and the loser sees the new state
"""

import logging
from datetime import datetime

from sqlalchemy import delete, select, update

from tracker.core.domain_types import TaskId, TaskStatus, UserId
from tracker.core.enforce_transitions import check_transition, parse_status
from tracker.core.errors import NotFoundError
from tracker.db.base import utcnow
from tracker.infrastructure.database import DatabaseSessionManager
from tracker.models.comment import Comment
from tracker.models.task import Task
from tracker.models.user import User
from tracker.schemas.task import TaskResponse
from tracker.services.task_queries import assemble_task

logger = logging.getLogger(__name__)


def apply_transition(task: Task, target: TaskStatus, now: datetime) -> None:
    """Move task one step forward or raise IllegalTransitionError; mutates task in place."""
    check_transition(parse_status(task.status), target)
    task.status = target.value
    if target.is_terminal:
        task.closed_at = now
    task.updated_at = now


class IntegrityEnforcer:
    """Policy layer for deletions and status transitions."""

    def __init__(
        self, db: DatabaseSessionManager, log: logging.Logger | None = None,
    ):
        self.db = db
        self.log = log or logger

    async def delete_user(self, user_id: UserId) -> int:
        """Delete a user; returns how many tasks were unassigned."""
        async with self.db.transaction() as session:
            found = await session.execute(
                select(User.id).where(User.id == user_id).with_for_update(),
            )
            if found.scalar_one_or_none() is None:
                raise NotFoundError("User", user_id)

            nullified = await session.execute(
                update(Task)
                .where(Task.assigned_to == user_id)
                .values(assigned_to=None, updated_at=utcnow())
                .execution_options(synchronize_session=False),
            )
            await session.execute(
                delete(Comment).where(Comment.author_id == user_id),
            )
            await session.execute(delete(User).where(User.id == user_id))
            unassigned = nullified.rowcount or 0

        self.log.info(
            "User deleted",
            extra={"action": "delete_user", "user_id": user_id, "count": unassigned},
        )
        return unassigned

    async def delete_task(self, task_id: TaskId) -> None:
        async with self.db.transaction() as session:
            found = await session.execute(
                select(Task.id).where(Task.id == task_id).with_for_update(),
            )
            if found.scalar_one_or_none() is None:
                raise NotFoundError("Task", task_id)
            await session.execute(
                delete(Comment).where(Comment.task_id == task_id),
            )
            await session.execute(delete(Task).where(Task.id == task_id))

        self.log.info(
            "Task deleted", extra={"action": "delete_task", "task_id": task_id},
        )

    async def transition_status(
        self, task_id: TaskId, target: TaskStatus | str,
    ) -> TaskResponse:
        """Advance a task's status by exactly one step."""
        target_status = parse_status(target)
        async with self.db.transaction() as session:
            result = await session.execute(
                select(Task).where(Task.id == task_id).with_for_update(),
            )
            task = result.scalar_one_or_none()
            if task is None:
                raise NotFoundError("Task", task_id)
            previous = task.status

            apply_transition(task, target_status, utcnow())
            await session.flush()
            assignee = (
                await session.get(User, task.assigned_to)
                if task.assigned_to is not None else None
            )

        self.log.info(
            f"Task status {previous} -> {target_status.value}",
            extra={"action": "transition_status", "task_id": task_id},
        )
        return assemble_task(task, assignee)
