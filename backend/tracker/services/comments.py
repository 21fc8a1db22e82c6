"""Comment Service — append-only comments on tasks.

Invariants:
    - A comment needs an existing task (NotFoundError) and author (ReferentialIntegrityError)
    - Comments are listed oldest first, id breaking ties
    - No update or single-comment delete: comments leave only with their task or author
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tracker.core.domain_types import TaskId
from tracker.core.errors import NotFoundError, ReferentialIntegrityError
from tracker.db.base import utcnow
from tracker.infrastructure.database import DatabaseSessionManager
from tracker.models.comment import Comment
from tracker.models.task import Task
from tracker.schemas import validate_input
from tracker.schemas.comment import CommentCreate, CommentResponse
from tracker.services.tasks import require_user

logger = logging.getLogger(__name__)


class CommentService:

    def __init__(
        self, db: DatabaseSessionManager, log: logging.Logger | None = None,
    ):
        self.db = db
        self.log = log or logger

    async def add_comment(
        self, task_id: TaskId, data: CommentCreate | Mapping[str, Any],
    ) -> CommentResponse:
        body = validate_input(CommentCreate, data)
        async with self.db.transaction() as session:
            if await session.get(Task, task_id) is None:
                raise NotFoundError("Task", task_id)
            await require_user(session, body.author_id, "author_id")

            comment = Comment(
                task_id=task_id, author_id=body.author_id,
                body=body.body, created_at=utcnow(),
            )
            session.add(comment)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ReferentialIntegrityError(
                    "User", body.author_id, "author_id",
                ) from e

        self.log.info(
            "Comment added",
            extra={"action": "add_comment", "task_id": task_id, "comment_id": comment.id},
        )
        return CommentResponse.model_validate(comment)

    async def list_comments(self, task_id: TaskId) -> list[CommentResponse]:
        async with self.db.session() as session:
            if await session.get(Task, task_id) is None:
                raise NotFoundError("Task", task_id)
            result = await session.execute(
                select(Comment)
                .where(Comment.task_id == task_id)
                .order_by(Comment.created_at.asc(), Comment.id.asc()),
            )
            comments = result.scalars().all()
        return [CommentResponse.model_validate(c) for c in comments]
