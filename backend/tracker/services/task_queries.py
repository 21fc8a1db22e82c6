"""Task Queries — list, count, facet and get-by-id reads for tasks.

Invariants:
    - List and count share one FilterPlan; facets use the same plan minus their dimension
    - List, count and both facet queries are issued concurrently, each on its own session
    - Assignee is LEFT OUTER JOINed: a NULL assigned_to yields assignee=None, never a miss
    - has_more = offset + returned < total (independent of whether the page is full)
    - Offsets past the end return an empty page with the real total

Design Decisions:
    - One session per concurrent read: AsyncSession is not safe for concurrent use
"""

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, select

from tracker.core.domain_types import FACET_DIMENSIONS, FilterDimension, TaskId
from tracker.core.errors import NotFoundError
from tracker.core.pagination import DEFAULT_PAGE_SIZE, Window, compile_window, has_more
from tracker.infrastructure.database import DatabaseSessionManager
from tracker.models.task import Task
from tracker.models.user import User
from tracker.query.builder import FilterPlan
from tracker.query.facets import facet_statement, fill_facet
from tracker.query.filters import compile_task_filters
from tracker.query.sorting import SortPlan, compile_sort
from tracker.schemas.task import TaskListResponse, TaskResponse
from tracker.schemas.user import UserSummary

logger = logging.getLogger(__name__)


def assemble_task(task: Task, assignee: User | None) -> TaskResponse:
    """Map a task row and its (possibly missing) assignee row to the response shape."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        assigned_to=task.assigned_to,
        assignee=UserSummary.model_validate(assignee) if assignee else None,
        created_at=task.created_at,
        updated_at=task.updated_at,
        closed_at=task.closed_at,
    )


def _with_assignee():
    return select(Task, User).outerjoin(User, Task.assigned_to == User.id)


class TaskQueryService:
    """Result assembler and facet aggregator for the task list."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        default_limit: int = DEFAULT_PAGE_SIZE,
        log: logging.Logger | None = None,
    ):
        self.db = db
        self.default_limit = default_limit
        self.log = log or logger

    async def list_tasks(
        self, params: Mapping[str, Any] | None = None,
    ) -> TaskListResponse:
        """Filtered, sorted, paginated task page with totals and facets."""
        params = params or {}
        plan = compile_task_filters(params)
        sort = compile_sort(params.get("sort_by"), params.get("sort_order"))
        window = compile_window(
            params.get("limit"), params.get("offset"), params.get("page"),
            default_limit=self.default_limit,
        )

        started = time.perf_counter()
        rows, total, *facet_rows = await asyncio.gather(
            self._fetch_page(plan, sort, window),
            self._count(plan),
            *(self._facet(plan, dimension) for dimension in FACET_DIMENSIONS),
        )
        items = [assemble_task(task, user) for task, user in rows]
        facets = {
            dimension.value: counts
            for dimension, counts in zip(FACET_DIMENSIONS, facet_rows)
        }

        self.log.info(
            "Tasks retrieved",
            extra={
                "action": "list_tasks", "total": total, "count": len(items),
                "limit": window.limit, "offset": window.offset,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return TaskListResponse(
            items=items,
            total=total,
            count=len(items),
            limit=window.limit,
            offset=window.offset,
            has_more=has_more(total, window, len(items)),
            facets=facets,
        )

    async def count_tasks(self, params: Mapping[str, Any] | None = None) -> int:
        return await self._count(compile_task_filters(params))

    async def get_task(self, task_id: TaskId) -> TaskResponse:
        async with self.db.session() as session:
            result = await session.execute(
                _with_assignee().where(Task.id == task_id),
            )
            row = result.first()
        if row is None:
            raise NotFoundError("Task", task_id)
        task, user = row
        return assemble_task(task, user)

    async def _fetch_page(
        self, plan: FilterPlan, sort: SortPlan, window: Window,
    ) -> list:
        stmt = (
            plan.apply(_with_assignee())
            .order_by(*sort.order_by())
            .limit(window.limit)
            .offset(window.offset)
        )
        async with self.db.session() as session:
            result = await session.execute(stmt)
            return list(result.all())

    async def _count(self, plan: FilterPlan) -> int:
        stmt = plan.apply(select(func.count(Task.id)).select_from(Task))
        async with self.db.session() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def _facet(
        self, plan: FilterPlan, dimension: FilterDimension,
    ) -> dict[str, int]:
        async with self.db.session() as session:
            result = await session.execute(facet_statement(plan, dimension))
            return fill_facet(dimension, result.all())
