"""Task Routes — list/search/facets, CRUD, status transitions and comments.

Invariants:
    - List query parameters are passed raw to the engine: unknown or malformed filter,
      sort and paging values degrade to defaults instead of failing the request
    - PATCH with a changed status and POST /transition both go through the state machine
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from tracker.api.dependencies import (
    RowId, get_comment_service, get_integrity_enforcer, get_task_query_service,
    get_task_service,
)
from tracker.schemas.comment import CommentCreate, CommentResponse
from tracker.schemas.task import (
    StatusTransition, TaskCreate, TaskListResponse, TaskResponse, TaskUpdate,
)
from tracker.services.comments import CommentService
from tracker.services.integrity import IntegrityEnforcer
from tracker.services.task_queries import TaskQueryService
from tracker.services.tasks import TaskService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])

_MULTI_VALUED = ("status", "priority")


def _list_params(request: Request) -> dict[str, object]:
    """Flatten query params; repeated status/priority keys merge into one list."""
    query = request.query_params
    params: dict[str, object] = dict(query.items())
    for key in _MULTI_VALUED:
        values = query.getlist(key)
        if len(values) > 1:
            params[key] = values
    return params


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    request: Request,
    queries: TaskQueryService = Depends(get_task_query_service),
):
    """Filter: status, priority, assigned_to, search, due_from/due_to,
    created_from/created_to. Sort: sort_by, sort_order. Paging: limit + offset|page.
    """
    return await queries.list_tasks(_list_params(request))


@router.post(
    "", response_model=TaskResponse, status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreate, tasks: TaskService = Depends(get_task_service),
):
    return await tasks.create_task(body)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: RowId, queries: TaskQueryService = Depends(get_task_query_service),
):
    return await queries.get_task(task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: RowId,
    body: TaskUpdate,
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.update_task(task_id, body)


@router.post("/{task_id}/transition", response_model=TaskResponse)
async def transition_task(
    task_id: RowId,
    body: StatusTransition,
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    return await enforcer.transition_status(task_id, body.status)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: RowId,
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    await enforcer.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{task_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    task_id: RowId, comments: CommentService = Depends(get_comment_service),
):
    return await comments.list_comments(task_id)


@router.post(
    "/{task_id}/comments", response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    task_id: RowId,
    body: CommentCreate,
    comments: CommentService = Depends(get_comment_service),
):
    return await comments.add_comment(task_id, body)
