"""User Routes — CRUD over users; deletion goes through the integrity enforcer.

Invariants:
    - Body validation by Pydantic before the handler runs (400 on failure)
    - DELETE unassigns the user's tasks in the same transaction as the delete
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from tracker.api.dependencies import (
    RowId, get_integrity_enforcer, get_user_service,
)
from tracker.schemas.user import (
    UserCreate, UserListResponse, UserResponse, UserUpdate,
)
from tracker.services.integrity import IntegrityEnforcer
from tracker.services.users import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    page: str | None = Query(None),
    users: UserService = Depends(get_user_service),
):
    """List users, newest first. Bad paging values fall back to defaults."""
    return await users.list_users(limit=limit, offset=offset, page=page)


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, users: UserService = Depends(get_user_service),
):
    return await users.create_user(body)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: RowId, users: UserService = Depends(get_user_service),
):
    return await users.get_user(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: RowId,
    body: UserUpdate,
    users: UserService = Depends(get_user_service),
):
    return await users.update_user(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: RowId,
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    await enforcer.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
