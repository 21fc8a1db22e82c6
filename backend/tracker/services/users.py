"""User Service — create, read, list and partially update users.

Invariants:
    - username (exact) and email (case-insensitive) are unique across users
    - Uniqueness is pre-checked against all OTHER rows before writing; updating a user
      to its own unchanged values succeeds
    - A storage unique violation that slips past the pre-check (concurrent writers)
      surfaces as the same DuplicateUserError, never as a driver error
    - Partial updates need at least one field; updated_at moves on every update

Design Decisions:
    - Pre-check is the friendly fast path; the unique constraints are the final authority
    - Deletion lives in IntegrityEnforcer: it carries the task nullification policy
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.domain_types import UserId
from tracker.core.errors import (
    ConflictError, DuplicateUserError, NotFoundError, ValidationError,
)
from tracker.core.pagination import DEFAULT_PAGE_SIZE, compile_window, has_more
from tracker.db.base import utcnow
from tracker.infrastructure.database import DatabaseSessionManager
from tracker.models.user import User
from tracker.schemas import validate_input
from tracker.schemas.user import (
    UserCreate, UserListResponse, UserResponse, UserUpdate,
)

logger = logging.getLogger(__name__)


def duplicate_from_integrity_error(
    exc: IntegrityError, username: str | None, email: str | None,
) -> ConflictError:
    """Translate a unique-constraint violation into the pre-check's error."""
    detail = str(exc.orig).lower()
    if email is not None and "email" in detail:
        return DuplicateUserError("email", email)
    if username is not None and "username" in detail:
        return DuplicateUserError("username", username)
    return ConflictError("Username or email already in use", "DUPLICATE_USER")


class UserService:
    """User CRUD with engine-level uniqueness enforcement."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        default_limit: int = DEFAULT_PAGE_SIZE,
        log: logging.Logger | None = None,
    ):
        self.db = db
        self.default_limit = default_limit
        self.log = log or logger

    async def create_user(
        self, data: UserCreate | Mapping[str, Any],
    ) -> UserResponse:
        body = validate_input(UserCreate, data)
        async with self.db.transaction() as session:
            await self._check_unique(session, body.username, body.email)
            now = utcnow()
            user = User(
                username=body.username, email=body.email,
                full_name=body.full_name, created_at=now, updated_at=now,
            )
            session.add(user)
            try:
                await session.flush()
            except IntegrityError as e:
                raise duplicate_from_integrity_error(
                    e, body.username, body.email,
                ) from e

        self.log.info(
            "User created", extra={"action": "create_user", "user_id": user.id},
        )
        return UserResponse.model_validate(user)

    async def get_user(self, user_id: UserId) -> UserResponse:
        async with self.db.session() as session:
            user = await session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return UserResponse.model_validate(user)

    async def list_users(
        self, limit: object = None, offset: object = None, page: object = None,
    ) -> UserListResponse:
        window = compile_window(limit, offset, page, default_limit=self.default_limit)
        users, total = await asyncio.gather(
            self._fetch_page(window.limit, window.offset), self._count(),
        )
        items = [UserResponse.model_validate(u) for u in users]
        return UserListResponse(
            items=items,
            total=total,
            count=len(items),
            limit=window.limit,
            offset=window.offset,
            has_more=has_more(total, window, len(items)),
        )

    async def update_user(
        self, user_id: UserId, data: UserUpdate | Mapping[str, Any],
    ) -> UserResponse:
        changes = validate_input(UserUpdate, data).changes()
        if not changes:
            raise ValidationError("At least one field must be provided for update")

        async with self.db.transaction() as session:
            result = await session.execute(
                select(User).where(User.id == user_id).with_for_update(),
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise NotFoundError("User", user_id)

            await self._check_unique(
                session, changes.get("username"), changes.get("email"),
                exclude_id=user_id,
            )
            for name, value in changes.items():
                setattr(user, name, value)
            user.updated_at = utcnow()
            try:
                await session.flush()
            except IntegrityError as e:
                raise duplicate_from_integrity_error(
                    e, changes.get("username"), changes.get("email"),
                ) from e

        self.log.info(
            "User updated",
            extra={"action": "update_user", "user_id": user_id, "fields": sorted(changes)},
        )
        return UserResponse.model_validate(user)

    async def _check_unique(
        self,
        session: AsyncSession,
        username: str | None,
        email: str | None,
        exclude_id: int | None = None,
    ) -> None:
        if username is not None:
            stmt = select(User.id).where(User.username == username)
            if exclude_id is not None:
                stmt = stmt.where(User.id != exclude_id)
            if (await session.execute(stmt.limit(1))).first() is not None:
                raise DuplicateUserError("username", username)
        if email is not None:
            stmt = select(User.id).where(func.lower(User.email) == email.lower())
            if exclude_id is not None:
                stmt = stmt.where(User.id != exclude_id)
            if (await session.execute(stmt.limit(1))).first() is not None:
                raise DuplicateUserError("email", email)

    async def _fetch_page(self, limit: int, offset: int) -> list[User]:
        stmt = (
            select(User)
            .order_by(User.created_at.desc(), User.id.asc())
            .limit(limit)
            .offset(offset)
        )
        async with self.db.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _count(self) -> int:
        async with self.db.session() as session:
            result = await session.execute(select(func.count(User.id)))
            return int(result.scalar_one())
