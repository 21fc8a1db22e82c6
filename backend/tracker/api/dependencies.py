"""Service Dependencies — build engine services from the app-scoped session manager.

Design Decisions:
    - Services are cheap to construct: one per request, no module-level instances
    - Path ids are range-checked here: an id past the id column range is a 400,
      never a driver overflow
"""

from typing import Annotated

from fastapi import Depends, Path, Request

from tracker.core.domain_types import MAX_ROW_ID
from tracker.infrastructure.database import DatabaseSessionManager, get_db_manager
from tracker.services.comments import CommentService
from tracker.services.integrity import IntegrityEnforcer
from tracker.services.task_queries import TaskQueryService
from tracker.services.tasks import TaskService
from tracker.services.users import UserService

RowId = Annotated[int, Path(gt=0, le=MAX_ROW_ID)]


def _default_limit(request: Request) -> int:
    return request.app.state.settings.default_page_size


def get_user_service(
    request: Request, db: DatabaseSessionManager = Depends(get_db_manager),
) -> UserService:
    return UserService(db, default_limit=_default_limit(request))


def get_task_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> TaskService:
    return TaskService(db)


def get_task_query_service(
    request: Request, db: DatabaseSessionManager = Depends(get_db_manager),
) -> TaskQueryService:
    return TaskQueryService(db, default_limit=_default_limit(request))


def get_integrity_enforcer(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> IntegrityEnforcer:
    return IntegrityEnforcer(db)


def get_comment_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> CommentService:
    return CommentService(db)
