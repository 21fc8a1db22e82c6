"""Root conftest — shared database and service fixtures.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Services are built against that database by constructor injection

Design Decisions:
    - File-backed SQLite over :memory:: list, count and facet reads run concurrently,
      each on its own connection, and every connection must see the same data
"""

import os

import pytest

# Ensure tests never reach a real database through the cached settings
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from tracker.infrastructure.database import DatabaseSessionManager  # noqa: E402
from tracker.services.comments import CommentService  # noqa: E402
from tracker.services.integrity import IntegrityEnforcer  # noqa: E402
from tracker.services.task_queries import TaskQueryService  # noqa: E402
from tracker.services.tasks import TaskService  # noqa: E402
from tracker.services.users import UserService  # noqa: E402
import tracker.models  # noqa: E402,F401


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}"


@pytest.fixture
async def db_manager(database_url):
    manager = DatabaseSessionManager(database_url)
    await manager.create_all()
    yield manager
    await manager.drop_all()
    await manager.dispose()


@pytest.fixture
def user_service(db_manager) -> UserService:
    return UserService(db_manager)


@pytest.fixture
def task_service(db_manager) -> TaskService:
    return TaskService(db_manager)


@pytest.fixture
def task_queries(db_manager) -> TaskQueryService:
    return TaskQueryService(db_manager)


@pytest.fixture
def enforcer(db_manager) -> IntegrityEnforcer:
    return IntegrityEnforcer(db_manager)


@pytest.fixture
def comment_service(db_manager) -> CommentService:
    return CommentService(db_manager)


@pytest.fixture
async def alice(user_service):
    return await user_service.create_user({
        "username": "alice", "email": "alice@example.com", "full_name": "Alice Brown",
    })


@pytest.fixture
async def bob(user_service):
    return await user_service.create_user({
        "username": "bob", "email": "bob@example.com", "full_name": "Bob Wilson",
    })
