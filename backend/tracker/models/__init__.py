"""ORM Models — SQLAlchemy declarative models for users, tasks, comments.

Invariants:
    - All models inherit from Base (db/base.py)
    - tasks.assigned_to is nullable; comments reference both tasks and users

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from tracker.models.user import User  # noqa: F401
from tracker.models.task import Task  # noqa: F401
from tracker.models.comment import Comment  # noqa: F401
