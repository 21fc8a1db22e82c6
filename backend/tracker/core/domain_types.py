"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, TaskId wrap ints — storage generates them
    - TaskStatus declaration order IS the state-machine order
    - All valid enumerated values encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and bind to SQL without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
TaskId = NewType("TaskId", int)


# ─── Enums ───────────────────────────────────────────────────────

class TaskStatus(str, Enum):
    """Task lifecycle — todo -> in_progress -> done, forward only."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    @property
    def is_terminal(self) -> bool:
        return self is TaskStatus.DONE


_STATUS_ORDER = list(TaskStatus)


class TaskPriority(str, Enum):
    """Task priority — unordered for transitions, ranked only for sorting."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


PRIORITY_RANK: dict[str, int] = {
    TaskPriority.LOW.value: 0,
    TaskPriority.MEDIUM.value: 1,
    TaskPriority.HIGH.value: 2,
}
STATUS_RANK: dict[str, int] = {s.value: s.rank for s in TaskStatus}


class SortField(str, Enum):
    """Allow-listed task sort keys."""
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    DUE_DATE = "due_date"
    TITLE = "title"
    PRIORITY = "priority"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterDimension(str, Enum):
    """Filter dimensions — facets exclude their own dimension's clauses."""
    STATUS = "status"
    PRIORITY = "priority"
    ASSIGNEE = "assigned_to"
    SEARCH = "search"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"


# Sentinel accepted by the assignee filter for "assigned_to IS NULL"
UNASSIGNED = "unassigned"

FACET_DIMENSIONS: tuple[FilterDimension, ...] = (
    FilterDimension.STATUS, FilterDimension.PRIORITY,
)

# Largest value an INTEGER id column holds; larger ids can never match a row
MAX_ROW_ID = 2**31 - 1
