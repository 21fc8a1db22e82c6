"""Filter Compiler — sparse, untrusted task filter parameters to a FilterPlan.

Invariants:
    - Never raises: unknown keys, unknown enum members, malformed ids and dates are ignored
    - An assignee id beyond the id column range compiles to a clause matching nothing
    - Each recognised criterion contributes exactly one clause; clauses are ANDed
    - Empty (or whitespace-only) search is identical to no search
    - Search is case-insensitive substring containment over title OR description;
      LIKE wildcards typed by the user match literally
    - All values are bound via ParamBinder (see query/builder.py)

Design Decisions:
    - Lenient here, strict on writes: a typo in a list filter still returns results,
      a typo in an entity field is a ValidationError
    - "in-progress" accepted as a spelling of in_progress: older clients send it
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy import Date, DateTime, Integer, String, false, or_

from tracker.core.domain_types import (
    MAX_ROW_ID, FilterDimension, TaskPriority, TaskStatus, UNASSIGNED,
)
from tracker.models.task import Task
from tracker.query.builder import FilterClause, FilterPlan, ParamBinder

E = TypeVar("E", bound=Enum)

LIKE_ESCAPE = "\\"


def compile_task_filters(params: Mapping[str, Any] | None) -> FilterPlan:
    """Compile the recognised filter keys of params into a FilterPlan."""
    params = params or {}
    binder = ParamBinder("f")
    clauses: list[FilterClause] = []

    def add(dimension: FilterDimension, expression) -> None:
        clauses.append(FilterClause(dimension, expression, binder.drain()))

    statuses = parse_enum_list(params.get("status"), TaskStatus)
    if statuses:
        add(FilterDimension.STATUS, Task.status.in_(
            binder.bind([s.value for s in statuses], String(20), expanding=True),
        ))

    priorities = parse_enum_list(params.get("priority"), TaskPriority)
    if priorities:
        add(FilterDimension.PRIORITY, Task.priority.in_(
            binder.bind([p.value for p in priorities], String(20), expanding=True),
        ))

    assignee = parse_assignee(params.get("assigned_to"))
    if assignee == UNASSIGNED:
        add(FilterDimension.ASSIGNEE, Task.assigned_to.is_(None))
    elif assignee is not None and assignee > MAX_ROW_ID:
        add(FilterDimension.ASSIGNEE, false())
    elif assignee is not None:
        add(FilterDimension.ASSIGNEE, Task.assigned_to == binder.bind(assignee, Integer()))

    search = parse_search(params.get("search"))
    if search:
        pattern = binder.bind(f"%{escape_like(search)}%", String())
        add(FilterDimension.SEARCH, or_(
            Task.title.ilike(pattern, escape=LIKE_ESCAPE),
            Task.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    due_from = parse_date(params.get("due_from"))
    if due_from:
        add(FilterDimension.DUE_DATE, Task.due_date >= binder.bind(due_from, Date()))
    due_to = parse_date(params.get("due_to"))
    if due_to:
        add(FilterDimension.DUE_DATE, Task.due_date <= binder.bind(due_to, Date()))

    created_from = parse_bound(params.get("created_from"), upper=False)
    if created_from:
        add(FilterDimension.CREATED_AT, Task.created_at >= binder.bind(
            created_from, DateTime(timezone=True),
        ))
    created_to = parse_bound(params.get("created_to"), upper=True)
    if created_to:
        add(FilterDimension.CREATED_AT, Task.created_at < binder.bind(
            created_to, DateTime(timezone=True),
        ))

    return FilterPlan(tuple(clauses))


# --- Lenient parsers -----------------------------------------------------------

def _tokens(raw: Any) -> Iterable[str]:
    if isinstance(raw, str):
        yield from raw.split(",")
    elif isinstance(raw, Enum):
        yield str(raw.value)
    elif isinstance(raw, (list, tuple, set, frozenset)):
        for item in raw:
            yield from _tokens(item)


def parse_enum_list(raw: Any, enum_cls: type[E]) -> list[E]:
    """Known members of a single value, comma-separated string, or list; order kept, deduped."""
    members: list[E] = []
    for token in _tokens(raw):
        normalized = token.strip().lower().replace("-", "_")
        try:
            member = enum_cls(normalized)
        except ValueError:
            continue
        if member not in members:
            members.append(member)
    return members


def parse_assignee(raw: Any) -> int | str | None:
    """Positive user id, the UNASSIGNED sentinel, or None when absent/malformed."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value == UNASSIGNED:
            return UNASSIGNED
        if value.isascii() and value.isdigit() and int(value) > 0:
            return int(value)
    return None


def parse_search(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    return raw.strip() or None


def escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def parse_date(raw: Any) -> date | None:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            return None
    return None


def parse_bound(raw: Any, upper: bool) -> datetime | None:
    """Timestamp bound; a bare date covers the whole day (upper bound is exclusive)."""
    if isinstance(raw, str):
        text = raw.strip()
        if len(text) == 10:
            raw = parse_date(text)
        else:
            try:
                raw = datetime.fromisoformat(text)
            except ValueError:
                return None
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, date):
        day = raw + timedelta(days=1) if upper else raw
        return datetime.combine(day, time.min, tzinfo=timezone.utc)
    return None
