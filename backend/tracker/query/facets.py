"""Facet Statements — grouped counts over the filter scope minus the faceted dimension.

Invariants:
    - A facet on D sees every clause of the plan except those tagged D
    - Every enum member of D appears in the result; no matches -> 0
    - Values outside the enum (legacy rows) are dropped, never invented

Design Decisions:
    - Zero-fill policy over omission: clients render every tab without special-casing
"""

from collections.abc import Iterable

from sqlalchemy import Select, func, select

from tracker.core.domain_types import FilterDimension, TaskPriority, TaskStatus
from tracker.models.task import Task
from tracker.query.builder import FilterPlan

_FACET_COLUMNS = {
    FilterDimension.STATUS: (Task.status, TaskStatus),
    FilterDimension.PRIORITY: (Task.priority, TaskPriority),
}


def facet_statement(plan: FilterPlan, dimension: FilterDimension) -> Select:
    column, _ = _FACET_COLUMNS[dimension]
    scope = plan.without(dimension)
    return scope.apply(
        select(column, func.count(Task.id)).select_from(Task),
    ).group_by(column)


def fill_facet(
    dimension: FilterDimension, rows: Iterable[tuple[str, int]],
) -> dict[str, int]:
    _, enum_cls = _FACET_COLUMNS[dimension]
    counts: dict[str, int] = {m.value: 0 for m in enum_cls}
    for value, count in rows:
        if value in counts:
            counts[value] = int(count)
    return counts

