"""Sort Compiler — allow-listed ORDER BY with a deterministic tie-break.

Invariants:
    - Never raises: unknown key -> created_at, unknown direction -> desc
    - tasks.id ASC is always the last ORDER BY term, so pages never overlap or skip
    - priority and status sort by rank, not alphabetically
    - due_date NULLs sort last in both directions

Design Decisions:
    - Rank expressions built with case(): the rank literals are bound like any
      other value, nothing is formatted into the statement text
"""

from dataclasses import dataclass

from sqlalchemy import case
from sqlalchemy.sql.elements import ColumnElement

from tracker.core.domain_types import (
    PRIORITY_RANK, STATUS_RANK, SortField, SortOrder,
)
from tracker.models.task import Task

DEFAULT_SORT = SortField.CREATED_AT
DEFAULT_ORDER = SortOrder.DESC


@dataclass(frozen=True)
class SortPlan:
    """Effective sort key and direction after fallbacks."""
    field: SortField
    order: SortOrder

    def order_by(self) -> list[ColumnElement]:
        column = _sort_expression(self.field)
        term = column.asc() if self.order is SortOrder.ASC else column.desc()
        if self.field is SortField.DUE_DATE:
            term = term.nulls_last()
        return [term, Task.id.asc()]


def compile_sort(sort_by: object = None, sort_order: object = None) -> SortPlan:
    return SortPlan(_parse_field(sort_by), _parse_order(sort_order))


def _parse_field(raw: object) -> SortField:
    if isinstance(raw, SortField):
        return raw
    if isinstance(raw, str):
        try:
            return SortField(raw.strip().lower())
        except ValueError:
            pass
    return DEFAULT_SORT


def _parse_order(raw: object) -> SortOrder:
    if isinstance(raw, SortOrder):
        return raw
    if isinstance(raw, str):
        try:
            return SortOrder(raw.strip().lower())
        except ValueError:
            pass
    return DEFAULT_ORDER


def _sort_expression(field: SortField) -> ColumnElement:
    if field is SortField.PRIORITY:
        return case(PRIORITY_RANK, value=Task.priority, else_=len(PRIORITY_RANK))
    if field is SortField.STATUS:
        return case(STATUS_RANK, value=Task.status, else_=len(STATUS_RANK))
    return getattr(Task, field.value)
