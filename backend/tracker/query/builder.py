"""Parameter Builder — clause fragments with a positionally-matched list of bound values.

Invariants:
    - ParamBinder is the ONLY way a filter value enters a statement
    - Parameter keys are generated (prefix_N), never derived from user input
    - FilterPlan.values[i] is the value of the i-th parameter created, in clause order
    - A plan's clauses are ANDed; there is no OR across dimensions

Design Decisions:
    - Clauses are tagged with their FilterDimension so a facet query can drop
      exactly one dimension and keep the rest of the scope intact
    - Frozen dataclasses: a compiled plan can be shared by the list, count and
      facet statements running concurrently
"""

from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import bindparam
from sqlalchemy.sql.elements import BindParameter, ColumnElement
from sqlalchemy.sql import Select

from tracker.core.domain_types import FilterDimension

S = TypeVar("S", bound=Select)


class ParamBinder:
    """Allocates named bind parameters and remembers them in creation order."""

    def __init__(self, prefix: str = "f"):
        self._prefix = prefix
        self._params: list[BindParameter] = []
        self._drained = 0

    def bind(
        self, value: Any, type_: Any = None, expanding: bool = False,
    ) -> BindParameter:
        param = bindparam(
            f"{self._prefix}_{len(self._params)}", value,
            type_=type_, expanding=expanding,
        )
        self._params.append(param)
        return param

    def drain(self) -> tuple[BindParameter, ...]:
        """Parameters created since the previous drain."""
        fresh = tuple(self._params[self._drained:])
        self._drained = len(self._params)
        return fresh


@dataclass(frozen=True)
class FilterClause:
    """One conjunctive predicate and the parameters it references."""
    dimension: FilterDimension
    expression: ColumnElement[bool]
    params: tuple[BindParameter, ...]


@dataclass(frozen=True)
class FilterPlan:
    """Compiled WHERE scope for the task list, count and facet queries."""
    clauses: tuple[FilterClause, ...] = ()

    @property
    def expressions(self) -> list[ColumnElement[bool]]:
        return [c.expression for c in self.clauses]

    @property
    def values(self) -> list[Any]:
        return [p.value for c in self.clauses for p in c.params]

    @property
    def dimensions(self) -> list[FilterDimension]:
        return [c.dimension for c in self.clauses]

    def has(self, dimension: FilterDimension) -> bool:
        return dimension in self.dimensions

    def without(self, dimension: FilterDimension) -> "FilterPlan":
        return FilterPlan(
            tuple(c for c in self.clauses if c.dimension != dimension),
        )

    def apply(self, stmt: S) -> S:
        exprs = self.expressions
        return stmt.where(*exprs) if exprs else stmt
