"""Status Transition Enforcement — the forward-only task state machine.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Legal moves: todo -> in_progress, in_progress -> done. Nothing else.
    - Same-state, skip and backward moves raise IllegalTransitionError
    - done is terminal: nothing leaves it, so closed_at is never cleared

Design Decisions:
    - Strict state machine over free-form assignment: prevents ticket state corruption
    - Raise instead of returning error dicts: callers sit inside a transaction that
      must roll back on violation
"""

from tracker.core.domain_types import TaskStatus
from tracker.core.errors import IllegalTransitionError, ValidationError


def parse_status(value: object) -> TaskStatus:
    """Strict parse for writes (filters use their own lenient parse)."""
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(
            f"Status must be one of: {allowed}", field="status",
        )


def next_status(current: TaskStatus) -> TaskStatus | None:
    """The only status reachable from current, or None if terminal."""
    if current.is_terminal:
        return None
    return list(TaskStatus)[current.rank + 1]


def check_transition(current: TaskStatus, target: TaskStatus) -> None:
    """Raise IllegalTransitionError unless target is exactly one step forward."""
    if next_status(current) is not target:
        raise IllegalTransitionError(current.value, target.value)


def allowed_transitions(current: TaskStatus) -> list[TaskStatus]:
    nxt = next_status(current)
    return [nxt] if nxt else []
