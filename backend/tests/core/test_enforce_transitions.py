"""Status state machine tests — pure tests for the forward-only transition rules.

Tests:
    - The two legal single forward steps pass
    - Skip, backward and same-state moves raise IllegalTransitionError (a ConflictError)
    - done is terminal
    - Strict status parsing for writes
"""

import pytest

from tracker.core.domain_types import TaskStatus
from tracker.core.enforce_transitions import (
    allowed_transitions, check_transition, next_status, parse_status,
)
from tracker.core.errors import ConflictError, IllegalTransitionError, ValidationError


def test_todo_to_in_progress_is_legal():
    check_transition(TaskStatus.TODO, TaskStatus.IN_PROGRESS)


def test_in_progress_to_done_is_legal():
    check_transition(TaskStatus.IN_PROGRESS, TaskStatus.DONE)


@pytest.mark.parametrize("current, target", [
    (TaskStatus.TODO, TaskStatus.DONE),
    (TaskStatus.DONE, TaskStatus.IN_PROGRESS),
    (TaskStatus.DONE, TaskStatus.TODO),
    (TaskStatus.IN_PROGRESS, TaskStatus.TODO),
    (TaskStatus.TODO, TaskStatus.TODO),
    (TaskStatus.DONE, TaskStatus.DONE),
])
def test_illegal_moves_raise(current, target):
    with pytest.raises(IllegalTransitionError) as exc_info:
        check_transition(current, target)
    assert exc_info.value.code == "ILLEGAL_TRANSITION"
    assert exc_info.value.http_status == 409


def test_illegal_transition_is_a_conflict():
    with pytest.raises(ConflictError):
        check_transition(TaskStatus.TODO, TaskStatus.DONE)


def test_done_is_terminal():
    assert next_status(TaskStatus.DONE) is None
    assert allowed_transitions(TaskStatus.DONE) == []
    assert TaskStatus.DONE.is_terminal


def test_each_state_has_exactly_one_successor_until_done():
    assert allowed_transitions(TaskStatus.TODO) == [TaskStatus.IN_PROGRESS]
    assert allowed_transitions(TaskStatus.IN_PROGRESS) == [TaskStatus.DONE]


def test_parse_status_accepts_values_and_members():
    assert parse_status("in_progress") is TaskStatus.IN_PROGRESS
    assert parse_status(TaskStatus.DONE) is TaskStatus.DONE


def test_parse_status_is_strict():
    with pytest.raises(ValidationError) as exc_info:
        parse_status("in-progress")
    assert exc_info.value.field == "status"
