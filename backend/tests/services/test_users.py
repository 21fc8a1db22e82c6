"""User Service — uniqueness, partial updates and paging.

Invariants under test:
    - Duplicate username/email -> DuplicateUserError (409), email compared case-insensitively
    - A unique violation that bypasses the pre-check surfaces as the same error
    - Updating a user to its own current values is not a conflict
"""

import pytest

from tracker.core.errors import DuplicateUserError, NotFoundError, ValidationError
from tracker.services.users import UserService


async def test_create_and_get(user_service):
    created = await user_service.create_user({
        "username": "carol", "email": "Carol@Example.com", "full_name": "Carol King",
    })
    assert created.id > 0
    assert created.email == "carol@example.com"
    fetched = await user_service.get_user(created.id)
    assert fetched.username == "carol"


async def test_duplicate_username(user_service, alice):
    with pytest.raises(DuplicateUserError) as exc_info:
        await user_service.create_user({
            "username": "alice", "email": "other@example.com", "full_name": "Other",
        })
    assert exc_info.value.http_status == 409
    assert exc_info.value.context.field == "username"


async def test_duplicate_email_is_case_insensitive(user_service, alice):
    with pytest.raises(DuplicateUserError) as exc_info:
        await user_service.create_user({
            "username": "alice2", "email": "ALICE@example.com", "full_name": "Alice Two",
        })
    assert exc_info.value.context.field == "email"


async def test_race_past_precheck_maps_to_same_conflict(user_service, alice, monkeypatch):
    async def skip_check(self, session, username, email, exclude_id=None):
        return None

    monkeypatch.setattr(UserService, "_check_unique", skip_check)

    with pytest.raises(DuplicateUserError) as by_email:
        await user_service.create_user({
            "username": "alice2", "email": "alice@example.com", "full_name": "A",
        })
    assert by_email.value.context.field == "email"

    with pytest.raises(DuplicateUserError) as by_name:
        await user_service.create_user({
            "username": "alice", "email": "fresh@example.com", "full_name": "A",
        })
    assert by_name.value.context.field == "username"


async def test_update_to_own_values_is_allowed(user_service, alice):
    updated = await user_service.update_user(alice.id, {
        "username": "alice", "email": "alice@example.com", "full_name": "Alice B.",
    })
    assert updated.full_name == "Alice B."


async def test_update_to_taken_email_conflicts(user_service, alice, bob):
    with pytest.raises(DuplicateUserError):
        await user_service.update_user(bob.id, {"email": "Alice@Example.com"})
    assert (await user_service.get_user(bob.id)).email == "bob@example.com"


async def test_update_requires_a_field(user_service, alice):
    with pytest.raises(ValidationError, match="At least one field"):
        await user_service.update_user(alice.id, {})


async def test_update_missing_user(user_service):
    with pytest.raises(NotFoundError):
        await user_service.update_user(77, {"full_name": "Nobody"})


async def test_get_missing_user(user_service):
    with pytest.raises(NotFoundError) as exc_info:
        await user_service.get_user(77)
    assert exc_info.value.http_status == 404


async def test_invalid_input_is_validation_error(user_service):
    with pytest.raises(ValidationError):
        await user_service.create_user({"username": "x", "email": "bad", "full_name": "X"})


async def test_list_users_paging(user_service, alice, bob):
    page = await user_service.list_users(limit="1")
    assert page.total == 2
    assert page.count == 1
    assert page.has_more is True
    rest = await user_service.list_users(limit=1, offset=1)
    assert rest.has_more is False
    assert {page.items[0].id, rest.items[0].id} == {alice.id, bob.id}
