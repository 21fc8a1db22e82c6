"""Error hierarchy tests — codes, categories, HTTP status and response envelope."""

from tracker.core.errors import (
    ConflictError, DatabaseError, DuplicateUserError, ErrorCategory,
    IllegalTransitionError, InternalError, NotFoundError,
    ReferentialIntegrityError, TrackerError, ValidationError,
)


def test_validation_error_carries_field():
    err = ValidationError("title must be 200 characters or less", field="title")
    assert err.http_status == 400
    assert err.category is ErrorCategory.VALIDATION
    assert err.to_response()["error"]["context"]["field"] == "title"


def test_not_found_names_resource():
    err = NotFoundError("Task", 42)
    assert err.http_status == 404
    assert err.message == "Task '42' not found"
    assert err.to_response()["error"]["context"]["resource_id"] == "42"


def test_conflicts_share_category_but_keep_codes():
    dup = DuplicateUserError("email", "a@example.com")
    illegal = IllegalTransitionError("todo", "done")
    assert isinstance(dup, ConflictError)
    assert isinstance(illegal, ConflictError)
    assert dup.category is illegal.category is ErrorCategory.CONFLICT
    assert dup.code == "DUPLICATE_USER"
    assert illegal.code == "ILLEGAL_TRANSITION"
    assert dup.http_status == illegal.http_status == 409


def test_referential_integrity_error():
    err = ReferentialIntegrityError("User", 9, "assigned_to")
    assert err.code == "REFERENCE_NOT_FOUND"
    assert err.category is ErrorCategory.INTEGRITY
    assert err.field == "assigned_to"


def test_database_error_is_internal_and_hides_driver_detail():
    err = DatabaseError("Integrity constraint violated", "commit")
    assert isinstance(err, InternalError)
    assert err.category is ErrorCategory.DATABASE
    assert err.http_status == 503
    assert "Integrity constraint violated" in err.message


def test_response_envelope_shape():
    body = NotFoundError("User", 1).to_response()
    assert set(body["error"]) == {
        "code", "message", "category", "severity", "timestamp", "context",
    }


def test_all_errors_share_base():
    for err in (
        ValidationError("x"), NotFoundError("Task", 1), ConflictError("x"),
        ReferentialIntegrityError("User", 1, "assigned_to"), InternalError(),
    ):
        assert isinstance(err, TrackerError)
