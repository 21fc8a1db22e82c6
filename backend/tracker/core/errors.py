"""Error Hierarchy — typed, categorized exceptions for all tracker failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope: kind + human-readable detail
    - No storage-driver details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TrackerError base: FastAPI global handler catches all
    - Illegal transitions and duplicate handles share ConflictError so callers can
      branch on the category while the code keeps them distinguishable
    - Filter/sort compilers never raise these: filtering is advisory, entity writes are strict
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INTEGRITY = "integrity"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_type: str | None = None
    resource_id: str | None = None
    field: str | None = None


class TrackerError(Exception):
    """Base exception for all tracker errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource_type": self.context.resource_type,
                    "resource_id": self.context.resource_id,
                    "field": self.context.field,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(TrackerError):
    """Malformed or out-of-range entity input."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class NotFoundError(TrackerError):
    """Identifier does not resolve to an existing row."""
    def __init__(
        self, resource_type: str, resource_id: object,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = str(resource_id)
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(TrackerError):
    """Write collides with existing state."""
    def __init__(
        self, message: str, code: str = "CONFLICT",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DuplicateUserError(ConflictError):
    """Username or email already belongs to a different user."""
    def __init__(
        self, field: str, value: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = "User"
        ctx.field = field
        super().__init__(
            f"A user with this {field} already exists: '{value}'",
            "DUPLICATE_USER", ctx,
        )
        self.field = field


class IllegalTransitionError(ConflictError):
    """Requested status change is not a single forward step."""
    def __init__(
        self, current: str, target: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field = "status"
        super().__init__(
            f"Illegal status transition: {current} -> {target}",
            "ILLEGAL_TRANSITION", ctx,
        )
        self.current = current
        self.target = target


class ReferentialIntegrityError(TrackerError):
    """Write references a related row that does not exist."""
    def __init__(
        self, resource_type: str, resource_id: object, field: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = str(resource_id)
        ctx.field = field
        super().__init__(
            f"Referenced {resource_type.lower()} '{resource_id}' does not exist",
            "REFERENCE_NOT_FOUND", ErrorCategory.INTEGRITY,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InternalError(TrackerError):
    """Unexpected failure that callers cannot correct."""
    def __init__(
        self, message: str = "An unexpected error occurred",
        code: str = "INTERNAL_ERROR", context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(
            message, code, ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, http_status,
        )


class DatabaseError(InternalError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", context, 503,
        )
        self.category = ErrorCategory.DATABASE
        self.operation = operation
