"""Error Handlers — global exception handlers for the tracker API.

Invariants:
    - TrackerError -> structured JSON with error code, message, severity
    - RequestValidationError -> the same envelope as ValidationError plus one detail
      per bad field, 400; field names carry no body/query/path prefix
    - Exception (catch-all) -> never leaks internal details

Design Decisions:
    - Three-layer handler: domain (TrackerError), validation (Pydantic), catch-all (Exception)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from tracker.core.errors import InternalError, TrackerError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_tracker_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_tracker_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        """Handle all tracker domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"TrackerError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic request validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle malformed bodies, query strings and path ids."""
        details = [_describe(e) for e in exc.errors()]
        first = details[0] if details else {"source": "request", "field": None}
        logger.warning(
            f"Validation error on {request.url.path}: {len(details)} field(s)",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        error = ValidationError(
            f"Invalid {first['source']} data", field=first["field"],
        )
        content = error.to_response()
        content["error"]["details"] = details
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=content,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=InternalError().to_response(),
        )


_SOURCES = ("body", "query", "path")


def _describe(error: dict) -> dict:
    """One validation detail: where it came from, which field, what went wrong."""
    loc = [str(part) for part in error["loc"]]
    source = loc[0] if loc and loc[0] in _SOURCES else "request"
    path = loc[1:] if source != "request" else loc
    return {
        "source": source,
        "field": ".".join(path) or None,
        "message": error["msg"],
        "type": error["type"],
    }
