"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness), no database access
    - GET /health/ready returns 503 if the database is unreachable (readiness)
    - Readiness reports the storage dialect and the effective page-size limits
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from tracker.core.pagination import MAX_PAGE_SIZE

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": request.app.title,
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — the task list needs a reachable database."""
    manager = getattr(request.app.state, "db_manager", None)
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        logger.warning("Readiness check failed", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "database": manager.engine.dialect.name,
        "paging": {
            "default_limit": request.app.state.settings.default_page_size,
            "max_limit": MAX_PAGE_SIZE,
        },
    }
