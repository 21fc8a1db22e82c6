"""Tracker API — FastAPI application factory and entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TrackerError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The DatabaseSessionManager lives on app.state, created by the lifespan
      unless one is injected (tests)

Design Decisions:
    - create_app() factory over a configured module global: settings and storage are
      passed in, so each test builds an isolated app
    - Tables created from ORM metadata on startup; there is no migration tooling
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracker.api.error_handlers import register_error_handlers
from tracker.api.routes import health, tasks, users
from tracker.config import Settings, get_settings
from tracker.infrastructure.database import DatabaseSessionManager
from tracker.infrastructure.observability import setup_logging
import tracker.models  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    db_manager: DatabaseSessionManager | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        owns_manager = app.state.db_manager is None
        if owns_manager:
            setup_logging(settings.log_level, settings.log_format)
            app.state.db_manager = DatabaseSessionManager(
                settings.database_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                echo=settings.database_echo,
            )
        if settings.create_tables_on_startup:
            await app.state.db_manager.create_all()
        logger.info("Tracker API started")
        yield
        logger.info("Tracker API shutting down")
        if owns_manager:
            await app.state.db_manager.dispose()
            app.state.db_manager = None

    app = FastAPI(title="Tracker API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db_manager = db_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(tasks.router)

    register_error_handlers(app)
    return app


app = create_app()
