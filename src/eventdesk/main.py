"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, CORS, Sentry,
the error envelope handlers, lifespan events for database initialization,
and the API router.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import Response

from src.eventdesk.api.errors import register_error_handlers
from src.eventdesk.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.eventdesk.api.routes.router import router as api_router
from src.eventdesk.config import get_settings
from src.eventdesk.core.database import close_db, get_session, init_db
from src.eventdesk.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.eventdesk.planner.repository import PlannerRepository


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init DB, Sentry and the repository on startup, close on shutdown."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog()
    await init_db()

    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    app.state.planner_repository = PlannerRepository(session_factory=get_session)
    log.info("startup.planner_repository_initialized")

    yield

    app.state.planner_repository = None
    await close_db()
    log.info("shutdown.complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="eventdesk API",
        version="0.1.0",
        description="Event planning backend: events, tracks, tasks, meetings and notes",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    # Middleware is added in reverse order (last added = outermost)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    app.include_router(api_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
