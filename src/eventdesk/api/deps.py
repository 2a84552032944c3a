"""FastAPI dependency injection for the planner repository and request locale.

The repository lives on app.state (set in the lifespan, or by tests). The
locale is read from the locale cookie here and handed to endpoints as an
explicit argument.
"""

from __future__ import annotations

from fastapi import Request, status

from src.eventdesk.api.errors import ApiError
from src.eventdesk.config import get_settings
from src.eventdesk.i18n import resolve_locale
from src.eventdesk.planner.repository import PlannerRepository


def get_repository(request: Request) -> PlannerRepository:
    """Retrieve the PlannerRepository from app.state, 503 if not available."""
    repo = getattr(request.app.state, "planner_repository", None)
    if repo is None:
        raise ApiError(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Planner repository not initialized",
        )
    return repo


def get_locale(request: Request) -> str:
    """Resolve the request locale from the locale cookie, falling back to the default."""
    settings = get_settings()
    return resolve_locale(
        request.cookies.get(settings.LOCALE_COOKIE_NAME),
        default=settings.DEFAULT_LOCALE,
    )
